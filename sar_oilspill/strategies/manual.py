"""
Manual thresholding strategy.

Strategy:
- Median despeckle and histogram equalization
- Threshold at the histogram peak (bulk sea intensity) plus a signed offset
- Everything at or below the threshold is an oil candidate
"""

import numpy as np

from sar_oilspill.general_processing import (
    histogram_equalization,
    histogram_peak,
    median_despeckle,
)
from sar_oilspill.logger import get_logger
from sar_oilspill.parameters import ManualParams

log = get_logger(__name__)


def _enhance(image: np.ndarray, params: ManualParams) -> np.ndarray:
    return histogram_equalization(median_despeckle(image, params.median_filter))


def manual_threshold_value(image: np.ndarray, params: ManualParams) -> float:
    """
    Histogram peak of the enhanced image, before the offset is added.

    A driver shows this value so the user can choose the next offset.
    """
    return histogram_peak(_enhance(image, params))


def process_manual(image: np.ndarray, params: ManualParams) -> np.ndarray:
    """
    Generate the manual-threshold candidate mask.

    Args:
        image: Grayscale intensity image (H, W) in [0, 1]
        params: Validated manual parameters

    Returns:
        Boolean candidate mask (H, W), True for dark pixels
    """
    enhanced = _enhance(image, params)
    peak = histogram_peak(enhanced)
    threshold = peak + params.threshold_offset

    log.info(f"Manual threshold: peak={peak:.4f}, offset={params.threshold_offset:+.4f}")

    #! Oil is the dark side of the cut
    return ~(enhanced > threshold)
