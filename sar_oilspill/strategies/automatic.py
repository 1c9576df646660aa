"""
Automatic thresholding strategy.

Strategy:
- Median despeckle and histogram equalization (50 bins)
- Tmax: intensity of the most populated histogram bin
- Tmin: intensity of the least populated non-empty bin
- Tmin == 0: binarize at Tmax; otherwise local adaptive binarization
- Invert, since oil spills are the dark side
"""

import numpy as np
from typing import Optional, Tuple

from sar_oilspill.general_processing import (
    adaptive_threshold,
    histogram_equalization,
    intensity_histogram,
    median_despeckle,
)
from sar_oilspill.logger import get_logger
from sar_oilspill.parameters import AutomaticParams

log = get_logger(__name__)


def histogram_thresholds(image: np.ndarray) -> Optional[Tuple[float, float]]:
    """
    Find (Tmax, Tmin) on the histogram of an enhanced image.

    Returns:
        (Tmax, Tmin), or None when the histogram is degenerate
        (fewer than two populated bins)
    """
    counts, bin_locations = intensity_histogram(image)
    populated = np.flatnonzero(counts)

    if populated.size < 2:
        return None

    t_max = bin_locations[np.argmax(counts)]
    t_min = bin_locations[populated[np.argmin(counts[populated])]]
    return float(t_max), float(t_min)


def automatic_candidate(
    image: np.ndarray,
    median_filter: int,
    sensitivity: float
) -> np.ndarray:
    """
    Automatic-threshold candidate mask from explicit knobs.

    Shared by the automatic strategy and the land/sea compositor.

    Args:
        image: Grayscale image in [0, 1]
        median_filter: Median window size
        sensitivity: Sensitivity of the adaptive fallback

    Returns:
        Boolean candidate mask, True for dark pixels
    """
    enhanced = histogram_equalization(median_despeckle(image, median_filter))
    thresholds = histogram_thresholds(enhanced)

    if thresholds is None:
        log.warning("Degenerate histogram, falling back to adaptive thresholding")
        bright = adaptive_threshold(enhanced, sensitivity=sensitivity)
    else:
        t_max, t_min = thresholds
        log.info(f"Histogram thresholds: Tmax={t_max:.4f}, Tmin={t_min:.4f}")
        if t_min == 0:
            bright = enhanced > t_max
        else:
            bright = adaptive_threshold(enhanced, sensitivity=sensitivity)

    #! Invert: oil spills are the dark regions
    return ~bright


def process_automatic(image: np.ndarray, params: AutomaticParams) -> np.ndarray:
    """
    Generate the automatic-threshold candidate mask.

    Args:
        image: Grayscale intensity image (H, W) in [0, 1]
        params: Validated automatic parameters

    Returns:
        Boolean candidate mask (H, W)
    """
    return automatic_candidate(image, params.median_filter, params.sensitivity)
