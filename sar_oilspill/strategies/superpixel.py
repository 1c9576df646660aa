"""
Superpixel + Otsu strategy.

Strategy:
- Median despeckle
- Over-segment into SLIC superpixels
- Otsu threshold on the per-superpixel mean intensity
- Merge the dark superpixels into the candidate mask

The distance filter that drops dark superpixels scattered far from the main
dark region is applied during refinement (see SuperpixelParams.refinement_kwargs).
"""

import numpy as np
from scipy import ndimage
from skimage.filters import threshold_otsu
from skimage.segmentation import slic

from sar_oilspill.general_processing import median_despeckle
from sar_oilspill.logger import get_logger
from sar_oilspill.parameters import SuperpixelParams

log = get_logger(__name__)


def superpixel_means(image: np.ndarray, superpixels: np.ndarray) -> np.ndarray:
    """Mean intensity of every superpixel label 0..max."""
    labels = np.arange(superpixels.max() + 1)
    return np.asarray(ndimage.mean(image, labels=superpixels, index=labels))


def process_superpixel(image: np.ndarray, params: SuperpixelParams) -> np.ndarray:
    """
    Generate the superpixel + Otsu candidate mask.

    Args:
        image: Grayscale intensity image (H, W) in [0, 1]
        params: Validated superpixel parameters

    Returns:
        Boolean candidate mask (H, W), union of the dark superpixels
    """
    smoothed = median_despeckle(image, params.median_filter)

    superpixels = slic(
        smoothed,
        n_segments=params.num_superpixels,
        compactness=params.compactness,
        channel_axis=None,
        start_label=0
    )
    means = superpixel_means(smoothed, superpixels)
    # Labels missing from the map give NaN means
    populated = ~np.isnan(means)

    if np.ptp(means[populated]) == 0:
        log.warning("Superpixel means are uniform, no dark region to extract")
        return np.zeros(image.shape, dtype=bool)

    threshold = threshold_otsu(means[populated])
    dark_labels = np.flatnonzero(populated & (means <= threshold))

    log.info(
        f"Superpixels: {int(populated.sum())} segments, "
        f"{dark_labels.size} dark (Otsu={threshold:.4f})"
    )

    return np.isin(superpixels, dark_labels)
