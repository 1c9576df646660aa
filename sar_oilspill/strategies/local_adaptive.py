"""
Local adaptive thresholding strategy.

Strategy:
- Wiener despeckle (noise_filter window)
- Unsharp mask, sharpening only pixels above sharp_threshold contrast
- Gaussian blur (gaussian_filter window)
- Per-pixel threshold from the local neighbourhood mean, inverted
"""

import numpy as np

from sar_oilspill.general_processing import (
    adaptive_threshold,
    apply_gaussian,
    apply_unsharp_mask,
    wiener_filter,
)
from sar_oilspill.parameters import LocalAdaptiveParams


def process_local_adaptive(image: np.ndarray, params: LocalAdaptiveParams) -> np.ndarray:
    """
    Generate the local adaptive candidate mask.

    Args:
        image: Grayscale intensity image (H, W) in [0, 1]
        params: Validated local adaptive parameters

    Returns:
        Boolean candidate mask (H, W), True for pixels darker than their surroundings
    """
    denoised = wiener_filter(image, params.noise_filter)
    sharpened = apply_unsharp_mask(denoised, threshold=params.sharp_threshold)
    blurred = apply_gaussian(sharpened, params.gaussian_filter)

    return ~adaptive_threshold(blurred, sensitivity=params.sensitivity)
