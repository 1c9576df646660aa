"""
Fuzzy logic edge detection strategy.

Strategy:
- Lee filter to reduce speckle while preserving edges
- Directional Sobel gradients, magnitude normalized to [0, 1]
- Fuzzy inference on the magnitude:
    low gradient    -> non-edge (0.0)
    medium gradient -> weak edge (0.5)
    high gradient   -> edge (1.0)
  defuzzified as the membership-weighted mean of the rule outputs
- Close the edge map, fill the enclosed regions
- Keep enclosed regions darker than the image mean
"""

import numpy as np
from scipy import ndimage
from skimage.measure import label, regionprops

from sar_oilspill.cste import ProcessingConfig
from sar_oilspill.general_processing import lee_filter
from sar_oilspill.logger import get_logger
from sar_oilspill.parameters import FuzzyParams
from sar_oilspill.post_treatment import fill_holes, morphological_close

log = get_logger(__name__)

# Rule consequents (zero-order Sugeno singletons)
_NON_EDGE = 0.0
_WEAK_EDGE = 0.5
_EDGE = 1.0


def _gaussian_membership(x: np.ndarray, center: float, sigma: float) -> np.ndarray:
    return np.exp(-((x - center) ** 2) / (2.0 * sigma ** 2))


def gradient_magnitude(img: np.ndarray) -> np.ndarray:
    """Sobel gradient magnitude normalized by its maximum (zeros if flat)."""
    grad_x = ndimage.sobel(img, axis=1, mode="nearest")
    grad_y = ndimage.sobel(img, axis=0, mode="nearest")
    magnitude = np.hypot(grad_x, grad_y)

    peak = magnitude.max()
    if peak == 0:
        return np.zeros_like(magnitude)
    return magnitude / peak


def fuzzy_edge_strength(magnitude: np.ndarray, params: FuzzyParams) -> np.ndarray:
    """
    Infer an edge strength in [0, 1] from a normalized gradient magnitude.

    Args:
        magnitude: Gradient magnitude in [0, 1]
        params: Membership function parameters

    Returns:
        Defuzzified edge strength map
    """
    low = _gaussian_membership(magnitude, 0.0, params.low_sigma)
    medium = _gaussian_membership(magnitude, params.medium_center, params.medium_sigma)
    high = _gaussian_membership(magnitude, 1.0, params.high_sigma)

    firing = low + medium + high
    weighted = _NON_EDGE * low + _WEAK_EDGE * medium + _EDGE * high

    strength = np.zeros_like(magnitude)
    active = firing > 0
    strength[active] = weighted[active] / firing[active]
    return strength


def process_fuzzy(image: np.ndarray, params: FuzzyParams) -> np.ndarray:
    """
    Generate the fuzzy edge detection candidate mask.

    Args:
        image: Grayscale intensity image (H, W) in [0, 1]
        params: Validated fuzzy parameters

    Returns:
        Boolean candidate mask (H, W), dark regions enclosed by fuzzy edges
    """
    despeckled = lee_filter(image, params.filter_size)
    strength = fuzzy_edge_strength(gradient_magnitude(despeckled), params)
    edges = strength > params.edge_threshold

    if not edges.any():
        log.warning("No fuzzy edges found, candidate mask is empty")
        return np.zeros(image.shape, dtype=bool)

    #! Enclosed regions need closed contours
    enclosed = fill_holes(morphological_close(edges, radius=params.closing_radius))

    labeled = label(enclosed, connectivity=ProcessingConfig.CONNECTIVITY)
    reference = despeckled.mean()
    dark_labels = [
        region.label
        for region in regionprops(labeled, intensity_image=despeckled)
        if region.intensity_mean < reference
    ]

    log.info(f"Fuzzy edges: {int(edges.sum())} edge pixels, {len(dark_labels)} dark enclosed regions")

    return np.isin(labeled, dark_labels)
