"""
Ground truth construction from labeled reference images.

Reference labels are colour images: oil annotated in cyan (brightest once
converted to grayscale), land in green (mid brightness), sea in black.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from sar_oilspill.cste import GroundTruthConfig
from sar_oilspill.general_processing import to_grayscale


@dataclass
class GroundTruth:
    """Decoded reference annotation."""
    oil_mask: np.ndarray
    land_mask: Optional[np.ndarray]
    mask: np.ndarray  # What a segmentation is evaluated against

    @property
    def has_land(self) -> bool:
        return self.land_mask is not None


def build_ground_truth(
    label_image: np.ndarray,
    with_land: bool = False,
    oil_threshold: float = GroundTruthConfig.OIL_THRESHOLD,
    land_threshold: float = GroundTruthConfig.LAND_THRESHOLD
) -> GroundTruth:
    """
    Decode a labeled reference image into binary masks.

    Args:
        label_image: RGB (H, W, 3) or grayscale (H, W) label in [0, 1]
        with_land: True for land + sea scenes
        oil_threshold: Grayscale level above which a pixel is oil
        land_threshold: Grayscale level above which a non-oil pixel is land

    Returns:
        GroundTruth whose `mask` is the oil mask, or the union of oil and
        land masks for land + sea scenes

    Raises:
        ValueError: If the label is neither 2D nor (H, W, 3+)
    """
    if label_image.ndim not in (2, 3) or (label_image.ndim == 3 and label_image.shape[2] < 3):
        raise ValueError(f"label_image must be (H, W) or (H, W, 3), got {label_image.shape}")

    gray = to_grayscale(label_image)
    oil_mask = gray > oil_threshold

    if not with_land:
        return GroundTruth(oil_mask=oil_mask, land_mask=None, mask=oil_mask.copy())

    #! Oil annotations are brighter than land; keep the land class land-only
    land_mask = (gray > land_threshold) & ~oil_mask
    return GroundTruth(
        oil_mask=oil_mask,
        land_mask=land_mask,
        mask=np.logical_or(oil_mask, land_mask)
    )
