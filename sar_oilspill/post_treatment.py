"""
Post-processing pipeline shared by every segmentation strategy.

Processing order:
    1. Morphological opening with a small disk (erase isolated pixels)
    2. Hole filling (close interior gaps of detected regions)
    3. Connected-component labeling (8-connectivity)
    4. Optional distance filter around the largest blob (superpixel strategy)
    5. Area filter: keep blobs with area strictly greater than min_area
    6. Optional cap on the number of blobs, largest first (K-Means strategy)

The final mask is the union of the surviving blobs.
"""

import numpy as np
import cv2
from scipy import ndimage
from skimage.measure import label, regionprops
from skimage.morphology import diamond, disk
from typing import List, Optional

from sar_oilspill.cste import ProcessingConfig
from sar_oilspill.logger import get_logger

log = get_logger(__name__)


# ============================================================================
# MORPHOLOGY
# ============================================================================

def _morphology(mask: np.ndarray, operation: int, footprint: np.ndarray) -> np.ndarray:
    result = cv2.morphologyEx(mask.astype(np.uint8), operation, footprint.astype(np.uint8))
    return result.astype(bool)


def morphological_open(mask: np.ndarray, radius: int = ProcessingConfig.OPENING_RADIUS) -> np.ndarray:
    """
    Binary opening with a disk structuring element.

    Args:
        mask: Boolean mask (H, W)
        radius: Disk radius in pixels

    Returns:
        Opened boolean mask
    """
    return _morphology(mask, cv2.MORPH_OPEN, disk(radius))


def morphological_close(mask: np.ndarray, radius: int = ProcessingConfig.OPENING_RADIUS) -> np.ndarray:
    """Binary closing with a disk structuring element."""
    return _morphology(mask, cv2.MORPH_CLOSE, disk(radius))


def close_then_open_diamond(mask: np.ndarray, radius: int = ProcessingConfig.LAND_MORPH_RADIUS) -> np.ndarray:
    """
    Closing followed by opening with a diamond structuring element.

    Used to clean land masks: closing fills small holes in land masses,
    opening removes isolated bright pixels on the sea.
    """
    footprint = diamond(radius)
    closed = _morphology(mask, cv2.MORPH_CLOSE, footprint)
    return _morphology(closed, cv2.MORPH_OPEN, footprint)


def fill_holes(mask: np.ndarray) -> np.ndarray:
    """Fill background regions fully enclosed by foreground."""
    return ndimage.binary_fill_holes(mask)


# ============================================================================
# BLOB FILTERING
# ============================================================================

def _distance_filter(regions: List, max_distance: float) -> List:
    """Keep regions whose centroid lies within max_distance of the largest one."""
    primary = max(regions, key=lambda region: region.area)
    reference = np.asarray(primary.centroid)

    kept = []
    for region in regions:
        distance = np.linalg.norm(np.asarray(region.centroid) - reference)
        if distance <= max_distance:
            kept.append(region)

    log.info(f"Distance filter: kept {len(kept)}/{len(regions)} blobs within {max_distance:.1f}px")
    return kept


def filter_blobs(
    mask: np.ndarray,
    min_area: int,
    max_distance: Optional[float] = None,
    max_blobs: Optional[int] = None,
    connectivity: int = ProcessingConfig.CONNECTIVITY
) -> np.ndarray:
    """
    Keep connected components by area (and optionally distance and rank).

    ! Comparison is strict: a blob of area exactly min_area is dropped.

    Args:
        mask: Boolean mask (H, W)
        min_area: Blobs must have area > min_area to survive
        max_distance: If given, drop blobs whose centroid is farther than this
                      from the centroid of the largest blob (applied first)
        max_blobs: If given, keep at most this many blobs, largest first
        connectivity: 1 for 4-connectivity, 2 for 8-connectivity

    Returns:
        Boolean mask made of the surviving blobs
    """
    labeled = label(mask, connectivity=connectivity)
    regions = regionprops(labeled)

    if not regions:
        return np.zeros(mask.shape, dtype=bool)

    if max_distance is not None:
        regions = _distance_filter(regions, max_distance)

    kept = [region for region in regions if region.area > min_area]

    if max_blobs is not None and len(kept) > max_blobs:
        kept = sorted(kept, key=lambda region: region.area, reverse=True)[:max_blobs]

    log.info(f"Blob filter: kept {len(kept)}/{len(regions)} blobs with area > {min_area}")

    return np.isin(labeled, [region.label for region in kept])


# ============================================================================
# PIPELINE
# ============================================================================

def refine_candidate(
    candidate: np.ndarray,
    min_area: int,
    opening_radius: int = ProcessingConfig.OPENING_RADIUS,
    max_distance: Optional[float] = None,
    max_blobs: Optional[int] = None
) -> np.ndarray:
    """
    Turn a raw candidate mask into a clean binary mask.

    Args:
        candidate: Raw boolean mask from a segmentation strategy (H, W)
        min_area: Minimum blob area (strict)
        opening_radius: Radius of the opening disk
        max_distance: Optional distance filter around the largest blob
        max_blobs: Optional cap on the number of blobs kept

    Returns:
        New boolean mask (H, W); the candidate is never modified

    Example:
        >>> clean = refine_candidate(raw_mask, min_area=45)
    """
    opened = morphological_open(candidate, radius=opening_radius)
    filled = fill_holes(opened)
    return filter_blobs(
        filled,
        min_area=min_area,
        max_distance=max_distance,
        max_blobs=max_blobs
    )
