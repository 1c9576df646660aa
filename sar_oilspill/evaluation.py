"""
Evaluation metrics for binary oil spill segmentation.

This module implements Jaccard, Dice and Boundary-F1 scores between a
computed mask and a ground truth mask, plus a per-pixel confusion map used
by the visualization adapter.

Conventions:
- Both masks empty: Jaccard = Dice = BF = 1.0 (agreement on "nothing")
- Exactly one mask empty: every score is 0.0
- Masks of different shapes: ShapeMismatchError, nothing is cropped or resized
"""

import numpy as np
from dataclasses import dataclass, field
from scipy import ndimage
from typing import Any, Dict, Optional, Tuple

from sar_oilspill.cste import ConfusionClass, ProcessingConfig
from sar_oilspill.exceptions import ShapeMismatchError
from sar_oilspill.logger import get_logger

log = get_logger(__name__)


@dataclass
class EvaluationResult:
    """Scores of one (mask, ground truth) comparison."""
    jaccard: float
    dice: float
    bf_score: float
    bf_precision: float
    bf_recall: float
    confusion: np.ndarray = field(repr=False)

    def as_dict(self) -> Dict[str, Any]:
        """Scalar scores plus confusion pixel counts, JSON serializable."""
        counts = np.bincount(self.confusion.ravel(), minlength=len(ConfusionClass.CLASS_NAMES))
        return {
            "jaccard": self.jaccard,
            "dice": self.dice,
            "bf_score": self.bf_score,
            "bf_precision": self.bf_precision,
            "bf_recall": self.bf_recall,
            "true_positive": int(counts[ConfusionClass.TRUE_POSITIVE]),
            "false_positive": int(counts[ConfusionClass.FALSE_POSITIVE]),
            "false_negative": int(counts[ConfusionClass.FALSE_NEGATIVE]),
            "background": int(counts[ConfusionClass.BACKGROUND]),
        }


def _check_pair(mask: np.ndarray, ground_truth: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    if mask.shape != ground_truth.shape:
        raise ShapeMismatchError(f"Shape mismatch: {mask.shape} vs {ground_truth.shape}")
    return mask.astype(bool), ground_truth.astype(bool)


# ============================================================================
# AREA OVERLAP METRICS
# ============================================================================

def compute_jaccard(mask: np.ndarray, ground_truth: np.ndarray) -> float:
    """
    Jaccard index (IoU) between two binary masks.

    Jaccard = |A ∩ B| / |A ∪ B|

    Example:
        >>> a = np.array([[1, 1], [0, 0]], dtype=bool)
        >>> b = np.array([[1, 0], [0, 0]], dtype=bool)
        >>> compute_jaccard(a, b)
        0.5
    """
    mask, ground_truth = _check_pair(mask, ground_truth)

    intersection = np.logical_and(mask, ground_truth).sum()
    union = np.logical_or(mask, ground_truth).sum()

    # Handle edge case: both masks empty
    if union == 0:
        return 1.0
    return float(intersection) / float(union)


def compute_dice(mask: np.ndarray, ground_truth: np.ndarray) -> float:
    """
    Dice coefficient between two binary masks.

    Dice = 2 × |A ∩ B| / (|A| + |B|)

    Note:
        Dice = 2*IoU / (1+IoU), so Dice is always >= Jaccard
    """
    mask, ground_truth = _check_pair(mask, ground_truth)

    intersection = np.logical_and(mask, ground_truth).sum()
    total = mask.sum() + ground_truth.sum()

    if total == 0:
        return 1.0
    return 2.0 * float(intersection) / float(total)


# ============================================================================
# BOUNDARY F1
# ============================================================================

def extract_boundary(mask: np.ndarray) -> np.ndarray:
    """
    Inner boundary of a binary mask.

    A foreground pixel is on the boundary when one of its 4-neighbours is
    background; pixels on the image frame count as boundary.
    """
    mask = mask.astype(bool)
    eroded = ndimage.binary_erosion(mask, border_value=0)
    return mask & ~eroded


def default_tolerance(shape: Tuple[int, ...]) -> float:
    """BF distance tolerance: BF_TOLERANCE_RATIO of the image diagonal."""
    return ProcessingConfig.BF_TOLERANCE_RATIO * float(np.hypot(shape[0], shape[1]))


def compute_bf_score(
    mask: np.ndarray,
    ground_truth: np.ndarray,
    tolerance: Optional[float] = None
) -> Tuple[float, float, float]:
    """
    Boundary F1 score.

    A boundary pixel of one mask is matched when a boundary pixel of the
    other mask lies within `tolerance` pixels (Euclidean distance).

    Args:
        mask: Computed binary mask (H, W)
        ground_truth: Ground truth binary mask (H, W)
        tolerance: Match distance in pixels. Defaults to 0.75% of the diagonal.

    Returns:
        (bf_score, precision, recall), all in [0, 1]
    """
    mask, ground_truth = _check_pair(mask, ground_truth)

    if tolerance is None:
        tolerance = default_tolerance(mask.shape)

    mask_boundary = extract_boundary(mask)
    truth_boundary = extract_boundary(ground_truth)

    n_mask = int(mask_boundary.sum())
    n_truth = int(truth_boundary.sum())

    if n_mask == 0 and n_truth == 0:
        return 1.0, 1.0, 1.0
    if n_mask == 0 or n_truth == 0:
        return 0.0, 0.0, 0.0

    #! Distance from every pixel to the nearest boundary pixel of the other mask
    dist_to_truth = ndimage.distance_transform_edt(~truth_boundary)
    dist_to_mask = ndimage.distance_transform_edt(~mask_boundary)

    precision = float((dist_to_truth[mask_boundary] <= tolerance).sum()) / n_mask
    recall = float((dist_to_mask[truth_boundary] <= tolerance).sum()) / n_truth

    if precision + recall == 0:
        return 0.0, precision, recall

    bf_score = 2.0 * precision * recall / (precision + recall)
    return bf_score, precision, recall


# ============================================================================
# CONFUSION MAP
# ============================================================================

def compute_confusion_mask(mask: np.ndarray, ground_truth: np.ndarray) -> np.ndarray:
    """
    Per-pixel confusion classification.

    Returns:
        uint8 array (H, W) with ConfusionClass codes:
        TRUE_POSITIVE (both), FALSE_POSITIVE (mask only),
        FALSE_NEGATIVE (truth only), BACKGROUND (neither)
    """
    mask, ground_truth = _check_pair(mask, ground_truth)

    confusion = np.full(mask.shape, ConfusionClass.BACKGROUND, dtype=np.uint8)
    confusion[mask & ground_truth] = ConfusionClass.TRUE_POSITIVE
    confusion[mask & ~ground_truth] = ConfusionClass.FALSE_POSITIVE
    confusion[~mask & ground_truth] = ConfusionClass.FALSE_NEGATIVE
    return confusion


# ============================================================================
# EVALUATION
# ============================================================================

def evaluate(
    mask: np.ndarray,
    ground_truth: np.ndarray,
    tolerance: Optional[float] = None
) -> EvaluationResult:
    """
    Score a final mask against the ground truth.

    Computed fresh on every call, nothing is cached.

    Args:
        mask: Final binary mask (H, W)
        ground_truth: Ground truth binary mask (H, W)
        tolerance: Optional BF tolerance in pixels

    Returns:
        EvaluationResult with Jaccard, Dice, BF (and its precision/recall)
        and the confusion mask

    Raises:
        ShapeMismatchError: If the masks differ in shape
    """
    mask, ground_truth = _check_pair(mask, ground_truth)

    bf_score, bf_precision, bf_recall = compute_bf_score(mask, ground_truth, tolerance)
    return EvaluationResult(
        jaccard=compute_jaccard(mask, ground_truth),
        dice=compute_dice(mask, ground_truth),
        bf_score=bf_score,
        bf_precision=bf_precision,
        bf_recall=bf_recall,
        confusion=compute_confusion_mask(mask, ground_truth)
    )


def log_evaluation_summary(result: EvaluationResult, title: str = "EVALUATION SUMMARY") -> None:
    """
    Log a formatted evaluation summary.

    Args:
        result: Evaluation result
        title: Header line, usually the strategy title
    """
    scores = result.as_dict()

    log.info("=" * 50)
    log.info(title)
    log.info("=" * 50)
    log.info(f"  Jaccard:   {scores['jaccard']:.4f}")
    log.info(f"  Dice:      {scores['dice']:.4f}")
    log.info(f"  BF score:  {scores['bf_score']:.4f} "
             f"(precision {scores['bf_precision']:.4f}, recall {scores['bf_recall']:.4f})")
    log.info(f"  TP={scores['true_positive']}  FP={scores['false_positive']}  "
             f"FN={scores['false_negative']}")
    log.info("=" * 50)
