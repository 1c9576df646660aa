import json

import numpy as np
import pytest

from sar_oilspill.cste import ConfusionClass
from sar_oilspill.evaluation import (
    compute_bf_score,
    compute_confusion_mask,
    compute_dice,
    compute_jaccard,
    default_tolerance,
    evaluate,
    extract_boundary,
)
from sar_oilspill.exceptions import ShapeMismatchError


def _square(shape=(100, 100), top=40, left=40, side=20):
    mask = np.zeros(shape, dtype=bool)
    mask[top:top + side, left:left + side] = True
    return mask


def test_identical_masks_score_one(disk_truth):
    result = evaluate(disk_truth, disk_truth)
    assert result.jaccard == 1.0
    assert result.dice == 1.0
    assert result.bf_score == 1.0


def test_identical_masks_bf_with_zero_tolerance(disk_truth):
    assert compute_bf_score(disk_truth, disk_truth, tolerance=0)[0] == 1.0


def test_both_masks_empty_score_one():
    empty = np.zeros((30, 30), dtype=bool)
    result = evaluate(empty, empty)
    assert (result.jaccard, result.dice, result.bf_score) == (1.0, 1.0, 1.0)


def test_one_empty_mask_scores_zero(disk_truth):
    empty = np.zeros_like(disk_truth)
    for mask, truth in ((disk_truth, empty), (empty, disk_truth)):
        result = evaluate(mask, truth)
        assert (result.jaccard, result.dice, result.bf_score) == (0.0, 0.0, 0.0)


def test_scores_stay_in_unit_range():
    rng = np.random.default_rng(7)
    for _ in range(5):
        mask = rng.random((40, 40)) > 0.5
        truth = rng.random((40, 40)) > 0.6
        result = evaluate(mask, truth)
        for score in (result.jaccard, result.dice, result.bf_score):
            assert 0.0 <= score <= 1.0
        assert result.dice >= result.jaccard


def test_one_pixel_shift_within_tolerance():
    truth = _square()
    shifted = _square(left=41)

    assert default_tolerance(truth.shape) >= 1.0
    assert compute_bf_score(shifted, truth)[0] == 1.0
    assert compute_jaccard(shifted, truth) == pytest.approx(380 / 420)
    assert compute_dice(shifted, truth) == pytest.approx(760 / 800)


def test_far_boundary_is_not_matched():
    truth = _square(top=10, left=10)
    mask = _square(top=60, left=60)
    assert compute_bf_score(mask, truth) == (0.0, 0.0, 0.0)


def test_shape_mismatch_is_rejected():
    with pytest.raises(ShapeMismatchError):
        evaluate(np.zeros((10, 10), dtype=bool), np.zeros((10, 11), dtype=bool))
    with pytest.raises(ShapeMismatchError):
        compute_jaccard(np.zeros((4, 4)), np.zeros((5, 4)))


def test_extract_boundary_of_square():
    boundary = extract_boundary(_square(side=5))
    assert boundary.sum() == 16
    assert not boundary[42, 42]


def test_confusion_codes():
    mask = np.array([[1, 1], [0, 0]], dtype=bool)
    truth = np.array([[1, 0], [1, 0]], dtype=bool)
    confusion = compute_confusion_mask(mask, truth)
    expected = np.array([
        [ConfusionClass.TRUE_POSITIVE, ConfusionClass.FALSE_POSITIVE],
        [ConfusionClass.FALSE_NEGATIVE, ConfusionClass.BACKGROUND],
    ], dtype=np.uint8)
    np.testing.assert_array_equal(confusion, expected)


def test_as_dict_reports_counts_and_is_json_serializable():
    truth = _square()
    mask = _square(left=41)
    scores = evaluate(mask, truth).as_dict()

    assert scores["true_positive"] == 380
    assert scores["false_positive"] == 20
    assert scores["false_negative"] == 20
    assert scores["background"] == 100 * 100 - 420
    json.dumps(scores)


def test_evaluate_is_not_cached(disk_truth):
    first = evaluate(disk_truth, disk_truth)
    second = evaluate(disk_truth, disk_truth)
    assert first is not second
    assert first.confusion is not second.confusion
