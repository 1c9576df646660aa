import numpy as np
import pytest

from sar_oilspill.ground_truth import build_ground_truth


@pytest.fixture
def rgb_label():
    """Sea in black, oil in cyan on the right, land in green on the left."""
    label = np.zeros((20, 30, 3))
    label[5:10, 20:25] = (0.0, 1.0, 1.0)
    label[:, :8] = (0.0, 1.0, 0.0)
    return label


def test_sea_only_truth_is_the_oil_annotation(rgb_label):
    truth = build_ground_truth(rgb_label)
    assert not truth.has_land
    assert truth.land_mask is None
    assert truth.mask.sum() == 25
    assert truth.mask[5:10, 20:25].all()
    np.testing.assert_array_equal(truth.mask, truth.oil_mask)


def test_land_sea_truth_is_union_of_oil_and_land(rgb_label):
    truth = build_ground_truth(rgb_label, with_land=True)
    assert truth.has_land
    assert truth.land_mask[:, :8].all()
    assert not truth.oil_mask[:, :8].any()
    assert not truth.land_mask[5:10, 20:25].any()
    assert truth.mask.sum() == 25 + 20 * 8


def test_grayscale_label_is_accepted():
    label = np.zeros((10, 10))
    label[2:4, 2:4] = 1.0
    label[6:8, 6:8] = 0.5
    truth = build_ground_truth(label, with_land=True)
    assert truth.oil_mask.sum() == 4
    assert truth.land_mask.sum() == 4
    assert not (truth.land_mask & truth.oil_mask).any()
    assert truth.mask.sum() == 8


def test_custom_thresholds():
    label = np.full((4, 4), 0.6)
    assert build_ground_truth(label, oil_threshold=0.5).mask.all()


def test_malformed_label_is_rejected():
    with pytest.raises(ValueError):
        build_ground_truth(np.zeros((4, 4, 2)))
    with pytest.raises(ValueError):
        build_ground_truth(np.zeros(10))
