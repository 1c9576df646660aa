import matplotlib.pyplot as plt
import numpy as np
import pytest

from sar_oilspill.cste import ConfusionClass, OverlayColors
from sar_oilspill.exceptions import ShapeMismatchError
from sar_oilspill.visualization import (
    colorize_mask,
    confusion_to_rgb,
    land_sea_overlay,
    overlay_mask,
    plot_segmentation_result,
)


def test_colorize_mask_paints_selected_pixels():
    mask = np.zeros((4, 4), dtype=bool)
    mask[1, 1] = True
    rgb = colorize_mask(mask)
    np.testing.assert_array_equal(rgb[1, 1], OverlayColors.OIL)
    assert rgb[0, 0].sum() == 0


def test_overlay_mask_blends_with_alpha():
    image = np.full((3, 3), 0.5)
    mask = np.zeros((3, 3), dtype=bool)
    mask[0, 0] = True
    rgb = overlay_mask(image, mask, color=(1.0, 0.0, 0.0), alpha=0.4)
    np.testing.assert_allclose(rgb[0, 0], (0.7, 0.3, 0.3))
    np.testing.assert_allclose(rgb[2, 2], (0.5, 0.5, 0.5))


def test_overlay_mask_rejects_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        overlay_mask(np.zeros((3, 3)), np.zeros((3, 4), dtype=bool))


def test_land_sea_overlay_uses_both_colors():
    image = np.zeros((2, 2))
    land = np.array([[1, 0], [0, 0]], dtype=bool)
    oil = np.array([[0, 1], [0, 0]], dtype=bool)
    rgb = land_sea_overlay(image, land, oil, alpha=1.0)
    np.testing.assert_array_equal(rgb[0, 0], OverlayColors.LAND)
    np.testing.assert_array_equal(rgb[0, 1], OverlayColors.OIL)
    np.testing.assert_array_equal(rgb[1, 1], (0, 0, 0))


def test_confusion_to_rgb():
    confusion = np.array([[ConfusionClass.TRUE_POSITIVE, ConfusionClass.FALSE_NEGATIVE]], dtype=np.uint8)
    rgb = confusion_to_rgb(confusion)
    np.testing.assert_array_equal(rgb[0, 0], OverlayColors.CONFUSION_COLORS[ConfusionClass.TRUE_POSITIVE])
    np.testing.assert_array_equal(rgb[0, 1], OverlayColors.CONFUSION_COLORS[ConfusionClass.FALSE_NEGATIVE])


@pytest.mark.parametrize("with_confusion, n_axes", [(False, 3), (True, 4)])
def test_plot_segmentation_result_panels(disk_image, disk_truth, with_confusion, n_axes):
    confusion = np.zeros(disk_truth.shape, dtype=np.uint8) if with_confusion else None
    fig = plot_segmentation_result(disk_image, disk_truth, disk_truth, "TEST", confusion=confusion)
    try:
        assert len(fig.axes) == n_axes
    finally:
        plt.close(fig)


def test_plot_segmentation_result_saves_figure(tmp_path, disk_image, disk_truth):
    target = tmp_path / "figure.png"
    fig = plot_segmentation_result(disk_image, disk_truth, disk_truth, "TEST", save_path=str(target))
    plt.close(fig)
    assert target.exists()
