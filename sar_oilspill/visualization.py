"""
Visualization adapter: overlay images and comparison figures.

The core pipeline never touches display state; these helpers only turn
masks into RGB arrays or matplotlib figures for a driver to show or save.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Tuple

from sar_oilspill.cste import OverlayColors
from sar_oilspill.exceptions import ShapeMismatchError


def colorize_mask(
    mask: np.ndarray,
    color: Tuple[float, float, float] = OverlayColors.OIL
) -> np.ndarray:
    """
    Paint a binary mask on a black background.

    Returns:
        RGB float image (H, W, 3) in [0, 1]
    """
    rgb = np.zeros(mask.shape + (3,), dtype=np.float64)
    rgb[mask.astype(bool)] = color
    return rgb


def _as_rgb(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return np.repeat(image[..., np.newaxis], 3, axis=2).astype(np.float64)
    return image[..., :3].astype(np.float64)


def overlay_mask(
    image: np.ndarray,
    mask: np.ndarray,
    color: Tuple[float, float, float] = OverlayColors.OIL,
    alpha: float = OverlayColors.ALPHA
) -> np.ndarray:
    """
    Alpha-blend a colored mask over an image.

    Args:
        image: Grayscale (H, W) or RGB (H, W, 3) image in [0, 1]
        mask: Binary mask (H, W)
        color: RGB overlay color in [0, 1]
        alpha: Opacity of the overlay on masked pixels

    Returns:
        RGB float image (H, W, 3) in [0, 1]
    """
    if image.shape[:2] != mask.shape:
        raise ShapeMismatchError(f"Shape mismatch: {image.shape[:2]} vs {mask.shape}")

    rgb = _as_rgb(image)
    selected = mask.astype(bool)
    rgb[selected] = (1 - alpha) * rgb[selected] + alpha * np.asarray(color)
    return rgb


def land_sea_overlay(
    image: np.ndarray,
    land_mask: np.ndarray,
    oil_mask: np.ndarray,
    alpha: float = OverlayColors.ALPHA
) -> np.ndarray:
    """Land drawn in green, oil in cyan, over the original image."""
    rgb = overlay_mask(image, land_mask, OverlayColors.LAND, alpha)
    return overlay_mask(rgb, oil_mask, OverlayColors.OIL, alpha)


def confusion_to_rgb(confusion: np.ndarray) -> np.ndarray:
    """
    Render a confusion mask (ConfusionClass codes) as an RGB image.

    Returns:
        RGB float image (H, W, 3) in [0, 1]
    """
    rgb = np.zeros(confusion.shape + (3,), dtype=np.float64)
    for code, color in OverlayColors.CONFUSION_COLORS.items():
        rgb[confusion == code] = color
    return rgb


def plot_segmentation_result(
    image: np.ndarray,
    mask: np.ndarray,
    ground_truth: np.ndarray,
    title: str,
    confusion: Optional[np.ndarray] = None,
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Figure comparing ground truth, computed mask and overlay.

    Args:
        image: Original grayscale image
        mask: Computed binary mask
        ground_truth: Ground truth mask or RGB label
        title: Strategy title used in subplot titles
        confusion: Optional confusion mask, drawn as a fourth panel
        save_path: If given, the figure is saved there

    Returns:
        The matplotlib figure (caller closes it)
    """
    n_panels = 4 if confusion is not None else 3
    fig, axes = plt.subplots(1, n_panels, figsize=(5 * n_panels, 5))

    axes[0].imshow(ground_truth, cmap="gray")
    axes[0].set_title("Ground Truth")

    axes[1].imshow(colorize_mask(mask))
    axes[1].set_title(f"{title}: MASK")

    axes[2].imshow(overlay_mask(image, mask))
    axes[2].set_title(f"{title}: overlay")

    if confusion is not None:
        axes[3].imshow(confusion_to_rgb(confusion))
        axes[3].set_title("Confusion (green TP, red FP, magenta FN)")

    for ax in axes:
        ax.axis("off")

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig
