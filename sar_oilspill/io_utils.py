"""
Input/Output utilities for image loading and saving.
"""

import numpy as np
from PIL import Image
import os

from sar_oilspill.logger import get_logger

log = get_logger("io_utils")


def load_image(
    img_path: str, normalize: bool = True, one_channel: bool = False
) -> np.ndarray:
    """
    Load an image from file path.

    Args:
        img_path: Path to image file
        normalize: If True, normalize to [0, 1], else keep [0, 255]
        one_channel: If True, load as grayscale mono channel

    Returns:
        Image as numpy array
        - shape (H, W) if one_channel else (H, W, 3)
        - float64 in [0, 1] if normalize, else uint8 in [0, 255]

    Raises:
        FileNotFoundError: If image path does not exist
        ValueError: If image cannot be decoded
    """
    if not os.path.exists(img_path):
        raise FileNotFoundError(f"Image not found: {img_path}")

    try:
        img = Image.open(img_path).convert("RGB")
        if one_channel:  # convert to grayscale if requested
            img = img.convert("L")
    except OSError as e:
        raise ValueError(f"Failed to load image {img_path}: {e}") from e

    img_array = np.array(img)

    if normalize:
        return img_array.astype(np.float64) / 255.0
    return img_array.astype(np.uint8)


def save_mask(mask: np.ndarray, save_path: str) -> None:
    """
    Save a binary mask to disk as an 8-bit PNG (0 / 255).

    Args:
        mask: 2D boolean mask
        save_path: Output file path
    """
    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    Image.fromarray(mask.astype(np.uint8) * 255).save(save_path)
    log.info(f"Saved mask to {save_path}")


def save_rgb(image: np.ndarray, save_path: str) -> None:
    """Save an RGB float image in [0, 1] as an 8-bit PNG."""
    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    Image.fromarray(np.round(np.clip(image, 0, 1) * 255).astype(np.uint8)).save(save_path)
    log.info(f"Saved image to {save_path}")


def get_filename_noext(path: str) -> str:
    """Return the file name without its extension from a given path.
    Example : '/path/to/file/image.jpg' -> 'image'
    """
    filename = os.path.basename(path)
    name, _ = os.path.splitext(filename)
    return name
