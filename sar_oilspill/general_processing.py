"""
Shared preprocessing and thresholding utilities.

This module provides:
- Speckle reduction filters (median, Lee, Wiener)
- Contrast enhancement (histogram equalization, unsharp masking, Gaussian blur)
- Histogram and local adaptive thresholding primitives used by the strategies

Every function is pure: it returns a new array with the shape of its input.
"""

import numpy as np
import cv2
from scipy import ndimage
from skimage import exposure
from typing import Optional, Tuple

from sar_oilspill.cste import ProcessingConfig
from sar_oilspill.logger import get_logger

log = get_logger(__name__)


# ============================================================================
# CONVERSION
# ============================================================================

def to_grayscale(img: np.ndarray) -> np.ndarray:
    """
    Convert RGB image to grayscale using luminosity method.

    Grayscale input is returned as a float copy.

    Args:
        img: RGB image (H, W, 3) or grayscale image (H, W)

    Returns:
        Grayscale image (H, W)
    """
    if img.ndim == 2:
        return img.astype(np.float64)
    gray = np.dot(img[..., :3], [0.299, 0.587, 0.114])
    # Weights sum to 1 only up to rounding
    return np.clip(gray, 0, img.max())


# ============================================================================
# SPECKLE REDUCTION
# ============================================================================

def median_despeckle(img: np.ndarray, window_size: int = 3) -> np.ndarray:
    """
    Replace each pixel by the median of its window.

    Borders are handled by replicating the nearest pixel so that a bright
    sea does not turn dark along the image frame.

    Args:
        img: Grayscale image in [0, 1]
        window_size: Odd side of the square window

    Returns:
        Filtered image
    """
    return ndimage.median_filter(img.astype(np.float64), size=window_size, mode="nearest")


def compute_local_statistics(img: np.ndarray, window_size: int) -> Tuple[np.ndarray, np.ndarray]:
    """Local mean and (non-negative) local variance over a square window."""
    local_mean = ndimage.uniform_filter(img, size=window_size, mode="nearest")
    local_mean_sq = ndimage.uniform_filter(img ** 2, size=window_size, mode="nearest")
    local_variance = np.maximum(local_mean_sq - local_mean ** 2, 0.0)
    return local_mean, local_variance


def lee_filter(
    img: np.ndarray,
    window_size: int = 5,
    enl: Optional[float] = None
) -> np.ndarray:
    """
    Lee adaptive speckle filter.

    The output blends each pixel toward its local mean:
        out = mean + k * (pixel - mean)
        k   = var_signal / var_local
        var_signal = (var_local - mean^2 / ENL) / (1 + 1 / ENL)
    Homogeneous areas (var_local close to the speckle variance) are smoothed
    strongly, edges (var_local much larger) pass through almost unchanged.

    ! Pixels whose local mean or local variance is zero are left unfiltered.

    Args:
        img: Grayscale image in [0, 1]
        window_size: Odd side of the sliding window
        enl: Effective number of looks. If None it is estimated as the
             median of mean^2 / variance over pixels with non-zero variance.

    Returns:
        Filtered image
    """
    img = img.astype(np.float64)
    local_mean, local_variance = compute_local_statistics(img, window_size)

    valid = (local_mean != 0) & (local_variance > 0)
    if not valid.any():
        return img.copy()

    if enl is None:
        enl = float(np.median(local_mean[valid] ** 2 / local_variance[valid]))
        log.debug(f"Lee filter ENL estimate: {enl:.3f}")
    if enl <= 0:
        return img.copy()

    noise_cv2 = 1.0 / enl
    signal_variance = (local_variance - local_mean ** 2 * noise_cv2) / (1.0 + noise_cv2)
    signal_variance = np.maximum(signal_variance, 0.0)

    out = img.copy()
    weight = signal_variance[valid] / local_variance[valid]
    out[valid] = local_mean[valid] + weight * (img[valid] - local_mean[valid])
    return out


def wiener_filter(
    img: np.ndarray,
    window_size: int = 5,
    noise: Optional[float] = None
) -> np.ndarray:
    """
    Adaptive Wiener filter using local statistics.

    out = mean + max(var - noise, 0) / var * (pixel - mean)

    ! Pixels with zero local variance are left unfiltered.

    Args:
        img: Grayscale image in [0, 1]
        window_size: Odd side of the sliding window
        noise: Noise power. If None, the mean of the local variances is used.

    Returns:
        Filtered image
    """
    img = img.astype(np.float64)
    local_mean, local_variance = compute_local_statistics(img, window_size)

    if noise is None:
        noise = float(local_variance.mean())
        log.debug(f"Wiener noise estimate: {noise:.6f}")

    out = img.copy()
    valid = local_variance > 0
    gain = np.maximum(local_variance[valid] - noise, 0.0) / local_variance[valid]
    out[valid] = local_mean[valid] + gain * (img[valid] - local_mean[valid])
    return out


# ============================================================================
# CONTRAST ENHANCEMENT
# ============================================================================

def histogram_equalization(
    img: np.ndarray,
    nbins: int = ProcessingConfig.HISTEQ_BINS
) -> np.ndarray:
    """
    Histogram equalization over a fixed number of bins.

    Args:
        img: Grayscale image in [0, 1]
        nbins: Number of histogram bins

    Returns:
        Equalized image in [0, 1]
    """
    return exposure.equalize_hist(img.astype(np.float64), nbins=nbins)


def apply_gaussian(img: np.ndarray, filter_size: int = 5) -> np.ndarray:
    """
    Gaussian smoothing with a square kernel of the given odd size.

    The standard deviation is derived from the kernel size.

    Args:
        img: Grayscale image
        filter_size: Odd kernel side

    Returns:
        Smoothed image
    """
    return cv2.GaussianBlur(
        img.astype(np.float64),
        (filter_size, filter_size),
        0,
        borderType=cv2.BORDER_REPLICATE
    )


def apply_unsharp_mask(
    img: np.ndarray,
    radius: float = ProcessingConfig.UNSHARP_RADIUS,
    amount: float = ProcessingConfig.UNSHARP_AMOUNT,
    threshold: float = ProcessingConfig.UNSHARP_THRESHOLD
) -> np.ndarray:
    """
    Unsharp masking with a contrast threshold.

    Only pixels whose high-pass response reaches `threshold` times the
    strongest response are sharpened; flat areas are left untouched.

    Args:
        img: Grayscale image in [0, 1]
        radius: Standard deviation of the Gaussian used for the low-pass
        amount: Sharpening strength
        threshold: Minimum relative contrast in [0, 1] to sharpen a pixel

    Returns:
        Sharpened image clipped to [0, 1]
    """
    img = img.astype(np.float64)
    blurred = ndimage.gaussian_filter(img, sigma=radius, mode="nearest")
    detail = img - blurred

    peak = np.abs(detail).max()
    if peak == 0:
        return img.copy()

    sharpen = np.abs(detail) >= threshold * peak
    out = img.copy()
    out[sharpen] += amount * detail[sharpen]
    return np.clip(out, 0, 1)


# ============================================================================
# THRESHOLDING PRIMITIVES
# ============================================================================

def intensity_histogram(
    img: np.ndarray,
    levels: int = ProcessingConfig.HISTOGRAM_LEVELS
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Histogram of an image in [0, 1] over `levels` evenly spaced intensities.

    Args:
        img: Grayscale image in [0, 1]
        levels: Number of intensity levels

    Returns:
        (counts, bin_locations), both of length `levels`
        - bin_locations[k] = k / (levels - 1)
    """
    indices = np.round(np.clip(img, 0, 1) * (levels - 1)).astype(np.int64)
    counts = np.bincount(indices.ravel(), minlength=levels)
    bin_locations = np.arange(levels) / (levels - 1)
    return counts, bin_locations


def histogram_peak(img: np.ndarray) -> float:
    """Intensity of the most populated histogram bin (mode intensity)."""
    counts, bin_locations = intensity_histogram(img)
    return float(bin_locations[np.argmax(counts)])


def adaptive_block_size(shape: Tuple[int, int]) -> Tuple[int, int]:
    """Odd neighbourhood size of about 1/8 of each image side."""
    fraction = ProcessingConfig.ADAPTIVE_BLOCK_FRACTION
    return tuple(max(3, 2 * (side // fraction) + 1) for side in shape)


def adaptive_threshold(
    img: np.ndarray,
    sensitivity: float = ProcessingConfig.ADAPTIVE_SENSITIVITY,
    block_size: Optional[Tuple[int, int]] = None
) -> np.ndarray:
    """
    Local adaptive binarization (bright foreground).

    A pixel is foreground if it exceeds a fraction of its local mean:
        pixel > local_mean * (1 - ADAPTIVE_SCALE * sensitivity)
    Higher sensitivity lowers the threshold and marks more foreground.

    Args:
        img: Grayscale image in [0, 1]
        sensitivity: Sensitivity in (0, 1)
        block_size: Neighbourhood (rows, cols). Defaults to adaptive_block_size.

    Returns:
        Boolean mask, True for pixels brighter than their surroundings
    """
    if block_size is None:
        block_size = adaptive_block_size(img.shape)

    local_mean = ndimage.uniform_filter(img.astype(np.float64), size=block_size, mode="nearest")
    threshold = local_mean * (1.0 - ProcessingConfig.ADAPTIVE_SCALE * sensitivity)
    return img > threshold
