"""Shared synthetic scenes for the test suite."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


def make_disk(shape, center, radius):
    yy, xx = np.ogrid[:shape[0], :shape[1]]
    return (yy - center[0]) ** 2 + (xx - center[1]) ** 2 <= radius ** 2


@pytest.fixture
def disk_truth():
    """Radius-10 disk at the centre of a 100x100 frame."""
    return make_disk((100, 100), (50, 50), 10)


@pytest.fixture
def disk_image(disk_truth):
    """Bright sea (0.9) with a dark oil disk (0.1)."""
    image = np.full((100, 100), 0.9)
    image[disk_truth] = 0.1
    return image


@pytest.fixture
def noisy_image():
    """Non-square speckled scene, used for shape invariants."""
    rng = np.random.default_rng(0)
    image = np.clip(0.7 + 0.1 * rng.standard_normal((64, 80)), 0, 1)
    image[20:40, 30:55] = np.clip(0.2 + 0.05 * rng.standard_normal((20, 25)), 0, 1)
    return image


@pytest.fixture
def land_scene():
    """
    Land on the left 30 columns (0.95), sea (0.5) and an oil disk (0.1).

    Returns:
        (image, land_truth, oil_truth)
    """
    shape = (100, 100)
    land = np.zeros(shape, dtype=bool)
    land[:, :30] = True
    oil = make_disk(shape, (50, 65), 10)

    image = np.full(shape, 0.5)
    image[land] = 0.95
    image[oil] = 0.1
    return image, land, oil
