import numpy as np
import pytest
from PIL import Image

from sar_oilspill.io_utils import get_filename_noext, load_image, save_mask, save_rgb


def test_load_image_normalizes_to_unit_range(tmp_path):
    path = tmp_path / "scene.png"
    Image.fromarray(np.full((5, 6), 255, dtype=np.uint8)).save(path)

    img = load_image(str(path))
    assert img.shape == (5, 6, 3)
    assert img.dtype == np.float64
    np.testing.assert_allclose(img, 1.0)


def test_load_image_one_channel_raw(tmp_path):
    path = tmp_path / "scene.png"
    Image.fromarray(np.full((5, 6), 51, dtype=np.uint8)).save(path)

    img = load_image(str(path), normalize=False, one_channel=True)
    assert img.shape == (5, 6)
    assert img.dtype == np.uint8
    assert (img == 51).all()


def test_load_image_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(str(tmp_path / "missing.png"))


def test_load_image_undecodable_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ValueError):
        load_image(str(path))


def test_save_mask_writes_binary_png(tmp_path):
    mask = np.zeros((4, 4), dtype=bool)
    mask[1:3, 1:3] = True
    path = tmp_path / "out" / "mask.png"

    save_mask(mask, str(path))

    saved = np.array(Image.open(path))
    assert set(np.unique(saved)) == {0, 255}
    np.testing.assert_array_equal(saved == 255, mask)


def test_save_rgb_round_trips_colors(tmp_path):
    image = np.zeros((2, 2, 3))
    image[0, 0] = (0.0, 1.0, 1.0)
    path = tmp_path / "overlay.png"

    save_rgb(image, str(path))

    saved = np.array(Image.open(path))
    np.testing.assert_array_equal(saved[0, 0], (0, 255, 255))


def test_get_filename_noext():
    assert get_filename_noext("/path/to/file/image.jpg") == "image"
