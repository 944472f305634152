import sys
import os
import cv2
import numpy as np
import pytest

# Add the root directory to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import image_codec
from create_test_images import make_ring_image


@pytest.fixture
def rgba_image():
    image = make_ring_image(10, 8)
    image[0, 0] = (200, 100, 50, 0)
    image[1, 1] = (1, 2, 3, 128)
    return image


def test_png_keeps_rgba_exactly(rgba_image):
    decoded = image_codec.decode_image(image_codec.encode_image(rgba_image, ".png"))
    np.testing.assert_array_equal(decoded, rgba_image)


def test_save_and_load_file(tmp_path, rgba_image):
    path = str(tmp_path / "nested" / "out.png")
    image_codec.save_image(rgba_image, path)

    assert os.path.exists(path)
    np.testing.assert_array_equal(image_codec.load_image(path), rgba_image)


def test_opaque_format_drops_alpha(rgba_image):
    decoded = image_codec.decode_image(image_codec.encode_image(rgba_image, ".bmp"))

    assert decoded.shape == rgba_image.shape
    assert np.all(decoded[..., 3] == 255)
    np.testing.assert_array_equal(decoded[..., :3], rgba_image[..., :3])


def test_grayscale_is_expanded_to_rgba():
    gray = np.array([[0, 64], [128, 255]], dtype=np.uint8)
    ok, encoded = cv2.imencode(".png", gray)
    assert ok

    decoded = image_codec.decode_image(encoded.tobytes())

    assert decoded.shape == (2, 2, 4)
    assert tuple(decoded[1, 0]) == (128, 128, 128, 255)


def test_sixteen_bit_is_reduced_to_eight():
    deep = np.full((2, 3, 3), 0x80FF, dtype=np.uint16)
    rgba = image_codec.to_rgba8(deep)

    assert rgba.dtype == np.uint8
    assert tuple(rgba[0, 0]) == (0x80, 0x80, 0x80, 255)


@pytest.mark.parametrize("data", [b"", b"not an image at all"])
def test_undecodable_bytes_raise(data):
    with pytest.raises(ValueError):
        image_codec.decode_image(data)


def test_encode_rejects_non_rgba():
    with pytest.raises(ValueError):
        image_codec.encode_image(np.zeros((4, 4, 3), dtype=np.uint8))


@pytest.mark.parametrize("path, expected", [
    ("sprite.PNG", ".png"),
    ("dir/frame.bmp", ".bmp"),
    ("scan.tiff", ".tiff"),
    ("notes.txt", ".png"),
    ("no_extension", ".png"),
    (None, ".png"),
])
def test_extension_for(path, expected):
    assert image_codec.extension_for(path) == expected
