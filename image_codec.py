"""
Copyright (c) 2025 Aaron Baca

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

# image_codec.py

"""
Reads and writes images as 8-bit RGBA arrays using OpenCV.
Paths may be None, in which case PNG data is read from stdin or written to
stdout.
"""

import os
import sys
import cv2
import numpy as np
from typing import Optional

DEFAULT_EXTENSION = ".png"
_SUPPORTED_EXTENSIONS = {".png", ".bmp", ".tif", ".tiff", ".webp", ".jpg", ".jpeg", ".ppm"}
# Formats OpenCV can write with an alpha channel
_ALPHA_EXTENSIONS = {".png", ".tif", ".tiff", ".webp"}


def extension_for(path: Optional[str]) -> str:
    """Image format extension for a path, falling back to PNG."""
    if path:
        ext = os.path.splitext(path)[1].lower()
        if ext in _SUPPORTED_EXTENSIONS:
            return ext
    return DEFAULT_EXTENSION


def to_rgba8(image: np.ndarray) -> np.ndarray:
    """
    Normalizes an image as returned by cv2.imdecode(IMREAD_UNCHANGED) to an
    (H, W, 4) uint8 RGBA array.
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ValueError(f"Unsupported image depth: {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    channels = image.shape[2]
    if channels == 1:
        return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    raise ValueError(f"Unsupported channel count: {channels}")


def decode_image(data: bytes) -> np.ndarray:
    """Decodes encoded image bytes into an RGBA array."""
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None
    if image is None:
        raise ValueError("Could not decode image data.")
    return to_rgba8(image)


def encode_image(rgba: np.ndarray, extension: str = DEFAULT_EXTENSION) -> bytes:
    """Encodes an RGBA array in the format named by `extension`."""
    if rgba.ndim != 3 or rgba.shape[2] != 4 or rgba.dtype != np.uint8:
        raise ValueError("Image to encode must be an (H, W, 4) uint8 RGBA array.")
    if extension in _ALPHA_EXTENSIONS:
        ok, encoded = cv2.imencode(extension, cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA))
    else:
        ok, encoded = cv2.imencode(extension, cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR))
    if not ok:
        raise ValueError(f"Could not encode image as {extension}.")
    return encoded.tobytes()


def load_image(path: Optional[str] = None) -> np.ndarray:
    """Loads an image from `path`, or from stdin when path is None."""
    if path is None:
        data = sys.stdin.buffer.read()
    else:
        with open(path, 'rb') as f:
            data = f.read()
    return decode_image(data)


def save_image(rgba: np.ndarray, path: Optional[str] = None) -> None:
    """Saves an RGBA array to `path`, or as PNG to stdout when path is None."""
    data = encode_image(rgba, extension_for(path))
    if path is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, 'wb') as f:
        f.write(data)
