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

# rgba_color.py

"""
Packed 8-bit RGBA colors for the image adapter.

A color is a Python int laid out as 0xRRGGBBAA, so equality checks in the
scanner are plain integer comparisons. Blending is offered both in linear
light (sRGB decoded, gamma-correct) and directly on the encoded values.
"""

import numpy as np
import numba
from typing import Callable, Tuple

from config import BlendSpace

# Out-of-bounds sentinel: fully transparent black
TRANSPARENT = 0

# Rec. 601 luma weights
_LUMA_WEIGHTS = (0.3, 0.59, 0.11)


def _build_encoded_to_linear() -> np.ndarray:
    encoded = np.arange(256, dtype=np.float64) / 255.0
    return np.where(encoded > 0.04045, ((encoded + 0.055) / 1.055) ** 2.4, encoded / 12.92)


# sRGB transfer function lookup, indexed by the 8-bit encoded value
ENCODED_TO_LINEAR = _build_encoded_to_linear()


def linear_to_encoded(value: float) -> int:
    """Converts a linear-light channel value (0.0-1.0) to an 8-bit sRGB value."""
    value = min(1.0, max(0.0, value))
    if value > 0.0031308:
        encoded = 1.055 * value ** (1 / 2.4) - 0.055
    else:
        encoded = 12.92 * value
    return int(round(encoded * 255.0))


def pack_rgba(r: int, g: int, b: int, a: int) -> int:
    return (int(r) << 24) | (int(g) << 16) | (int(b) << 8) | int(a)


def unpack_rgba(color: int) -> Tuple[int, int, int, int]:
    return (color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


@numba.jit(nopython=True, cache=True)
def _pack_image_numba(rgba: np.ndarray) -> np.ndarray:
    height, width = rgba.shape[0], rgba.shape[1]
    packed = np.empty((height, width), dtype=np.uint32)
    for y in range(height):
        for x in range(width):
            packed[y, x] = (
                (np.uint32(rgba[y, x, 0]) << 24)
                | (np.uint32(rgba[y, x, 1]) << 16)
                | (np.uint32(rgba[y, x, 2]) << 8)
                | np.uint32(rgba[y, x, 3])
            )
    return packed


@numba.jit(nopython=True, cache=True)
def _unpack_image_numba(packed: np.ndarray) -> np.ndarray:
    height, width = packed.shape
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            value = packed[y, x]
            rgba[y, x, 0] = (value >> 24) & 0xFF
            rgba[y, x, 1] = (value >> 16) & 0xFF
            rgba[y, x, 2] = (value >> 8) & 0xFF
            rgba[y, x, 3] = value & 0xFF
    return rgba


def _pack_image_numpy(rgba: np.ndarray) -> np.ndarray:
    channels = rgba.astype(np.uint32)
    return (channels[..., 0] << 24) | (channels[..., 1] << 16) | (channels[..., 2] << 8) | channels[..., 3]


def _unpack_image_numpy(packed: np.ndarray) -> np.ndarray:
    shifts = np.array([24, 16, 8, 0], dtype=np.uint32)
    return ((packed[..., np.newaxis] >> shifts) & 0xFF).astype(np.uint8)


def pack_image(rgba: np.ndarray, use_numba_jit: bool = True) -> np.ndarray:
    """Packs an (H, W, 4) uint8 RGBA array into an (H, W) uint32 color array."""
    if rgba.ndim != 3 or rgba.shape[2] != 4 or rgba.dtype != np.uint8:
        raise ValueError("Input must be an (H, W, 4) uint8 RGBA array.")
    if use_numba_jit:
        return _pack_image_numba(np.ascontiguousarray(rgba))
    return _pack_image_numpy(rgba)


def unpack_image(packed: np.ndarray, use_numba_jit: bool = True) -> np.ndarray:
    """Inverse of pack_image."""
    if packed.ndim != 2:
        raise ValueError("Packed colors must be a 2D array.")
    packed = packed.astype(np.uint32, copy=False)
    if use_numba_jit:
        return _unpack_image_numba(np.ascontiguousarray(packed))
    return _unpack_image_numpy(packed)


def brightness(color: int) -> float:
    """Linear-light luma premultiplied by alpha; transparent pixels are darkest."""
    r, g, b, a = unpack_rgba(color)
    luma = (
        _LUMA_WEIGHTS[0] * ENCODED_TO_LINEAR[r]
        + _LUMA_WEIGHTS[1] * ENCODED_TO_LINEAR[g]
        + _LUMA_WEIGHTS[2] * ENCODED_TO_LINEAR[b]
    )
    return float(luma * (a / 255.0))


def _lerp(a: float, b: float, t: float) -> float:
    return a * (1.0 - t) + b * t


def blend_linear(color_a: int, color_b: int, t: float) -> int:
    """Gamma-correct blend: RGB is mixed in linear light, alpha linearly."""
    channels_a = unpack_rgba(color_a)
    channels_b = unpack_rgba(color_b)
    rgb = [
        linear_to_encoded(_lerp(ENCODED_TO_LINEAR[channels_a[i]], ENCODED_TO_LINEAR[channels_b[i]], t))
        for i in range(3)
    ]
    alpha = int(_lerp(channels_a[3], channels_b[3], t))
    return pack_rgba(rgb[0], rgb[1], rgb[2], alpha)


def blend_encoded(color_a: int, color_b: int, t: float) -> int:
    """Blend on the stored sRGB values, ignoring gamma."""
    channels_a = unpack_rgba(color_a)
    channels_b = unpack_rgba(color_b)
    mixed = [int(round(_lerp(channels_a[i], channels_b[i], t))) for i in range(4)]
    return pack_rgba(*mixed)


def get_blend_function(blend_space) -> Callable[[int, int, float], int]:
    space = BlendSpace(blend_space)
    if space is BlendSpace.LINEAR:
        return blend_linear
    return blend_encoded
