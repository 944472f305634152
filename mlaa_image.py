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

# mlaa_image.py

import numpy as np
from typing import List, Tuple

import rgba_color
from config import BlendSpace, MlaaOptions
from mlaa_engine import collect_features
from mlaa_features import MlaaFeature
from mlaa_painter import paint_all


class RgbaCanvas:
    """
    Packed-color view of an RGBA image. Reads outside the image return the
    transparent sentinel; writes outside it are dropped.
    """
    def __init__(self, rgba: np.ndarray, use_numba_jit: bool = True):
        self.use_numba_jit = use_numba_jit
        self.colors = rgba_color.pack_image(rgba, use_numba_jit)
        self.height, self.width = self.colors.shape

    def pixel(self, x: int, y: int) -> int:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return rgba_color.TRANSPARENT
        return int(self.colors[y, x])

    def write_pixel(self, x: int, y: int, color: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.colors[y, x] = color

    def copy(self) -> "RgbaCanvas":
        clone = RgbaCanvas.__new__(RgbaCanvas)
        clone.use_numba_jit = self.use_numba_jit
        clone.colors = self.colors.copy()
        clone.height, clone.width = self.height, self.width
        return clone

    def to_array(self) -> np.ndarray:
        return rgba_color.unpack_image(self.colors, self.use_numba_jit)


def find_features(rgba: np.ndarray, options: MlaaOptions, use_numba_jit: bool = True) -> List[MlaaFeature]:
    """Runs the MLAA scan over an RGBA array and returns its features."""
    canvas = RgbaCanvas(rgba, use_numba_jit)
    return collect_features(canvas.width, canvas.height, canvas.pixel, rgba_color.brightness, options)


def apply_mlaa(rgba: np.ndarray, options: MlaaOptions, blend_space=BlendSpace.LINEAR,
               use_numba_jit: bool = True) -> Tuple[np.ndarray, List[MlaaFeature]]:
    """
    Applies morphological anti-aliasing to an RGBA image.

    Features are detected on the unmodified input and painted onto a copy, so
    the result does not depend on painting order feeding back into detection.

    Args:
        rgba: An (H, W, 4) uint8 RGBA array.
        options: MLAA scan options.
        blend_space: BlendSpace.LINEAR for gamma-correct blending,
                     BlendSpace.ENCODED to mix the stored values directly.
        use_numba_jit: Use the numba kernels for color packing.

    Returns:
        The anti-aliased RGBA array and the list of painted features.
    """
    if rgba is None or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("Input must be an (H, W, 4) RGBA array.")

    blend = rgba_color.get_blend_function(blend_space)

    source = RgbaCanvas(rgba, use_numba_jit)
    features = collect_features(source.width, source.height, source.pixel, rgba_color.brightness, options)

    target = source.copy()
    paint_all(features, blend, target.write_pixel)
    return target.to_array(), features
