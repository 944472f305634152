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

# mlaa_painter.py

import math
from typing import Any, Callable, Tuple

from mlaa_features import Corner, HorizontalGradient, MlaaFeature, VerticalGradient

BlendFunction = Callable[[Any, Any, float], Any]
WritePixel = Callable[[int, int, Any], None]


def gradient_pixel_span(start: float, extent: float) -> Tuple[int, int]:
    """Integer pixel range [first, stop) touched by a gradient."""
    return math.floor(start), math.ceil(start + extent)


def _paint_ramp(first: int, stop: int, colors, blend: BlendFunction, write: Callable[[int, Any], None]):
    span = stop - first
    for pos in range(first, stop):
        t = (0.5 + pos - first) / span
        write(pos, blend(colors[0], colors[1], t))


def paint(feature: MlaaFeature, blend: BlendFunction, write_pixel: WritePixel) -> None:
    """
    Turns one feature into pixel writes.

    Gradients write every pixel they touch, sampling the blend at pixel
    centers from colors[0] to colors[1]. A corner writes the halfway blend of
    its two colors at its own position. `blend` decides the color space.
    """
    if isinstance(feature, VerticalGradient):
        first, stop = gradient_pixel_span(feature.y, feature.height)
        x = int(feature.x)
        _paint_ramp(first, stop, feature.colors, blend, lambda y, color: write_pixel(x, y, color))
    elif isinstance(feature, HorizontalGradient):
        first, stop = gradient_pixel_span(feature.x, feature.width)
        y = int(feature.y)
        _paint_ramp(first, stop, feature.colors, blend, lambda x, color: write_pixel(x, y, color))
    elif isinstance(feature, Corner):
        write_pixel(feature.x, feature.y, blend(feature.colors[0], feature.colors[1], 0.5))
    else:
        raise TypeError(f"Unsupported MLAA feature: {type(feature).__name__}")


def paint_all(features, blend: BlendFunction, write_pixel: WritePixel) -> int:
    """Paints features in order and returns how many pixels were written."""
    written = 0

    def counting_write(x, y, color):
        nonlocal written
        written += 1
        write_pixel(x, y, color)

    for feature in features:
        paint(feature, blend, counting_write)
    return written
