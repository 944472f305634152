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

# mlaa_features.py

"""
Feature records produced by the MLAA scanner and consumed by the painter.
The three variants carry only data; the painter dispatches on their type.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union

ColorPair = Tuple[Any, Any]


@dataclass(frozen=True)
class VerticalGradient:
    """Gradient running down column `x`, starting at row `y` for `height` rows."""
    x: int
    y: float
    height: float
    colors: ColorPair


@dataclass(frozen=True)
class HorizontalGradient:
    """Gradient running along row `y`, starting at column `x` for `width` columns."""
    x: float
    y: int
    width: float
    colors: ColorPair


@dataclass(frozen=True)
class Corner:
    """Single-pixel blend at a diagonal junction."""
    x: int
    y: int
    colors: ColorPair


MlaaFeature = Union[VerticalGradient, HorizontalGradient, Corner]

FEATURE_KINDS = {
    VerticalGradient: "vertical_gradients",
    HorizontalGradient: "horizontal_gradients",
    Corner: "corners",
}


def count_features(features) -> dict:
    """Counts features per kind, keyed like the option flags that enable them."""
    counts = {name: 0 for name in FEATURE_KINDS.values()}
    for feature in features:
        counts[FEATURE_KINDS[type(feature)]] += 1
    return counts
