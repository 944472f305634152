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

# corner_detector.py

"""
Finds diagonal corners that row/column seam scanning cannot express as a
gradient, by matching every interior 3x3 neighborhood against a fixed table.

Cells are numbered row-major, c5 is the pixel being tested:

    c1 c2 c3
    c4 c5 c6
    c7 c8 c9

Lighter corner on a dark base (top-left shown). The corner cell c1 is at
least as bright as the base:

    L L L      L L L
    L D D  =>  L C D
    L D .      L D .

Darker corner on a light base (top-left shown). Only the edge-adjacent cells
have to match, and the reference cell is c2:

    . D D      . D D
    D L L  =>  D C L
    D L .      D L .

The split between the two placements makes binarized line art trace as a
continuous outline when the line is darker than its surroundings; a light
line on a dark base is separated into two strokes instead. Boxes with square
corners get one blended pixel per corner either way.
"""

from typing import Any, Callable, NamedTuple, Sequence, Tuple

from mlaa_features import Corner


class CornerRule(NamedTuple):
    """One corner placement: two groups that must each be uniform, plus the reference cell."""
    name: str
    center_group: Tuple[int, ...]
    border_group: Tuple[int, ...]
    corner_cell: int
    lighter: bool   # True: corner cell >= center brightness; False: corner cell < center


CORNER_RULES: Tuple[CornerRule, ...] = (
    # Lighter corner on dark base color
    CornerRule("lighter_top_left", (5, 6, 8), (1, 2, 3, 4, 7), 1, True),
    CornerRule("lighter_top_right", (4, 5, 8), (1, 2, 3, 6, 9), 3, True),
    CornerRule("lighter_bottom_left", (2, 5, 6), (1, 4, 7, 8, 9), 7, True),
    CornerRule("lighter_bottom_right", (2, 5, 4), (3, 6, 7, 8, 9), 9, True),

    # Darker corner on light base color
    CornerRule("darker_top_left", (5, 6, 8), (2, 3, 4, 7), 2, False),
    CornerRule("darker_top_right", (4, 5, 8), (1, 2, 6, 9), 2, False),
    CornerRule("darker_bottom_left", (2, 5, 6), (1, 4, 8, 9), 8, False),
    CornerRule("darker_bottom_right", (2, 5, 4), (3, 6, 7, 8), 8, False),
)

# (dx, dy) of c1..c9
_NEIGHBORHOOD_OFFSETS = tuple((dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1))


def _all_equal(cells: Sequence[Any], indices: Tuple[int, ...]) -> bool:
    first = cells[indices[0]]
    return all(cells[i] == first for i in indices[1:])


def read_neighborhood(pixel_at: Callable[[int, int], Any], x: int, y: int) -> Tuple[Any, ...]:
    """
    Returns the 3x3 block around (x, y) indexed 1..9 as in the module
    docstring. Index 0 is a None placeholder so rule indices read directly.
    """
    return (None,) + tuple(pixel_at(x + dx, y + dy) for dx, dy in _NEIGHBORHOOD_OFFSETS)


def rule_matches(rule: CornerRule, cells: Sequence[Any], brightness_of: Callable[[Any], Any]) -> bool:
    corner, center = cells[rule.corner_cell], cells[5]
    if not (_all_equal(cells, rule.center_group) and _all_equal(cells, rule.border_group)):
        return False
    if corner == center:
        return False
    if rule.lighter:
        return brightness_of(corner) >= brightness_of(center)
    return brightness_of(corner) < brightness_of(center)


def detect_corners(width: int, height: int, pixel_at: Callable[[int, int], Any],
                   brightness_of: Callable[[Any], Any], emit: Callable[[Corner], None]) -> None:
    """
    Emits a Corner for every rule that fires on an interior pixel, in raster
    order and table order within a pixel. Canvases smaller than 3x3 have no
    interior pixels and emit nothing.
    """
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            cells = read_neighborhood(pixel_at, x, y)
            for rule in CORNER_RULES:
                if rule_matches(rule, cells, brightness_of):
                    emit(Corner(x=x, y=y, colors=(cells[rule.corner_cell], cells[5])))
