import sys
import os
import pytest

# Add the root directory to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from corner_detector import CORNER_RULES, detect_corners, read_neighborhood, rule_matches
from mlaa_features import Corner

SENTINEL = 0
DARK, LIGHT = 1, 2


def grid_accessor(rows, sentinel=SENTINEL):
    height, width = len(rows), len(rows[0])

    def pixel_at(x, y):
        if 0 <= x < width and 0 <= y < height:
            return rows[y][x]
        return sentinel
    return pixel_at


def corners_of(rows):
    found = []
    detect_corners(len(rows[0]), len(rows), grid_accessor(rows), lambda c: c, found.append)
    return found


def box(width, height, x1, y1, x2, y2, background, foreground):
    return [
        [foreground if x1 <= x <= x2 and y1 <= y <= y2 else background for x in range(width)]
        for y in range(height)
    ]


def test_rule_table_shape():
    """Four rotations for each of the two brightness placements."""
    assert len(CORNER_RULES) == 8
    assert sum(rule.lighter for rule in CORNER_RULES) == 4
    for rule in CORNER_RULES:
        assert 5 in rule.center_group
        assert rule.corner_cell in rule.border_group
        assert not set(rule.center_group) & set(rule.border_group)


@pytest.mark.parametrize("rule", CORNER_RULES, ids=[rule.name for rule in CORNER_RULES])
def test_each_rule_matches_its_own_pattern(rule):
    base, corner = (DARK, LIGHT) if rule.lighter else (LIGHT, DARK)
    cells = [None] + [3] * 9
    for i in rule.center_group:
        cells[i] = base
    for i in rule.border_group:
        cells[i] = corner

    assert rule_matches(rule, cells, lambda c: c)
    # Swap the brightness ordering and the same geometry must be rejected
    assert not rule_matches(rule, cells, lambda c: -c)


def test_rule_rejects_equal_corner_and_center():
    rule = CORNER_RULES[0]
    cells = [None] + [DARK] * 9
    assert not rule_matches(rule, cells, lambda c: c)


def test_read_neighborhood_is_row_major():
    rows = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
    assert read_neighborhood(grid_accessor(rows), 1, 1) == (None, 1, 2, 3, 4, 5, 6, 7, 8, 9)


def test_light_box_on_dark_gets_four_corners():
    """Darker-on-light placement: one blend per box corner, (background, foreground)."""
    rows = box(4, 4, 1, 1, 2, 2, background=DARK, foreground=LIGHT)

    assert corners_of(rows) == [
        Corner(x=1, y=1, colors=(DARK, LIGHT)),
        Corner(x=2, y=1, colors=(DARK, LIGHT)),
        Corner(x=1, y=2, colors=(DARK, LIGHT)),
        Corner(x=2, y=2, colors=(DARK, LIGHT)),
    ]


def test_dark_box_on_light_gets_four_corners():
    """Lighter-on-dark placement uses the diagonal cell as the corner color."""
    rows = box(6, 6, 2, 2, 3, 3, background=LIGHT, foreground=DARK)

    assert corners_of(rows) == [
        Corner(x=2, y=2, colors=(LIGHT, DARK)),
        Corner(x=3, y=2, colors=(LIGHT, DARK)),
        Corner(x=2, y=3, colors=(LIGHT, DARK)),
        Corner(x=3, y=3, colors=(LIGHT, DARK)),
    ]


def test_single_pixel_plus_has_no_corner():
    """Every rule needs a 2x2 uniform region around the center; a one-pixel plus has none."""
    rows = [
        [DARK, LIGHT, DARK],
        [LIGHT, LIGHT, LIGHT],
        [DARK, LIGHT, DARK],
    ]
    assert corners_of(rows) == []


@pytest.mark.parametrize("width, height", [(2, 5), (5, 2), (1, 1)])
def test_canvas_smaller_than_three_has_no_interior(width, height):
    def pixel_at(x, y):
        raise AssertionError("no neighborhood should be read")

    found = []
    detect_corners(width, height, pixel_at, lambda c: c, found.append)
    assert found == []


def test_line_art_step_places_outline_corners():
    """
    A dark diagonal stroke between two lighter regions gets a corner blended
    on each side of the bend so the trace reads as continuous.
    """
    L, M, D = 3, 2, DARK
    rows = [
        [L, L, L, L, D, D],
        [L, L, L, D, D, D],
        [L, L, L, D, D, M],
        [L, D, D, M, M, M],
        [D, D, D, M, M, M],
        [D, D, M, M, M, M],
    ]
    found = corners_of(rows)

    assert Corner(x=2, y=2, colors=(D, L)) in found
    assert Corner(x=3, y=3, colors=(D, M)) in found
    for corner in found:
        assert rows[corner.y][corner.x] == corner.colors[1]
        assert corner.colors[0] != corner.colors[1]
