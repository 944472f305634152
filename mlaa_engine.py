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

# mlaa_engine.py

"""
Seam detection and gradient construction for morphological anti-aliasing
of flat-color images.

Both scan directions share one implementation. A scan line sits between two
adjacent columns (vertical pass) or rows (horizontal pass) and is read through
a `pair_at(line, pos)` accessor that returns the two pixels straddling it at
position `pos` along the line.
"""

from typing import Any, Callable, Iterator, List, NamedTuple, Tuple

from config import MlaaOptions
from mlaa_features import HorizontalGradient, MlaaFeature, VerticalGradient
from corner_detector import detect_corners

PairAccessor = Callable[[int, int], Tuple[Any, Any]]


class Seam(NamedTuple):
    """A run along one scan line where the straddling pair differs and stays constant."""
    line: int
    start: int
    length: int
    colors: Tuple[Any, Any]


def vertical_pairs(pixel_at: Callable[[int, int], Any]) -> PairAccessor:
    """Pairs across the boundary between column `line` and `line + 1`."""
    return lambda line, pos: (pixel_at(line, pos), pixel_at(line + 1, pos))


def horizontal_pairs(pixel_at: Callable[[int, int], Any]) -> PairAccessor:
    """Pairs across the boundary between row `line` and `line + 1`."""
    return lambda line, pos: (pixel_at(pos, line), pixel_at(pos, line + 1))


def _is_flat(pair) -> bool:
    return pair[0] == pair[1]


def run_length(pair_at: PairAccessor, line: int, start: int, limit: int,
               predicate: Callable[[Tuple[Any, Any]], bool]) -> int:
    """
    Counts consecutive positions from `start` where `predicate` holds for the
    pixel pair, stopping at `limit`. The bound is checked before the pixels
    are read.
    """
    length = 0
    while start + length < limit and predicate(pair_at(line, start + length)):
        length += 1
    return length


def find_seams(pair_at: PairAccessor, line: int, limit: int) -> Iterator[Seam]:
    """Yields every seam along one scan line in increasing position order."""
    pos = run_length(pair_at, line, 0, limit, _is_flat)

    while pos < limit:
        seam_colors = pair_at(line, pos)
        seam_length = run_length(pair_at, line, pos, limit, lambda pair: pair == seam_colors)

        yield Seam(line, pos, seam_length, seam_colors)

        pos += seam_length
        pos += run_length(pair_at, line, pos, limit, _is_flat)


def match_neighbor(pair_at: PairAccessor, seam: Seam, delta: int, limit: int,
                   brightness_of: Callable[[Any], Any], options: MlaaOptions) -> Tuple[int, Tuple[Any, Any]]:
    """
    Measures how far the seam continues on the adjacent line `seam.line + delta`,
    starting right where the seam ends.

    Returns the matched run length (0 when rejected) and the pair found at the
    start of the neighbor run.
    """
    probe = seam.start + seam.length
    seam_colors = seam.colors
    neighbor_colors = pair_at(seam.line + delta, probe)

    if options.seam_brightness_balance:
        seam_order = brightness_of(seam_colors[0]) < brightness_of(seam_colors[1])
        neighbor_order = brightness_of(neighbor_colors[0]) < brightness_of(neighbor_colors[1])
        if seam_order != neighbor_order:
            return 0, neighbor_colors

    if options.strict_mode:
        length = run_length(pair_at, seam.line + delta, probe, limit, lambda pair: pair == seam_colors)
        return length, neighbor_colors

    # Relaxed: the outer color of the neighbor may differ from the seam, as
    # long as the other side stays the same and the pair is still an edge.
    outer_changed = run_length(
        pair_at, seam.line + delta, probe, limit,
        lambda pair: pair[0] == neighbor_colors[0] and pair[1] == seam_colors[1] and pair[0] != pair[1],
    )
    inner_changed = run_length(
        pair_at, seam.line + delta, probe, limit,
        lambda pair: pair[0] == seam_colors[0] and pair[1] == neighbor_colors[1] and pair[0] != pair[1],
    )
    return max(outer_changed, inner_changed), neighbor_colors


def build_gradient(seam: Seam, delta: int, neighbor_length: int, neighbor_colors: Tuple[Any, Any],
                   seam_split_position: float) -> Tuple[int, float, float, Tuple[Any, Any]]:
    """
    Places a gradient from the middle of the seam to the middle of its
    matched neighbor.

    Returns (anchor line, start position, extent, endpoint colors). The anchor
    is the pixel line on the side that changes color; the colors run from the
    seam color on that side to the color it turns into.
    """
    half_seam = seam.length / 2.0
    half_neighbor = neighbor_length / 2.0

    anchor = max(seam.line, seam.line + delta)
    center = seam.start + half_seam + half_seam * seam_split_position
    extent = half_seam + half_neighbor - (half_seam + half_neighbor) * seam_split_position

    if delta < 0:
        colors = (seam.colors[0], neighbor_colors[1])
    else:
        colors = (seam.colors[1], neighbor_colors[0])

    return anchor, center, extent, colors


def scan_gradients(pair_at: PairAccessor, line_count: int, limit: int,
                   brightness_of: Callable[[Any], Any], options: MlaaOptions,
                   make_feature: Callable[[int, float, float, Tuple[Any, Any]], MlaaFeature],
                   emit: Callable[[MlaaFeature], None]) -> None:
    """
    Runs one scan direction. Lines go from -1 to `line_count - 1` so seams
    against the canvas edge are found too. Each seam blends into at most one
    neighbor: the line before it is tried first, then the line after.
    """
    for line in range(-1, line_count):
        for seam in find_seams(pair_at, line, limit):
            for delta in (-1, 1):
                neighbor_length, neighbor_colors = match_neighbor(
                    pair_at, seam, delta, limit, brightness_of, options
                )
                if neighbor_length > 0:
                    emit(make_feature(*build_gradient(
                        seam, delta, neighbor_length, neighbor_colors, options.seam_split_position
                    )))
                    break


def scan(width: int, height: int, pixel_at: Callable[[int, int], Any],
         brightness_of: Callable[[Any], Any], options: MlaaOptions,
         emit: Callable[[MlaaFeature], None]) -> None:
    """
    Finds all MLAA features of a `width` x `height` canvas.

    Args:
        width, height: Canvas dimensions. Zero on either axis yields nothing.
        pixel_at: Returns the color at (x, y). Must answer one ring of
                  coordinates outside the canvas as well, typically with a
                  fixed sentinel color.
        brightness_of: Maps a color to an orderable brightness value.
        options: Which feature families to look for and how to match seams.
        emit: Called once per feature, in a deterministic order: vertical
              gradients, horizontal gradients, then corners.
    """
    if width <= 0 or height <= 0:
        return

    if options.vertical_gradients:
        scan_gradients(
            vertical_pairs(pixel_at), width, height, brightness_of, options,
            lambda x, y, extent, colors: VerticalGradient(x=x, y=y, height=extent, colors=colors),
            emit,
        )

    if options.horizontal_gradients:
        scan_gradients(
            horizontal_pairs(pixel_at), height, width, brightness_of, options,
            lambda y, x, extent, colors: HorizontalGradient(x=x, y=y, width=extent, colors=colors),
            emit,
        )

    if options.corners:
        detect_corners(width, height, pixel_at, brightness_of, emit)


def collect_features(width: int, height: int, pixel_at: Callable[[int, int], Any],
                     brightness_of: Callable[[Any], Any], options: MlaaOptions) -> List[MlaaFeature]:
    """Runs `scan` and returns the emitted features as a list."""
    features: List[MlaaFeature] = []
    scan(width, height, pixel_at, brightness_of, options, features.append)
    return features
