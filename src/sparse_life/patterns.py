"""Initial patterns: parsed from text, generated at random, or looked up by name."""

from __future__ import annotations

import numpy as np

from .world import Coordinate

DEFAULT_COORDINATES: str = "1,0;0,1;1,1;1,2;2,2"
DEFAULT_DENSITY: float = 0.2

# Drawn with x to the right and y downwards.
PATTERNS: dict[str, list[tuple[int, int]]] = {
    "block": [(0, 0), (1, 0), (0, 1), (1, 1)],
    "blinker": [(0, 0), (1, 0), (2, 0)],
    "glider": [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)],
    "lwss": [
        (1, 0), (4, 0), (0, 1), (0, 2), (4, 2),
        (0, 3), (1, 3), (2, 3), (3, 3),
    ],
    "r_pentomino": [(1, 0), (0, 1), (1, 1), (1, 2), (2, 2)],
    "acorn": [(1, 0), (3, 1), (0, 2), (1, 2), (4, 2), (5, 2), (6, 2)],
    "diehard": [(6, 0), (0, 1), (1, 1), (1, 2), (5, 2), (6, 2), (7, 2)],
}


class PatternError(ValueError):
    """Raised for a pattern that cannot be turned into coordinates."""


def parse_pattern(text: str) -> list[Coordinate]:
    """Parse "x1,y1;x2,y2;..." into coordinates.

    Empty segments are skipped, so "" and "1,2;" are fine. Anything else
    that is not exactly two integers raises PatternError.
    """
    coordinates: list[Coordinate] = []
    for segment in text.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        fields = segment.split(",")
        if len(fields) != 2:
            raise PatternError(
                f"expected 'x,y' but got {len(fields)} field(s) in {segment!r}"
            )
        try:
            x, y = (int(field.strip()) for field in fields)
        except ValueError:
            raise PatternError(f"non-integer coordinate in {segment!r}") from None
        coordinates.append(Coordinate(x, y))
    return coordinates


def random_pattern(
    size: int, density: float = DEFAULT_DENSITY, seed: int | None = None
) -> list[Coordinate]:
    """Scatter live cells over a size×size square centred on the origin."""
    if size < 0:
        raise PatternError(f"size must be non-negative, got {size}")
    if not 0.0 <= density <= 1.0:
        raise PatternError(f"density must be within [0, 1], got {density}")

    rng = np.random.default_rng(seed)
    alive = rng.random((size, size)) < density
    offset = size // 2
    return [Coordinate(int(i) - offset, int(j) - offset) for i, j in np.argwhere(alive)]


def named_pattern(name: str) -> list[Coordinate]:
    try:
        cells = PATTERNS[name]
    except KeyError:
        known = ", ".join(sorted(PATTERNS))
        raise PatternError(f"unknown pattern {name!r} (known: {known})") from None
    return [Coordinate(x, y) for x, y in cells]
