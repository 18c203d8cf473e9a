"""Pattern parsing, random soups, and the named pattern library."""

from __future__ import annotations

import pytest

from sparse_life.patterns import (
    DEFAULT_COORDINATES,
    PATTERNS,
    PatternError,
    named_pattern,
    parse_pattern,
    random_pattern,
)
from sparse_life.world import Coordinate


def test_parse_default_coordinates() -> None:
    assert parse_pattern(DEFAULT_COORDINATES) == [
        Coordinate(1, 0),
        Coordinate(0, 1),
        Coordinate(1, 1),
        Coordinate(1, 2),
        Coordinate(2, 2),
    ]
    assert parse_pattern(DEFAULT_COORDINATES) == named_pattern("r_pentomino")


@pytest.mark.parametrize("text, expected", [
    ("", []),
    ("3,4", [(3, 4)]),
    ("-1,-2;0,5", [(-1, -2), (0, 5)]),
    (" 1 , 2 ; 3,4 ;", [(1, 2), (3, 4)]),
    ("1,1;;2,2", [(1, 1), (2, 2)]),
])
def test_parse_pattern(text: str, expected: list[tuple[int, int]]) -> None:
    assert parse_pattern(text) == expected


@pytest.mark.parametrize("text", [
    "1",
    "1,2,3",
    "1,2;3",
    "a,b",
    "1.5,2",
    "1,",
    ",",
])
def test_parse_pattern_rejects_malformed(text: str) -> None:
    with pytest.raises(PatternError):
        parse_pattern(text)


def test_parse_error_names_the_segment() -> None:
    with pytest.raises(PatternError, match="'x,7'"):
        parse_pattern("1,2;x,7")


def test_pattern_error_is_value_error() -> None:
    assert issubclass(PatternError, ValueError)


def test_random_pattern_is_reproducible() -> None:
    assert random_pattern(30, 0.3, seed=7) == random_pattern(30, 0.3, seed=7)
    assert random_pattern(30, 0.3, seed=7) != random_pattern(30, 0.3, seed=8)


def test_random_pattern_stays_in_square() -> None:
    cells = random_pattern(10, 0.5, seed=1)
    assert cells
    assert all(-5 <= x < 5 and -5 <= y < 5 for x, y in cells)
    assert len(set(cells)) == len(cells)


@pytest.mark.parametrize("density, expected", [(0.0, 0), (1.0, 64)])
def test_random_pattern_density_extremes(density: float, expected: int) -> None:
    assert len(random_pattern(8, density, seed=3)) == expected


def test_random_pattern_full_square_is_centred() -> None:
    cells = set(random_pattern(4, 1.0))
    assert cells == {(x, y) for x in range(-2, 2) for y in range(-2, 2)}


@pytest.mark.parametrize("size, density", [(-1, 0.2), (10, -0.1), (10, 1.5)])
def test_random_pattern_rejects_bad_arguments(size: int, density: float) -> None:
    with pytest.raises(PatternError):
        random_pattern(size, density)


@pytest.mark.parametrize("name", sorted(PATTERNS))
def test_named_patterns(name: str) -> None:
    cells = named_pattern(name)
    assert cells
    assert len(set(cells)) == len(cells)
    assert all(isinstance(c, Coordinate) for c in cells)


def test_unknown_named_pattern() -> None:
    with pytest.raises(PatternError, match="unknown pattern"):
        named_pattern("spaceship-9000")
