"""Conway's Game of Life on an unbounded, sparse grid."""

from .world import (
    Cell,
    Coordinate,
    Engine,
    World,
    apply_rule,
    count_neighbours,
    deflate,
    expand,
    tick,
)

__all__ = [
    "Cell",
    "Coordinate",
    "Engine",
    "World",
    "apply_rule",
    "count_neighbours",
    "deflate",
    "expand",
    "tick",
]

__version__ = "0.1.0"
