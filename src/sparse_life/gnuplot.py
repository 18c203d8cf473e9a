"""
Gnuplot output.

Each generation is written as an inline-data plot command, so piping the
stream into gnuplot animates the population:

    sparse-life --ticks 200 | gnuplot --persist
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TextIO

from .world import World

PLOT_COMMAND = "plot '-' with points ls 1"
END_OF_DATA = "e"


def header(d: int) -> str:
    """Axis ranges for a d×d viewport centred on the origin, plus the point style."""
    half = d // 2
    return (
        f"unset key; set xrange[-{half}:{half}]\n"
        f"set yrange[-{half}:{half}]\n"
        "set style line 1 lc rgb '#0060ad' pt 7\n"
    )


def block(world: World, sort: bool = False) -> str:
    cells = sorted(world) if sort else world
    lines = [PLOT_COMMAND]
    lines.extend(f"{x}, {y}" for x, y in cells)
    lines.append(END_OF_DATA)
    return "\n".join(lines) + "\n"


def write_stream(
    generations: Iterable[World], d: int, out: TextIO, sort: bool = False
) -> int:
    """Write the header once, then one block per generation. Returns the block count."""
    out.write(header(d))
    written = 0
    for world in generations:
        out.write(block(world, sort=sort))
        out.flush()
        written += 1
    return written
