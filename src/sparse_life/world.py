"""
Sparse, unbounded Game of Life world.

The grid has no edges: a world is a mapping from integer coordinates to
cells, holding only the live cells between generations. One generation is
computed in three passes, each reading an unmodified snapshot of the
previous pass and writing a fresh container:

1. expand            pad every live cell with its dead Moore neighbours
2. count_neighbours  count live neighbours for every padded cell
3. apply_rule        B3/S23, dropping every cell that ends up dead

Rules (B3/S23):
1. Any live cell with fewer than two live neighbours dies (underpopulation)
2. Any live cell with two or three live neighbours lives on
3. Any live cell with more than three live neighbours dies (overpopulation)
4. Any dead cell with exactly three live neighbours becomes alive (birth)
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import Executor, ThreadPoolExecutor
from types import MappingProxyType
from typing import Callable, NamedTuple

from loguru import logger

# Moore neighbourhood, centre excluded
OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if not (dx == 0 and dy == 0)
)
SURVIVAL_COUNTS = frozenset({2, 3})
BIRTH_COUNT = 3


class Coordinate(NamedTuple):
    x: int
    y: int

    def neighbours(self) -> Iterator[Coordinate]:
        """Yield the 8 cells surrounding this one."""
        return neighbours_of(self)

    def translate(self, dx: int, dy: int) -> Coordinate:
        return Coordinate(self.x + dx, self.y + dy)


def neighbours_of(coord: tuple[int, int]) -> Iterator[Coordinate]:
    x, y = coord
    for dx, dy in OFFSETS:
        yield Coordinate(x + dx, y + dy)


class Cell(NamedTuple):
    """State of one cell. `neighbours` is only meaningful inside a tick."""

    alive: bool
    neighbours: int = 0


LIVE = Cell(True)
DEAD = Cell(False)

Cells = Mapping[Coordinate, Cell]
Stage = Callable[[Cells, list[Coordinate]], dict[Coordinate, Cell]]


# ——— Per-chunk stage kernels ———
# Each kernel reads `snapshot` only and returns a new dict covering `keys`.


def _expand_chunk(snapshot: Cells, keys: list[Coordinate]) -> dict[Coordinate, Cell]:
    result: dict[Coordinate, Cell] = {}
    for coord in keys:
        cell = snapshot[coord]
        result[coord] = cell
        if not cell.alive:
            continue
        for neighbour in neighbours_of(coord):
            if neighbour not in result:
                result[neighbour] = snapshot.get(neighbour, DEAD)
    return result


def _count_chunk(snapshot: Cells, keys: list[Coordinate]) -> dict[Coordinate, Cell]:
    result: dict[Coordinate, Cell] = {}
    for coord in keys:
        count = sum(1 for n in neighbours_of(coord) if snapshot.get(n, DEAD).alive)
        result[coord] = Cell(snapshot[coord].alive, count)
    return result


def _rule_chunk(snapshot: Cells, keys: list[Coordinate]) -> dict[Coordinate, Cell]:
    result: dict[Coordinate, Cell] = {}
    for coord in keys:
        cell = snapshot[coord]
        if cell.alive:
            if cell.neighbours in SURVIVAL_COUNTS:
                result[coord] = LIVE
        elif cell.neighbours == BIRTH_COUNT:
            result[coord] = LIVE
    return result


def _partition(keys: list[Coordinate], parts: int) -> list[list[Coordinate]]:
    size = max(1, -(-len(keys) // parts))
    return [keys[i : i + size] for i in range(0, len(keys), size)]


def _run_stage(
    stage: Stage,
    cells: Cells,
    executor: Executor | None = None,
    workers: int = 1,
) -> dict[Coordinate, Cell]:
    """Run one stage over a read-only view of `cells`, split across workers.

    Partial results never disagree on a shared key: every value is derived
    from the snapshot alone, so merging them in any order is safe.
    """
    if isinstance(cells, World):
        cells = cells._cells
    snapshot = MappingProxyType(cells)
    keys = list(snapshot)
    if executor is None or workers == 1 or len(keys) < 2:
        return stage(snapshot, keys)

    merged: dict[Coordinate, Cell] = {}
    futures = [executor.submit(stage, snapshot, chunk) for chunk in _partition(keys, workers)]
    for future in futures:
        merged.update(future.result())
    return merged


# ——— Stages ———


def expand(cells: Cells) -> dict[Coordinate, Cell]:
    """Return `cells` plus a dead entry for every missing neighbour of a live cell."""
    return _run_stage(_expand_chunk, cells)


def count_neighbours(cells: Cells) -> dict[Coordinate, Cell]:
    """Return every cell with its live-neighbour count.

    Neighbours that are not keys of `cells` count as dead.
    """
    return _run_stage(_count_chunk, cells)


def apply_rule(cells: Cells) -> dict[Coordinate, Cell]:
    """Apply B3/S23 to counted cells; only cells alive afterwards are kept."""
    return _run_stage(_rule_chunk, cells)


def deflate(cells: Cells) -> dict[Coordinate, Cell]:
    """Drop every dead entry."""
    return {coord: cell for coord, cell in cells.items() if cell.alive}


def tick(world: World) -> World:
    """Compute the next generation of `world`."""
    return World(apply_rule(count_neighbours(expand(world))))


# ——— World ———


class World(Mapping):
    """Immutable set of live cells on an unbounded grid.

    Building a World from any mapping drops its dead entries, so every
    value of a World is alive.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Cells | None = None):
        live = deflate(cells) if cells else {}
        self._cells = MappingProxyType({Coordinate(*coord): LIVE for coord in live})

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[tuple[int, int]]) -> World:
        return cls({Coordinate(*coord): LIVE for coord in coordinates})

    def __getitem__(self, coord: tuple[int, int]) -> Cell:
        return self._cells[coord]

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __hash__(self) -> int:
        return hash(self.live_cells())

    @property
    def population(self) -> int:
        return len(self._cells)

    def live_cells(self) -> frozenset[Coordinate]:
        return frozenset(self._cells)

    def bounding_box(self) -> tuple[int, int, int, int] | None:
        """(min_x, min_y, max_x, max_y) of the live cells, None when empty."""
        if not self._cells:
            return None
        xs = [c.x for c in self._cells]
        ys = [c.y for c in self._cells]
        return min(xs), min(ys), max(xs), max(ys)

    def translate(self, dx: int, dy: int) -> World:
        return World.from_coordinates(c.translate(dx, dy) for c in self._cells)

    def tick(self) -> World:
        return tick(self)

    def fingerprint(self) -> str:
        """Return SHA-256 hex digest of the sorted live coordinates"""
        flat_str = ";".join(f"{x},{y}" for x, y in sorted(self._cells))
        return hashlib.sha256(flat_str.encode("utf-8")).hexdigest()

    def __repr__(self) -> str:
        return f"World(population={len(self._cells)}, bbox={self.bounding_box()})"


# ——— Engine ———


class Engine:
    """Advances worlds one generation at a time, optionally on worker threads.

    The worker count is fixed at construction so a run behaves the same on
    any machine. Every stage splits the keys of its input across the
    workers and merges their disjoint results before the next stage starts.
    """

    def __init__(self, workers: int = 1):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.workers = workers
        self._executor: ThreadPoolExecutor | None = None
        if workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="sparse-life"
            )

    def _stage(self, stage: Stage, cells: Cells) -> dict[Coordinate, Cell]:
        return _run_stage(stage, cells, self._executor, self.workers)

    def expand(self, cells: Cells) -> dict[Coordinate, Cell]:
        return self._stage(_expand_chunk, cells)

    def count_neighbours(self, cells: Cells) -> dict[Coordinate, Cell]:
        return self._stage(_count_chunk, cells)

    def apply_rule(self, cells: Cells) -> dict[Coordinate, Cell]:
        return self._stage(_rule_chunk, cells)

    def tick(self, world: World) -> World:
        expanded = self.expand(world)
        counted = self.count_neighbours(expanded)
        next_world = World(self.apply_rule(counted))
        logger.debug(
            f"tick: {len(world)} live -> {len(expanded)} expanded -> {len(next_world)} live"
        )
        return next_world

    def run(self, world: World, ticks: int) -> Iterator[World]:
        """Yield `world` (generation 0) followed by `ticks` further generations."""
        if ticks < 0:
            raise ValueError(f"ticks must be non-negative, got {ticks}")
        return self._generations(world, ticks)

    def _generations(self, world: World, ticks: int) -> Iterator[World]:
        yield world
        for generation in range(1, ticks + 1):
            world = self.tick(world)
            logger.debug(f"generation {generation}: population {world.population}")
            yield world

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Engine(workers={self.workers})"
