#!/usr/bin/env python3
"""
Sparse Engine Correctness Verification

This script verifies that the sparse engine produces identical results for
every worker count, and that those results agree with an independent dense
NumPy implementation, by comparing fingerprints of the final generation
after the same number of ticks from the same random soup.

Usage:
    sparse-life-verify                       # Verify with defaults
    sparse-life-verify --verbose             # Show full fingerprints
    sparse-life-verify --workers 1 2 4 8     # Choose worker counts
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable

import numpy as np
from loguru import logger

from .config import configure_logging
from .patterns import random_pattern
from .world import Coordinate, Engine, World

# Defaults
SIZE = 64
DENSITY = 0.3
GENERATIONS = 100
SEED = 42
WORKER_COUNTS = (1, 2, 4)


def dense_tick(coordinates: Iterable[tuple[int, int]]) -> set[Coordinate]:
    """One generation on a dense window around the live cells.

    The window is the bounding box grown by one cell (every cell that can be
    born) plus a ring of zeros so that neighbour sums never wrap.
    """
    cells = list(coordinates)
    if not cells:
        return set()

    xs = np.array([c[0] for c in cells], dtype=np.int64)
    ys = np.array([c[1] for c in cells], dtype=np.int64)
    ox, oy = int(xs.min()) - 2, int(ys.min()) - 2
    width = int(xs.max()) - ox + 3
    height = int(ys.max()) - oy + 3

    padded = np.zeros((height, width), dtype=np.uint8)
    padded[ys - oy, xs - ox] = 1

    neighbours = (
        padded[:-2, :-2] + padded[:-2, 1:-1] + padded[:-2, 2:]  # row above
        + padded[1:-1, :-2] + padded[1:-1, 2:]                  # current row (skip centre)
        + padded[2:, :-2] + padded[2:, 1:-1] + padded[2:, 2:]    # row below
    )
    current = padded[1:-1, 1:-1]
    alive = ((current == 1) & ((neighbours == 2) | (neighbours == 3))) | (
        (current == 0) & (neighbours == 3)
    )

    rows, cols = np.nonzero(alive)
    return {Coordinate(int(c) + ox + 1, int(r) + oy + 1) for r, c in zip(rows, cols)}


def dense_run(coordinates: Iterable[tuple[int, int]], generations: int) -> set[Coordinate]:
    cells = set(coordinates)
    for _ in range(generations):
        cells = dense_tick(cells)
    return cells


def trunc(s: str, n: int = 16) -> str:
    return s[:n] + "..." + s[-n:] if len(s) > n * 2 + 3 else s


class VerificationRunner:
    def __init__(
        self,
        generations: int = GENERATIONS,
        size: int = SIZE,
        density: float = DENSITY,
        seed: int = SEED,
        worker_counts: Iterable[int] = WORKER_COUNTS,
        verbose: bool = False,
    ):
        self.generations = generations
        self.size = size
        self.density = density
        self.seed = seed
        self.worker_counts = list(worker_counts)
        self.verbose = verbose
        self.fingerprints: dict[str, str] = {}
        self.populations: dict[str, int] = {}

    def initial_cells(self) -> list[Coordinate]:
        return random_pattern(self.size, self.density, self.seed)

    def _record(self, name: str, world: World) -> None:
        fp = world.fingerprint()
        self.fingerprints[name] = fp
        self.populations[name] = world.population
        if self.verbose:
            print(f"\n   Population: {world.population}")
            print(f"   SHA256: {fp}")
        else:
            print(" ✓")

    def verify_sparse(self, workers: int, initial: list[Coordinate]) -> None:
        """Run the sparse engine with the given worker count."""
        name = f"Sparse ({workers} worker{'s' if workers > 1 else ''})"
        print(f"Testing {name}...", end="", flush=True)
        logger.debug(f"{name}: {self.generations} generations")

        world = World.from_coordinates(initial)
        with Engine(workers=workers) as engine:
            for world in engine.run(world, self.generations):
                pass
        self._record(name, world)

    def verify_dense(self, initial: list[Coordinate]) -> None:
        """Run the dense NumPy reference."""
        name = "Dense NumPy"
        print(f"Testing {name}...", end="", flush=True)
        cells = dense_run(initial, self.generations)
        self._record(name, World.from_coordinates(cells))

    def compare_all(self) -> bool:
        """Compare all fingerprints against reference."""
        if not self.fingerprints:
            print("\n✗ No implementations to compare")
            logger.warning("No fingerprints to verify")
            return False

        print("\n" + "=" * 70)
        print("Correctness Verification Results")
        print("=" * 70)

        # Use first as reference
        ref_name = next(iter(self.fingerprints))
        ref_fp = self.fingerprints[ref_name]

        print(f"\nReference: {ref_name}")
        print(f"  SHA256: {ref_fp if self.verbose else trunc(ref_fp)}")
        print(f"  Population: {self.populations[ref_name]}")

        print("\nComparison:")
        all_match = True

        for name, fp in self.fingerprints.items():
            if name == ref_name:
                continue

            if fp == ref_fp:
                print(f"  ✓ {name:<24} matches reference")
                logger.debug(f"{name}: fingerprint matches reference")
            else:
                print(f"  ✗ {name:<24} MISMATCH! (population {self.populations[name]})")
                logger.error(f"{name}: fingerprint mismatch")
                all_match = False

        print("\n" + "=" * 70)

        if all_match:
            print("✓ ALL IMPLEMENTATIONS PRODUCE IDENTICAL RESULTS")
            logger.info("Correctness verification passed")
        else:
            print("✗ CORRECTNESS VERIFICATION FAILED")
            logger.error("Correctness verification failed")
        print("=" * 70)
        return all_match

    def run(self) -> bool:
        """Run verification on all implementations."""
        print("Sparse Engine Correctness Verification")
        print(f"Soup: {self.size}×{self.size}, density {self.density}")
        print(f"Generations: {self.generations}")
        print(f"Seed: {self.seed}\n")

        initial = self.initial_cells()

        for workers in self.worker_counts:
            self.verify_sparse(workers, initial)
        self.verify_dense(initial)

        return self.compare_all()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Verify the sparse engine against itself and a dense reference",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed fingerprint information"
    )
    parser.add_argument(
        "--size",
        type=int,
        default=SIZE,
        help=f"Side of the random soup (default: {SIZE})"
    )
    parser.add_argument(
        "--density",
        type=float,
        default=DENSITY,
        help=f"Fraction of live cells in the soup (default: {DENSITY})"
    )
    parser.add_argument(
        "--generations",
        type=int,
        default=GENERATIONS,
        help=f"Number of generations (default: {GENERATIONS})"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=SEED,
        help=f"Random seed (default: {SEED})"
    )
    parser.add_argument(
        "--workers",
        type=int,
        nargs="+",
        default=list(WORKER_COUNTS),
        help="Worker counts to compare (default: 1 2 4)"
    )

    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    runner = VerificationRunner(
        generations=args.generations,
        size=args.size,
        density=args.density,
        seed=args.seed,
        worker_counts=args.workers,
        verbose=args.verbose,
    )
    success = runner.run()

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
