#!/usr/bin/env python3
"""
Sparse Engine Benchmark — Worker-Count Comparison

Times the same random soup through the engine once per worker count,
checks that every run ends in the same generation, and prints a summary.
Results are written to a timestamped CSV in the results directory.

Usage:
    sparse-life-bench
    sparse-life-bench --size 256 --generations 50 --workers 1 2 4 8
"""

from __future__ import annotations

import argparse
import csv
import sys
import time
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from loguru import logger

from .config import configure_logging
from .patterns import random_pattern
from .verify_correctness import trunc
from .world import Engine, World

CSV_TIMESTAMP_FMT = "%Y%m%d_%H%M%S"


class BenchmarkRunner:
    def __init__(
        self,
        size: int = 128,
        density: float = 0.3,
        generations: int = 100,
        seed: int = 42,
        warmup: int = 5,
        worker_counts: Iterable[int] = (1, 2, 4),
        results_dir: str | Path | None = "benchmark_results",
    ):
        self.size = size
        self.density = density
        self.generations = generations
        self.seed = seed
        self.warmup = warmup
        self.worker_counts = list(worker_counts)
        self.results_dir = Path(results_dir) if results_dir else None
        self.results: dict[str, dict] = {}  # name -> {time, workers, population}
        self.fingerprints: dict[str, str] = {}
        self.run_timestamp = datetime.now().strftime(CSV_TIMESTAMP_FMT)

    def run_impl(self, workers: int, initial: World) -> None:
        name = f"{workers} worker{'s' if workers > 1 else ''}"
        logger.info(f"Running {name}...")
        print(f"Running {name}...", end="", flush=True)

        with Engine(workers=workers) as engine:
            world = initial
            # Warmup
            for _ in range(self.warmup):
                world = engine.tick(world)

            world = initial
            start = time.perf_counter()
            for _ in range(self.generations):
                world = engine.tick(world)
            duration = time.perf_counter() - start

        self.results[name] = {
            "time": duration,
            "workers": workers,
            "population": world.population,
        }
        self.fingerprints[name] = world.fingerprint()

        logger.info(f"{name}: {duration:.6f}s")
        print(f" → {duration:.6f} s")

    def verify(self) -> bool:
        """Verify every worker count produced the identical final generation."""
        logger.info("Starting correctness verification")
        print("\nCorrectness Verification")

        if not self.fingerprints:
            logger.warning("No fingerprints to verify")
            return False

        # Use first result as reference
        ref_name = next(iter(self.fingerprints))
        ref_fp = self.fingerprints[ref_name]

        print(f"   Reference: {ref_name}: {trunc(ref_fp)}")
        all_match = True

        for name, fp in self.fingerprints.items():
            if name == ref_name:
                continue
            if fp == ref_fp:
                print(f"   {name:<20}: ✓ match")
                logger.debug(f"{name}: fingerprint matches reference")
            else:
                print(f"   {name:<20}: ✗ MISMATCH! {trunc(fp)}")
                logger.error(f"{name}: fingerprint mismatch")
                all_match = False

        if all_match:
            print("   ✓ ALL WORKER COUNTS PRODUCE IDENTICAL RESULTS")
            logger.info("Correctness verification passed")
        else:
            print("   ✗ CORRECTNESS FAILURE")
            logger.error("Correctness verification failed")
        return all_match

    def print_summary(self) -> None:
        """Print formatted benchmark results."""
        if not self.results:
            logger.warning("No results to print")
            return

        # Get baseline (first run)
        baseline_time = next(iter(self.results.values()))["time"]
        fastest_name = min(self.results.items(), key=lambda x: x[1]["time"])[0]

        print("\n" + "═" * 72)
        print(f" SPARSE ENGINE BENCHMARK — {self.size}×{self.size} soup, {self.generations} generations")
        print(f" Seed: {self.seed} | Warm-up: {self.warmup} generations | Time: {self.run_timestamp}")
        print("═" * 72)
        print(f" {'Workers':<20} {'Time (s)':<12} {'Speedup':<10} {'Population'}")
        print("─" * 72)

        for name, result in self.results.items():
            t = result["time"]
            speedup = baseline_time / t if t else float("inf")
            marker = " ← FASTEST" if name == fastest_name else ""
            print(f" {name:<20} {t:>10.6f} s   {speedup:>6.2f}×   {result['population']}{marker}")

        print("═" * 72)

    def save_csv(self) -> Path | None:
        """Save results to timestamped CSV."""
        if self.results_dir is None or not self.results:
            return None

        self.results_dir.mkdir(parents=True, exist_ok=True)
        csv_filename = self.results_dir / f"benchmark_results_{self.run_timestamp}.csv"
        logger.info(f"Saving results to {csv_filename}")

        baseline_time = next(iter(self.results.values()))["time"]
        with open(csv_filename, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "timestamp",
                "workers",
                "soup_size",
                "density",
                "generations",
                "time_seconds",
                "speedup_vs_baseline",
                "population",
                "fingerprint",
            ])
            for name, result in self.results.items():
                speedup = baseline_time / result["time"] if result["time"] else float("inf")
                writer.writerow([
                    self.run_timestamp,
                    result["workers"],
                    f"{self.size}×{self.size}",
                    self.density,
                    self.generations,
                    f"{result['time']:.6f}",
                    f"{speedup:.2f}",
                    result["population"],
                    trunc(self.fingerprints.get(name, ""), 32),
                ])

        print(f"\nResults saved to: {csv_filename.name}")
        return csv_filename

    def run(self) -> bool:
        """Main benchmark execution."""
        logger.info(
            f"Starting benchmark run: {self.size}×{self.size} soup, {self.generations} generations"
        )
        initial = World.from_coordinates(random_pattern(self.size, self.density, self.seed))
        logger.info(f"Initial population: {initial.population}")

        for workers in self.worker_counts:
            self.run_impl(workers, initial)

        ok = self.verify()
        self.print_summary()
        self.save_csv()
        return ok


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark the sparse engine across worker counts")
    parser.add_argument("--size", type=int, default=128, help="Side of the random soup (default: 128)")
    parser.add_argument("--density", type=float, default=0.3, help="Soup density (default: 0.3)")
    parser.add_argument("--generations", type=int, default=100, help="Timed generations (default: 100)")
    parser.add_argument("--warmup", type=int, default=5, help="Untimed warm-up generations (default: 5)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--workers", type=int, nargs="+", default=[1, 2, 4], help="Worker counts (default: 1 2 4)"
    )
    parser.add_argument(
        "--results-dir", default="benchmark_results", help="Where CSV results and the log go"
    )
    parser.add_argument("--no-csv", action="store_true", help="Do not write a CSV file")
    parser.add_argument("--log-level", default="INFO", help="stderr log level (default: INFO)")
    args = parser.parse_args(argv)

    results_dir = Path(args.results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)
    configure_logging(args.log_level, results_dir / "benchmark.log")

    print("Sparse Engine Benchmark")
    print(f"Results: {results_dir}\n")

    runner = BenchmarkRunner(
        size=args.size,
        density=args.density,
        generations=args.generations,
        seed=args.seed,
        warmup=args.warmup,
        worker_counts=args.workers,
        results_dir=None if args.no_csv else results_dir,
    )
    success = runner.run()
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
