"""
Command-line entry point.

Usage:
    sparse-life [flags] | gnuplot --persist
    sparse-life --random --size 80 --ticks 500 --workers 4 | gnuplot --persist
    sparse-life --coordinates "0,0;1,0;2,0" --ticks 4
"""

from __future__ import annotations

import argparse
import os
import sys

from loguru import logger

from .config import LOG_LEVELS, ConfigError, LifeConfig, configure_logging, load_config
from .gnuplot import write_stream
from .patterns import PATTERNS, PatternError, named_pattern, parse_pattern, random_pattern
from .world import Coordinate, Engine, World


def build_parser() -> argparse.ArgumentParser:
    # Defaults live in LifeConfig so that a config file can fill the gaps.
    parser = argparse.ArgumentParser(
        prog="sparse-life",
        description="Conway's Game of Life on an unbounded grid, written as a gnuplot stream.",
        usage="%(prog)s [flags] | gnuplot --persist",
    )
    parser.add_argument("--ticks", type=int, help="number of iterations running the game (default: 10)")
    parser.add_argument(
        "--size", type=int, help="size of the visible world in x and y direction (default: 50)"
    )
    parser.add_argument(
        "--random",
        action="store_true",
        default=None,
        help="generate a random pattern to start with",
    )
    parser.add_argument(
        "--density", type=float, help="fraction of live cells in a random pattern (default: 0.2)"
    )
    parser.add_argument("--seed", type=int, help="seed for the random pattern")
    parser.add_argument(
        "--coordinates",
        help="semicolon-separated list of x,y coordinates (default: 1,0;0,1;1,1;1,2;2,2)",
    )
    parser.add_argument("--pattern", choices=sorted(PATTERNS), help="start from a named pattern")
    parser.add_argument("--workers", type=int, help="worker threads per stage (default: 1)")
    parser.add_argument(
        "--sort",
        action="store_true",
        default=None,
        help="write the cells of each generation in sorted order",
    )
    parser.add_argument("--config", help="TOML configuration file")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="stderr log level")
    parser.add_argument("--log-file", help="also log to this file (rotated)")
    return parser


def resolve_config(args: argparse.Namespace) -> LifeConfig:
    cfg = load_config(args.config) if args.config else LifeConfig()
    return cfg.merge(
        ticks=args.ticks,
        size=args.size,
        random=args.random,
        density=args.density,
        seed=args.seed,
        coordinates=args.coordinates,
        pattern=args.pattern,
        workers=args.workers,
        sort=args.sort,
        log_level=args.log_level,
        log_file=args.log_file,
    ).validate()


def initial_pattern(cfg: LifeConfig) -> list[Coordinate]:
    """Random soup if requested, else a named pattern, else the coordinate list."""
    if cfg.random:
        return random_pattern(cfg.size, cfg.density, cfg.seed)
    if cfg.pattern:
        return named_pattern(cfg.pattern)
    return parse_pattern(cfg.coordinates)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = resolve_config(args)
        configure_logging(cfg.log_level, cfg.log_file)
        pattern = initial_pattern(cfg)
    except (ConfigError, PatternError) as e:
        logger.debug(f"Aborting: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(
        f"Running {cfg.ticks} ticks from {len(pattern)} cells, "
        f"viewport {cfg.size}, workers {cfg.workers}"
    )

    world = World.from_coordinates(pattern)
    with Engine(workers=cfg.workers) as engine:
        try:
            blocks = write_stream(engine.run(world, cfg.ticks), cfg.size, sys.stdout, sort=cfg.sort)
        except BrokenPipeError:
            # gnuplot went away; point stdout at devnull so the interpreter's
            # final flush does not raise again
            devnull = os.open(os.devnull, os.O_WRONLY)
            try:
                os.dup2(devnull, sys.stdout.fileno())
            finally:
                os.close(devnull)
            logger.info("Output closed by reader, stopping")
            return 0

    logger.info(f"Wrote {blocks} generations")
    return 0


if __name__ == "__main__":
    sys.exit(main())
