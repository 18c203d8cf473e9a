"""The dense NumPy reference and the verification runner."""

from __future__ import annotations

import pytest

from sparse_life.patterns import PATTERNS, random_pattern
from sparse_life.verify_correctness import VerificationRunner, dense_run, dense_tick, main
from sparse_life.world import World, tick


@pytest.mark.parametrize("name", sorted(PATTERNS))
def test_dense_tick_matches_sparse_tick(name: str) -> None:
    cells = PATTERNS[name]
    assert dense_tick(cells) == World.from_coordinates(cells).tick().live_cells()


def test_dense_tick_empty() -> None:
    assert dense_tick([]) == set()


def test_dense_run_handles_negative_coordinates() -> None:
    soup = [(x - 500, y - 500) for x, y in random_pattern(16, 0.4, seed=11)]
    expected = World.from_coordinates(soup)
    for _ in range(25):
        expected = tick(expected)
    assert dense_run(soup, 25) == expected.live_cells()


def test_runner_passes(capsys) -> None:
    runner = VerificationRunner(generations=20, size=24, worker_counts=[1, 3])
    assert runner.run() is True
    assert len(runner.fingerprints) == 3
    assert len(set(runner.fingerprints.values())) == 1
    assert "ALL IMPLEMENTATIONS PRODUCE IDENTICAL RESULTS" in capsys.readouterr().out


def test_runner_reports_mismatch(capsys) -> None:
    runner = VerificationRunner()
    runner.fingerprints = {"a": "0" * 64, "b": "1" * 64}
    runner.populations = {"a": 1, "b": 2}
    assert runner.compare_all() is False
    assert "MISMATCH" in capsys.readouterr().out


def test_runner_without_results() -> None:
    assert VerificationRunner().compare_all() is False


def test_main_exit_code(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--generations", "5", "--size", "12", "--workers", "1", "2"])
    assert exc_info.value.code == 0
