"""Benchmark: wall-clock time of full runs on growing grids."""
from __future__ import annotations

import logging
import time

from colsim_engine.circuit.grid import create_grid, span_cells
from colsim_engine.kernel.gates import GateType
from colsim_engine.runner.driver import run
from colsim_engine.utils.logging_config import setup_logging

G = GateType


def _hadamard_qft_grid(n: int):
    """H on every row, then one QFT spanning the whole register."""
    placements = [{"row": r, "col": 0, "gate": G.H} for r in range(n)]
    placements += span_cells(G.QFT, 0, n - 1, 1)
    return create_grid(n, placements)


def _arithmetic_grid(n: int, reps: int = 8):
    """Superposed A (top half) added into the bottom half ``reps`` times."""
    half = n // 2
    placements = [{"row": r, "col": 0, "gate": G.H} for r in range(half)]
    for k in range(reps):
        col = 1 + k
        placements += span_cells(G.INPUT_A, 0, half - 1, col)
        placements += span_cells(G.ADD_A, half, n - 1, col)
    return create_grid(n, placements)


def _time_run(grid, reps: int = 5) -> float:
    run(grid, seed=0)  # warm up
    t0 = time.perf_counter()
    for _ in range(reps):
        run(grid, seed=0)
    return (time.perf_counter() - t0) / reps


def bench_column(sizes=(4, 6, 8, 10, 12)):
    print(f"{'n':>4} {'qft ms':>10} {'add_a ms':>10}")
    print("-" * 26)
    for n in sizes:
        t_qft = _time_run(_hadamard_qft_grid(n))
        t_add = _time_run(_arithmetic_grid(n))
        print(f"{n:>4} {t_qft * 1e3:>10.2f} {t_add * 1e3:>10.2f}")
    print()


if __name__ == "__main__":
    # engine diagnostics only; per-run INFO summaries would swamp the table
    setup_logging(logging.WARNING)
    bench_column()
