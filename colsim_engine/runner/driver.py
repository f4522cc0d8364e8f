"""Whole-circuit drivers.

simulate  visualization pass: every row, advanced gates off, MEASURE = I.
run       execution pass: unpopulated rows dropped, advanced gates on,
          MEASURE collapses right after its column.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from colsim_engine.circuit.diagnostics import Diagnostic
from colsim_engine.circuit.grid import column_has_gates, populated_rows, validate_grid
from colsim_engine.config import DEFAULT_CONFIG, SimulatorConfig
from colsim_engine.kernel.gates import GateMatrixCatalog
from colsim_engine.kernel.measure import bloch_vectors, measure
from colsim_engine.kernel.state import initial_state, probabilities
from colsim_engine.runner.column import simulate_column

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasurementOutcome:
    qubit: int            # grid row
    result: int
    probability: float


@dataclass
class RunResult:
    final_state: np.ndarray
    state_history: list[np.ndarray] = field(default_factory=list)
    active_columns: list[int] = field(default_factory=list)
    measurements: list[MeasurementOutcome] = field(default_factory=list)
    populated_rows: list[int] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    num_qubits: int = 0
    bloch_snap_threshold: float = DEFAULT_CONFIG.bloch_snap_threshold

    def bloch_vectors(self) -> list[tuple[float, float, float]]:
        """Bloch vector per simulated qubit (order of ``populated_rows``)."""
        return bloch_vectors(self.final_state, self.num_qubits, self.bloch_snap_threshold)

    def probabilities(self) -> np.ndarray:
        return probabilities(self.final_state)


def simulate(grid, *, time_parameter: Optional[float] = None,
             config: Optional[SimulatorConfig] = None,
             catalog: Optional[GateMatrixCatalog] = None) -> list[np.ndarray]:
    """State after each column, starting with |0...0>: ``num_cols + 1`` entries."""
    config = config or DEFAULT_CONFIG
    num_rows, num_cols = validate_grid(grid, config.max_qubits)
    t = config.resolve_time(time_parameter)

    psi = initial_state(num_rows)
    history = [psi]
    for col in range(num_cols):
        psi = simulate_column(psi, grid, col, num_qubits=num_rows,
                              time_parameter=t, catalog=catalog,
                              epsilon=config.epsilon).state
        history.append(psi)
    return history


def run(grid, time_parameter: Optional[float] = None, seed: Optional[int] = None, *,
        random_source: Optional[Callable[[], float]] = None,
        config: Optional[SimulatorConfig] = None,
        catalog: Optional[GateMatrixCatalog] = None) -> RunResult:
    """Execute the circuit with measurements.

    Draws come from ``random_source`` when given, else from
    ``numpy.random.default_rng(seed)`` (reproducible for a fixed seed).
    """
    config = config or DEFAULT_CONFIG
    num_rows, num_cols = validate_grid(grid, config.max_qubits)
    t = config.resolve_time(time_parameter)
    if random_source is None:
        random_source = np.random.default_rng(seed).random

    rows = populated_rows(grid)
    if not rows:
        psi = initial_state(num_rows)
        return RunResult(psi, [psi], num_qubits=num_rows,
                         bloch_snap_threshold=config.bloch_snap_threshold)

    row_mapping = {r: i for i, r in enumerate(rows)}
    n = len(rows)
    psi = initial_state(n)
    result = RunResult(psi, [psi] if config.record_history else [],
                       populated_rows=rows, num_qubits=n,
                       bloch_snap_threshold=config.bloch_snap_threshold)

    t0 = time.perf_counter()
    for col in range(num_cols):
        if not column_has_gates(grid, col, rows):
            continue
        result.active_columns.append(col)
        step = simulate_column(psi, grid, col, num_qubits=n, row_mapping=row_mapping,
                               process_advanced=True, warnings=result.warnings,
                               time_parameter=t, catalog=catalog, epsilon=config.epsilon)
        psi = step.state
        for sim_row, grid_row in zip(step.measure_rows, step.measure_original_rows):
            m = measure(psi, sim_row, n, random_source)
            psi = m.collapsed
            result.measurements.append(MeasurementOutcome(grid_row, m.result, m.probability))
        if config.record_history:
            result.state_history.append(psi)

    result.final_state = psi
    log.info("run: %d/%d rows, %d active columns, %d measurements, %d warnings in %.3fs",
             n, num_rows, len(result.active_columns), len(result.measurements),
             len(result.warnings), time.perf_counter() - t0)
    return result
