"""State-vector column simulator for grid-based circuit editors."""
from __future__ import annotations

from colsim_engine.circuit.diagnostics import Diagnostic
from colsim_engine.circuit.grid import Cell, GateParams, Span, create_grid, span_cells, validate_grid
from colsim_engine.circuit.validate import is_circuit_valid, validate_circuit
from colsim_engine.config import DEFAULT_CONFIG, SimulatorConfig
from colsim_engine.kernel.gates import GateMatrixCatalog, GateType, gate_matrix
from colsim_engine.kernel.measure import MeasureResult, bloch_vector, bloch_vectors, measure
from colsim_engine.kernel.state import initial_state
from colsim_engine.runner.column import ColumnResult, simulate_column
from colsim_engine.runner.driver import MeasurementOutcome, RunResult, run, simulate

__version__ = "0.1.0"

__all__ = [
    "Cell", "ColumnResult", "DEFAULT_CONFIG", "Diagnostic", "GateMatrixCatalog",
    "GateParams", "GateType", "MeasureResult", "MeasurementOutcome", "RunResult",
    "SimulatorConfig", "Span", "bloch_vector", "bloch_vectors", "create_grid",
    "gate_matrix", "initial_state", "is_circuit_valid", "measure", "run",
    "simulate", "simulate_column", "span_cells", "validate_circuit", "validate_grid",
]
