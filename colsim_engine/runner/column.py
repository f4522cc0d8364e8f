"""Column simulator: apply one grid column to a state vector.

Order inside a column (fixed):
  1. basis rotation of X/Y-basis control rows   (H;  S† then H)
  2. control / anti-control masks
  3. SWAP pairs
  4. standard single-qubit gates
  5. execution mode only: REVERSE (ignores controls), PHASE_GRADIENT,
     QFT/QFT†, arithmetic, comparisons, scalars, input-parameterised rotations
  6. undo the basis rotation                     (H;  H then S)

After the rotation an X/Y-basis *control* selects the |0> branch of the
rotated qubit and an *anti-control* the |1> branch, so the former lands in
the anti-control mask and the latter in the control mask.

Content problems (missing register marker, failed arithmetic precondition)
never raise: the gate is identity for the affected basis states and a
``Diagnostic`` is recorded.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

import numpy as np

from colsim_engine.circuit.classify import ClassifiedColumn, classify_column
from colsim_engine.circuit.diagnostics import Diagnostic, MISSING_INPUT, PRECONDITION_FAILED
from colsim_engine.kernel import apply
from colsim_engine.kernel.arithmetic import apply_arithmetic
from colsim_engine.kernel.complex_ops import EPSILON
from colsim_engine.kernel.gates import (
    DEFAULT_CATALOG, GateMatrixCatalog, GateType, INPUT_ROTATIONS_A, required_markers,
)
from colsim_engine.kernel.state import row_bit

log = logging.getLogger(__name__)

G = GateType


@dataclass
class ColumnResult:
    state: np.ndarray
    measure_rows: list[int] = field(default_factory=list)
    measure_original_rows: list[int] = field(default_factory=list)


# ── masks & pairing ─────────────────────────────────────────────────
def calculate_control_masks(controls: Iterable[int], anti_controls: Iterable[int],
                            x_controls: Iterable[int], x_anti_controls: Iterable[int],
                            y_controls: Iterable[int], y_anti_controls: Iterable[int],
                            num_qubits: int) -> tuple[int, int]:
    """(control_mask, anti_mask) as basis-index bitmasks."""
    control_mask = 0
    anti_mask = 0
    for r in (*controls, *x_anti_controls, *y_anti_controls):
        control_mask |= 1 << row_bit(r, num_qubits)
    for r in (*anti_controls, *x_controls, *y_controls):
        anti_mask |= 1 << row_bit(r, num_qubits)
    return control_mask, anti_mask


def pair_swaps(rows: list[int]) -> list[tuple[int, int]]:
    """1st with 2nd, 3rd with 4th, ...; a trailing odd SWAP is dropped."""
    return [(rows[i], rows[i + 1]) for i in range(0, len(rows) - 1, 2)]


# ── helpers ─────────────────────────────────────────────────────────
def _warn(warnings: Optional[list], column: int, row: int, gate: GateType,
          message: str, category: str) -> None:
    log.warning("column %d row %d: %s", column, row, message)
    if warnings is not None:
        warnings.append(Diagnostic(column, row, gate, message, category))


def _missing_markers(gate: GateType, ops: ClassifiedColumn) -> list[GateType]:
    return [m for m in required_markers(gate) if m not in ops.markers]


def _report_missing(warnings, column, row, gate, missing) -> None:
    for marker in missing:
        _warn(warnings, column, row, gate,
              f"{gate.value} gate requires {marker.value} marker in the same column",
              MISSING_INPUT)


def _rotate_into_basis(psi, x_rows, y_rows, n, catalog):
    H = catalog.get(G.H)
    SDG = catalog.get(G.SDG)
    for r in x_rows:
        psi = apply.apply_1q(psi, H, r, n)
    for r in y_rows:
        psi = apply.apply_1q(psi, SDG, r, n)
        psi = apply.apply_1q(psi, H, r, n)
    return psi


def _rotate_out_of_basis(psi, x_rows, y_rows, n, catalog):
    H = catalog.get(G.H)
    S = catalog.get(G.S)
    for r in x_rows:
        psi = apply.apply_1q(psi, H, r, n)
    for r in y_rows:
        psi = apply.apply_1q(psi, H, r, n)
        psi = apply.apply_1q(psi, S, r, n)
    return psi


def _apply_advanced(psi, ops: ClassifiedColumn, col: int, n: int, cm: int, am: int,
                    warnings, epsilon: float) -> np.ndarray:
    for op in ops.span_ops:
        if op.gate == G.REVERSE:
            psi = apply.apply_bit_reverse(psi, op.span, n)
    for op in ops.span_ops:
        if op.gate == G.PHASE_GRADIENT:
            psi = apply.apply_phase_gradient(psi, op.span, n, cm, am)
    for op in ops.span_ops:
        if op.gate in (G.QFT, G.QFT_DG):
            psi = apply.apply_qft(psi, op.span, n, op.gate == G.QFT_DG, cm, am)

    for op in ops.arithmetic:
        missing = _missing_markers(op.gate, ops)
        if missing:
            _report_missing(warnings, col, op.original_row, op.gate, missing)
            continue
        psi, declined = apply_arithmetic(
            psi, op.gate, op.span,
            ops.markers.get(G.INPUT_A), ops.markers.get(G.INPUT_B), ops.markers.get(G.INPUT_R),
            n, cm, am, epsilon,
        )
        if declined:
            _warn(warnings, col, op.original_row, op.gate,
                  f"{op.gate.value} gate precondition not met for some basis states; "
                  f"those states were left unchanged",
                  PRECONDITION_FAILED)

    for op in ops.comparisons:
        missing = _missing_markers(op.gate, ops)
        if missing:
            _report_missing(warnings, col, op.original_row, op.gate, missing)
            continue
        psi = apply.apply_comparison(psi, op.gate, op.row, ops.markers[G.INPUT_A],
                                     ops.markers[G.INPUT_B], n, cm, am)

    for op in ops.scalars:
        psi = apply.apply_scalar(psi, op.gate, n, cm, am)

    for op in ops.input_rotations:
        missing = _missing_markers(op.gate, ops)
        if missing:
            _report_missing(warnings, col, op.original_row, op.gate, missing)
            continue
        marker = G.INPUT_A if op.gate in INPUT_ROTATIONS_A else G.INPUT_B
        psi = apply.apply_input_rotation(psi, op.gate, op.row, ops.markers[marker], n, cm, am)
    return psi


# ── entry point ─────────────────────────────────────────────────────
def simulate_column(state: np.ndarray, grid, col: int, *, num_qubits: int,
                    row_mapping: Optional[Mapping[int, int]] = None,
                    process_advanced: bool = False,
                    warnings: Optional[list] = None,
                    time_parameter: Optional[float] = None,
                    catalog: Optional[GateMatrixCatalog] = None,
                    epsilon: float = EPSILON) -> ColumnResult:
    """Advance ``state`` through column ``col`` of ``grid``.

    ``row_mapping`` maps grid rows to simulation rows when unpopulated rows
    have been dropped; only its keys participate.  MEASURE cells are reported
    in the result (execution mode) but not collapsed here.  ``epsilon`` is the
    amplitude below which a basis state does not trigger a precondition
    diagnostic.  ``state`` is not modified.
    """
    catalog = catalog if catalog is not None else DEFAULT_CATALOG
    n = num_qubits
    ops = classify_column(grid, col, row_mapping=row_mapping,
                          process_advanced=process_advanced)

    x_rows = ops.rows_of(G.X_CONTROL, G.X_ANTI_CONTROL)
    y_rows = ops.rows_of(G.Y_CONTROL, G.Y_ANTI_CONTROL)
    psi = np.asarray(state, dtype=np.complex128)
    psi = _rotate_into_basis(psi, x_rows, y_rows, n, catalog)

    cm, am = calculate_control_masks(
        ops.rows_of(G.CONTROL), ops.rows_of(G.ANTI_CONTROL),
        ops.rows_of(G.X_CONTROL), ops.rows_of(G.X_ANTI_CONTROL),
        ops.rows_of(G.Y_CONTROL), ops.rows_of(G.Y_ANTI_CONTROL),
        n,
    )

    for a, b in pair_swaps([s.row for s in ops.swaps]):
        psi = apply.apply_swap(psi, a, b, n, cm, am)

    for op in ops.standard:
        U = catalog.get(op.gate, op.params, time_parameter)
        psi = apply.apply_1q(psi, U, op.row, n, cm, am)

    if process_advanced:
        psi = _apply_advanced(psi, ops, col, n, cm, am, warnings, epsilon)

    psi = _rotate_out_of_basis(psi, x_rows, y_rows, n, catalog)
    if psi is state:
        psi = psi.copy()

    log.debug("column %d: %d standard, %d swaps, %d measures, cm=%#x am=%#x",
              col, len(ops.standard), len(ops.swaps), len(ops.measures), cm, am)
    return ColumnResult(
        psi,
        [m.row for m in ops.measures],
        [m.original_row for m in ops.measures],
    )
