"""Static register-marker checks for arithmetic and comparison gates.

Rules, per column:
  * a gate reading register A/B/R needs an INPUT_A/INPUT_B/INPUT_R anchor in
    the same column;
  * that marker's span must not intersect the gate's own span.

Only anchors carrying a span take part.  Amplitudes are never touched and
problems are returned, not raised.
"""
from __future__ import annotations

from colsim_engine.circuit.diagnostics import Diagnostic, MISSING_INPUT, OVERLAP
from colsim_engine.circuit.grid import Span, grid_shape
from colsim_engine.kernel.gates import (
    ARITHMETIC, COMPARISONS, REGISTER_MARKERS, GateType, required_markers,
)


def validate_circuit(grid) -> list[Diagnostic]:
    errors: list[Diagnostic] = []
    num_rows, num_cols = grid_shape(grid)

    for col in range(num_cols):
        markers: dict[GateType, Span] = {}
        gates = []
        for row in range(num_rows):
            cell = grid[row][col]
            if cell.gate is None or cell.is_continuation or cell.span is None:
                continue
            if cell.gate in REGISTER_MARKERS:
                markers.setdefault(cell.gate, cell.span)
            elif cell.gate in ARITHMETIC or cell.gate in COMPARISONS:
                gates.append((row, cell.gate, cell.span))

        for row, gate, span in gates:
            for marker in required_markers(gate):
                marker_span = markers.get(marker)
                if marker_span is None:
                    errors.append(Diagnostic(
                        col, row, gate,
                        f"Missing {marker.value} marker in column {col + 1}",
                        MISSING_INPUT,
                    ))
                elif marker_span.overlaps(span):
                    errors.append(Diagnostic(
                        col, row, gate,
                        f"{marker.value} overlaps with arithmetic gate in column {col + 1}",
                        OVERLAP,
                    ))
    return errors


def is_circuit_valid(grid) -> bool:
    return not validate_circuit(grid)
