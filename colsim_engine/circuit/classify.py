"""Turn the cells of one grid column into typed operations.

``classify_cell`` maps a single cell to one member of the ``Operation`` union
(or None when the cell has no effect); ``classify_column`` groups a column's
operations by family with ``isinstance`` so the column simulator can apply
them in its fixed order.

Row numbers on operations are SIMULATION rows, i.e. grid rows passed through
``row_mapping`` when rows have been filtered.  ``original_row`` keeps the grid
row for reporting.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from colsim_engine.circuit.grid import Cell, GateParams
from colsim_engine.kernel.gates import (
    GateType, ARITHMETIC, COMPARISONS, CONTROLS, DISPLAY_MARKERS,
    INPUT_ROTATIONS, REGISTER_MARKERS, SCALARS, SPAN_TRANSFORMS,
)
from colsim_engine.kernel.registers import Span

log = logging.getLogger(__name__)

G = GateType


@dataclass(frozen=True)
class ControlOp:
    row: int
    kind: GateType


@dataclass(frozen=True)
class SwapOp:
    row: int


@dataclass(frozen=True)
class MeasureOp:
    row: int
    original_row: int


@dataclass(frozen=True)
class StandardOp:
    row: int
    gate: GateType
    params: Optional[GateParams] = None


@dataclass(frozen=True)
class SpanOp:
    gate: GateType
    span: Span


@dataclass(frozen=True)
class ArithmeticOp:
    gate: GateType
    span: Span
    original_row: int


@dataclass(frozen=True)
class ComparisonOp:
    gate: GateType
    row: int
    original_row: int


@dataclass(frozen=True)
class ScalarOp:
    gate: GateType
    row: int


@dataclass(frozen=True)
class RegisterMarker:
    gate: GateType
    span: Span


@dataclass(frozen=True)
class InputRotationOp:
    gate: GateType
    row: int
    original_row: int


Operation = Union[
    ControlOp, SwapOp, MeasureOp, StandardOp, SpanOp, ArithmeticOp,
    ComparisonOp, ScalarOp, RegisterMarker, InputRotationOp,
]


@dataclass
class ClassifiedColumn:
    controls: list[ControlOp] = field(default_factory=list)
    swaps: list[SwapOp] = field(default_factory=list)
    measures: list[MeasureOp] = field(default_factory=list)
    standard: list[StandardOp] = field(default_factory=list)
    span_ops: list[SpanOp] = field(default_factory=list)
    arithmetic: list[ArithmeticOp] = field(default_factory=list)
    comparisons: list[ComparisonOp] = field(default_factory=list)
    scalars: list[ScalarOp] = field(default_factory=list)
    markers: dict[GateType, Span] = field(default_factory=dict)
    input_rotations: list[InputRotationOp] = field(default_factory=list)

    def add(self, op: Operation) -> None:
        if isinstance(op, ControlOp):
            self.controls.append(op)
        elif isinstance(op, SwapOp):
            self.swaps.append(op)
        elif isinstance(op, MeasureOp):
            self.measures.append(op)
        elif isinstance(op, StandardOp):
            self.standard.append(op)
        elif isinstance(op, SpanOp):
            self.span_ops.append(op)
        elif isinstance(op, ArithmeticOp):
            self.arithmetic.append(op)
        elif isinstance(op, ComparisonOp):
            self.comparisons.append(op)
        elif isinstance(op, ScalarOp):
            self.scalars.append(op)
        elif isinstance(op, RegisterMarker):
            # last anchor in the column wins
            self.markers[op.gate] = op.span
        elif isinstance(op, InputRotationOp):
            self.input_rotations.append(op)
        else:
            raise TypeError(f"unknown operation {op!r}")

    def rows_of(self, *kinds: GateType) -> list[int]:
        return [c.row for c in self.controls if c.kind in kinds]


def _map_span(span: Optional[Span], row_mapping: Optional[Mapping[int, int]]) -> Optional[Span]:
    if span is None:
        return None
    if row_mapping is None:
        return Span(span.start_row, span.end_row)
    start = row_mapping.get(span.start_row)
    end = row_mapping.get(span.end_row)
    if start is None or end is None:
        return None
    return Span(start, end)


def classify_cell(cell: Cell, original_row: int, *,
                  row_mapping: Optional[Mapping[int, int]] = None,
                  process_advanced: bool = False) -> Optional[Operation]:
    gate = cell.gate
    if gate is None or gate in DISPLAY_MARKERS:
        return None
    row = row_mapping[original_row] if row_mapping is not None else original_row

    if gate in CONTROLS:
        return ControlOp(row, gate)
    if gate == G.SWAP:
        return SwapOp(row)
    if gate == G.MEASURE:
        if process_advanced:
            return MeasureOp(row, original_row)
        return StandardOp(row, G.I, cell.params)
    if not process_advanced:
        # the catalog resolves non-matrix gates to identity
        return StandardOp(row, gate, cell.params)

    spanned = gate in SPAN_TRANSFORMS or gate in ARITHMETIC or gate in REGISTER_MARKERS
    if spanned or gate in COMPARISONS:
        if cell.is_continuation:
            return None
    if spanned:
        span = _map_span(cell.span, row_mapping)
        if span is None:
            log.debug("%s at row %d has no usable span; skipped", gate.value, original_row)
            return None
        if gate in SPAN_TRANSFORMS:
            return SpanOp(gate, span)
        if gate in ARITHMETIC:
            return ArithmeticOp(gate, span, original_row)
        return RegisterMarker(gate, span)
    if gate in COMPARISONS:
        return ComparisonOp(gate, row, original_row)
    if gate in SCALARS:
        return ScalarOp(gate, row)
    if gate in INPUT_ROTATIONS:
        return InputRotationOp(gate, row, original_row)
    return StandardOp(row, gate, cell.params)


def classify_column(grid, col: int, *,
                    row_mapping: Optional[Mapping[int, int]] = None,
                    process_advanced: bool = False) -> ClassifiedColumn:
    """Classify every participating row of column ``col``, top to bottom."""
    rows = sorted(row_mapping) if row_mapping is not None else range(len(grid))
    out = ClassifiedColumn()
    for original_row in rows:
        op = classify_cell(grid[original_row][col], original_row,
                           row_mapping=row_mapping, process_advanced=process_advanced)
        if op is not None:
            out.add(op)
    return out
