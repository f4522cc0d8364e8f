"""Circuit grid model: cells, gate parameters, builders and shape checks.

A grid is ``list[list[Cell]]`` indexed ``grid[row][col]``.  The engine only
reads it.  Multi-row gates (registers, arithmetic, QFT, ...) occupy one cell
per row: the ANCHOR cell carries the span and ``is_span_continuation=False``;
the remaining rows repeat the gate with ``is_span_continuation=True``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from colsim_engine.kernel.gates import GateType
from colsim_engine.kernel.registers import Span

__all__ = [
    "GateParams", "Cell", "Span", "EMPTY", "create_grid", "span_cells",
    "validate_grid", "grid_shape", "populated_rows", "column_has_gates",
]

MIN_COLUMNS = 1


@dataclass(frozen=True)
class GateParams:
    angle: Optional[float] = None
    custom_matrix: Any = None
    span: Optional[Span] = None
    is_span_continuation: bool = False
    custom_label: Optional[str] = None


@dataclass(frozen=True)
class Cell:
    gate: Optional[GateType] = None
    params: Optional[GateParams] = None

    @property
    def is_empty(self) -> bool:
        return self.gate is None

    @property
    def span(self) -> Optional[Span]:
        return self.params.span if self.params is not None else None

    @property
    def is_continuation(self) -> bool:
        return self.params is not None and self.params.is_span_continuation


EMPTY = Cell()


# ── builders ────────────────────────────────────────────────────────
def span_cells(gate: GateType, start_row: int, end_row: int, col: int,
               **extra) -> list[dict]:
    """Placements for a multi-row gate: one anchor plus continuation rows."""
    span = Span(start_row, end_row)
    out = []
    for row in span.rows():
        params = GateParams(span=span, is_span_continuation=row != start_row, **extra)
        out.append({"row": row, "col": col, "gate": gate, "params": params})
    return out


def create_grid(num_qubits: int, placements: Iterable[dict],
                num_cols: Optional[int] = None) -> list[list[Cell]]:
    """Build a full grid from sparse ``{row, col, gate, params?}`` placements.

    Width is ``num_cols`` or one past the right-most placement.  Placements
    outside the grid are dropped.
    """
    placements = list(placements)
    if num_cols is None:
        num_cols = max([p["col"] + 1 for p in placements] + [MIN_COLUMNS])
    grid = [[EMPTY for _ in range(num_cols)] for _ in range(num_qubits)]
    for p in placements:
        row, col = p["row"], p["col"]
        if 0 <= row < num_qubits and 0 <= col < num_cols:
            params = p.get("params")
            if params is None and p.get("angle") is not None:
                params = GateParams(angle=p["angle"])
            grid[row][col] = Cell(GateType(p["gate"]), params)
    return grid


# ── validation ──────────────────────────────────────────────────────
def grid_shape(grid: Sequence[Sequence[Cell]]) -> tuple[int, int]:
    rows = len(grid)
    return rows, (len(grid[0]) if rows else 0)


def validate_grid(grid, max_qubits: Optional[int] = None) -> tuple[int, int]:
    """Check grid shape and spans.  Raises ValueError on bad input.

    Returns ``(num_rows, num_cols)``.
    """
    if not isinstance(grid, (list, tuple)):
        raise ValueError("grid must be a list of rows")
    num_rows, num_cols = 0, 0
    for r, row in enumerate(grid):
        if not isinstance(row, (list, tuple)):
            raise ValueError(f"row {r} must be a list of cells, got {type(row).__name__}")
        if r == 0:
            num_cols = len(row)
        elif len(row) != num_cols:
            raise ValueError(f"row {r} has {len(row)} cells, expected {num_cols}")
        num_rows += 1
    if max_qubits is not None and num_rows > max_qubits:
        raise ValueError(f"grid has {num_rows} rows, limit is {max_qubits}")

    for r, row in enumerate(grid):
        for c, cell in enumerate(row):
            if not isinstance(cell, Cell):
                raise ValueError(f"cell ({r}, {c}) is not a Cell: {cell!r}")
            span = cell.span
            if span is None:
                continue
            if span.end_row < span.start_row:
                raise ValueError(f"cell ({r}, {c}): span {tuple(span)} has end_row < start_row")
            if span.start_row < 0 or span.end_row >= num_rows:
                raise ValueError(f"cell ({r}, {c}): span {tuple(span)} outside rows [0, {num_rows})")
    return num_rows, num_cols


# ── queries ─────────────────────────────────────────────────────────
def populated_rows(grid: Sequence[Sequence[Cell]]) -> list[int]:
    """Rows holding at least one gate anywhere in the circuit."""
    return [r for r, row in enumerate(grid) if any(cell.gate is not None for cell in row)]


def column_has_gates(grid: Sequence[Sequence[Cell]], col: int,
                     rows: Optional[Iterable[int]] = None) -> bool:
    rows = range(len(grid)) if rows is None else rows
    return any(grid[r][col].gate is not None for r in rows)
