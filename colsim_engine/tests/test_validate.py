"""Static circuit validation and grid shape checks."""
import pytest

from colsim_engine.circuit.grid import (
    Cell, GateParams, Span, column_has_gates, create_grid, populated_rows, span_cells,
    validate_grid,
)
from colsim_engine.circuit.validate import is_circuit_valid, validate_circuit
from colsim_engine.tests.fixtures.circuits import G, g


def test_empty_circuit_is_valid():
    grid = create_grid(4, [], num_cols=4)
    assert validate_circuit(grid) == []
    assert is_circuit_valid(grid)


def test_basic_gates_are_valid():
    grid = create_grid(4, [g(0, 0, G.H), g(1, 1, G.X)], num_cols=4)
    assert validate_circuit(grid) == []


def test_missing_input_a():
    grid = create_grid(4, span_cells(G.ADD_A, 0, 1, 0), num_cols=4)
    errors = validate_circuit(grid)
    assert len(errors) == 1
    e = errors[0]
    assert e.message == "Missing INPUT_A marker in column 1"
    assert e.category == "missing_input"
    assert (e.column, e.row, e.gate_type) == (0, 0, G.ADD_A)
    assert not is_circuit_valid(grid)


def test_missing_input_b_for_comparison():
    placements = span_cells(G.A_LT_B, 0, 1, 0) + span_cells(G.INPUT_A, 2, 3, 0)
    errors = validate_circuit(create_grid(4, placements))
    assert [e.message for e in errors] == ["Missing INPUT_B marker in column 1"]


def test_marker_in_other_column_does_not_count():
    placements = span_cells(G.INPUT_A, 0, 1, 0) + span_cells(G.ADD_A, 2, 3, 1)
    errors = validate_circuit(create_grid(4, placements))
    assert [e.message for e in errors] == ["Missing INPUT_A marker in column 2"]


def test_overlap_detected():
    placements = span_cells(G.INPUT_A, 0, 1, 0) + span_cells(G.ADD_A, 1, 2, 0)
    # row 1 holds the ADD_A anchor, so INPUT_A keeps only its row 0 anchor
    errors = validate_circuit(create_grid(4, placements))
    assert len(errors) == 1
    assert errors[0].category == "overlap"
    assert errors[0].message == "INPUT_A overlaps with arithmetic gate in column 1"


def test_mod_r_needs_both_markers():
    errors = validate_circuit(create_grid(6, span_cells(G.MUL_A_MOD_R, 4, 5, 0)))
    assert [e.message for e in errors] == [
        "Missing INPUT_A marker in column 1",
        "Missing INPUT_R marker in column 1",
    ]


def test_valid_arithmetic_column():
    placements = (span_cells(G.INPUT_A, 0, 1, 2) + span_cells(G.INPUT_R, 2, 3, 2)
                  + span_cells(G.ADD_A_MOD_R, 4, 5, 2))
    assert is_circuit_valid(create_grid(6, placements))


def test_gates_without_span_are_not_checked():
    assert is_circuit_valid(create_grid(2, [g(0, 0, G.ADD_A)]))


# ── grid shape ──────────────────────────────────────────────────────
def test_validate_grid_shape():
    assert validate_grid(create_grid(3, [], num_cols=5)) == (3, 5)


def test_ragged_grid_rejected():
    grid = [[Cell()] * 3, [Cell()] * 2]
    with pytest.raises(ValueError, match="row 1 has 2 cells"):
        validate_grid(grid)


def test_non_cell_rejected():
    with pytest.raises(ValueError, match="not a Cell"):
        validate_grid([[Cell(), "H"]])


def test_non_list_rejected():
    with pytest.raises(ValueError):
        validate_grid("H")
    with pytest.raises(ValueError):
        validate_grid([None])


def test_bad_spans_rejected():
    backwards = Cell(G.INC, GateParams(span=Span(2, 1)))
    with pytest.raises(ValueError, match="end_row < start_row"):
        validate_grid([[backwards], [Cell()], [Cell()]])
    outside = Cell(G.INC, GateParams(span=Span(0, 3)))
    with pytest.raises(ValueError, match="outside rows"):
        validate_grid([[outside], [Cell()]])


def test_too_many_qubits_rejected():
    with pytest.raises(ValueError, match="limit"):
        validate_grid(create_grid(5, [], num_cols=1), max_qubits=4)


# ── builders & queries ──────────────────────────────────────────────
def test_span_cells_anchor_and_continuations():
    cells = span_cells(G.QFT, 1, 3, 4)
    assert [c["row"] for c in cells] == [1, 2, 3]
    assert [c["params"].is_span_continuation for c in cells] == [False, True, True]
    assert all(c["params"].span == Span(1, 3) and c["col"] == 4 for c in cells)


def test_create_grid_width_and_drops():
    grid = create_grid(2, [g(0, 3, G.H), g(5, 0, G.X)])
    assert len(grid) == 2 and len(grid[0]) == 4
    assert grid[0][3].gate == G.H
    assert all(c.gate is None for c in grid[1])


def test_populated_rows_and_columns():
    grid = create_grid(4, [g(1, 0, G.H), g(3, 2, G.X)], num_cols=4)
    assert populated_rows(grid) == [1, 3]
    assert column_has_gates(grid, 0)
    assert not column_has_gates(grid, 1)
    assert not column_has_gates(grid, 2, rows=[0, 1])
