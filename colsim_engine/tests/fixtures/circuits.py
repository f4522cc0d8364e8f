"""Canonical test grids."""
from __future__ import annotations

from colsim_engine.circuit.grid import GateParams, create_grid, span_cells
from colsim_engine.kernel.gates import GateType

G = GateType


def g(row, col, gate, **params) -> dict:
    p = {"row": row, "col": col, "gate": gate}
    if params:
        p["params"] = GateParams(**params)
    return p


def single(gate, num_qubits: int = 1, row: int = 0, **params):
    """One gate at column 0."""
    return create_grid(num_qubits, [g(row, 0, gate, **params)])


def cx_01(prep_x_on_control: bool = False):
    """CONTROL(0) + CX(1) at column 0 on |00>, stays |00>.

    With ``prep_x_on_control`` an X(0) column comes first and the CX moves to
    column 1, giving |11>.
    """
    if not prep_x_on_control:
        return create_grid(2, [g(0, 0, G.CONTROL), g(1, 0, G.CX)])
    return create_grid(2, [g(0, 0, G.X), g(0, 1, G.CONTROL), g(1, 1, G.CX)])


def x_then_swap():
    """X(1) → |01>, then SWAP(0, 1) → |10>."""
    return create_grid(2, [
        g(1, 0, G.X),
        g(0, 1, G.SWAP), g(1, 1, G.SWAP),
    ])


def inc_times(k: int, width: int = 2):
    """INC applied ``k`` times to a ``width``-row register starting at 0."""
    placements = []
    for col in range(k):
        placements += span_cells(G.INC, 0, width - 1, col)
    return create_grid(width, placements, num_cols=max(k, 1))


def register_prep(values: dict, spans: dict, num_qubits: int, col: int = 0) -> list[dict]:
    """X placements loading ``values[name]`` into ``spans[name]`` (first row = LSB)."""
    out = []
    for name, value in values.items():
        start, end = spans[name]
        for i, row in enumerate(range(start, end + 1)):
            if (value >> i) & 1:
                out.append(g(row, col, G.X))
    return out


def arithmetic_column(gate, effect_span, effect_value: int,
                      a=None, b=None, r=None, num_qubits: int = 6,
                      a_span=(0, 1), b_span=(2, 3), r_span=(2, 3)):
    """Load registers in column 0, apply ``gate`` on ``effect_span`` in column 1.

    Markers are placed for every register whose value is given.
    """
    values = {"effect": effect_value}
    spans = {"effect": effect_span}
    placements = []
    for name, value, span, marker in (("a", a, a_span, G.INPUT_A),
                                      ("b", b, b_span, G.INPUT_B),
                                      ("r", r, r_span, G.INPUT_R)):
        if value is None:
            continue
        values[name] = value
        spans[name] = span
        placements += span_cells(marker, span[0], span[1], 1)
    placements += register_prep(values, spans, num_qubits)
    placements += span_cells(gate, effect_span[0], effect_span[1], 1)
    # keep every row populated so no row is dropped
    for row in range(num_qubits):
        placements.append(g(row, 2, G.I))
    return create_grid(num_qubits, placements)
