"""Canonical demo circuits, keyed by id.

Register conventions used below: a span's first row is the least
significant bit, so "X on the second row of A" sets A = 2.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from colsim_engine.circuit.grid import Cell, GateParams, create_grid, span_cells
from colsim_engine.kernel.gates import GateType

G = GateType


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    description: str
    category: str
    qubits: int
    build: Callable[[], list[list[Cell]]]

    def grid(self) -> list[list[Cell]]:
        return self.build()


def _g(row: int, col: int, gate: GateType, angle: float | None = None) -> dict:
    p = {"row": row, "col": col, "gate": gate}
    if angle is not None:
        p["params"] = GateParams(angle=angle)
    return p


# ── entanglement / fundamentals ─────────────────────────────────────
def bell_state():
    """H(0), CX 0→1.  (|00>+|11>)/√2."""
    return create_grid(2, [
        _g(0, 0, G.H),
        _g(0, 1, G.CONTROL), _g(1, 1, G.CX),
    ])


def entangle_two_qubits():
    """Bell pair then measure both; outcomes always agree."""
    return create_grid(2, [
        _g(0, 0, G.H),
        _g(0, 1, G.CONTROL), _g(1, 1, G.CX),
        _g(0, 3, G.MEASURE), _g(1, 3, G.MEASURE),
    ])


def ghz_state():
    """(|000>+|111>)/√2."""
    return create_grid(3, [
        _g(0, 0, G.H),
        _g(0, 1, G.CONTROL), _g(1, 1, G.CX),
        _g(0, 2, G.CONTROL), _g(2, 2, G.CX),
    ])


def qft_3qubit():
    """Textbook 3-qubit QFT out of H, controlled RZ and a final SWAP."""
    return create_grid(3, [
        _g(0, 0, G.H),
        _g(0, 1, G.CONTROL), _g(1, 1, G.RZ, np.pi / 2),
        _g(0, 2, G.CONTROL), _g(2, 2, G.RZ, np.pi / 4),
        _g(1, 3, G.H),
        _g(1, 4, G.CONTROL), _g(2, 4, G.RZ, np.pi / 2),
        _g(2, 5, G.H),
        _g(0, 6, G.SWAP), _g(2, 6, G.SWAP),
    ])


def teleportation():
    return create_grid(3, [
        _g(1, 0, G.H),
        _g(1, 1, G.CONTROL), _g(2, 1, G.CX),
        _g(0, 2, G.CONTROL), _g(1, 2, G.CX),
        _g(0, 3, G.H),
        _g(0, 4, G.MEASURE), _g(1, 4, G.MEASURE),
        _g(1, 5, G.CONTROL), _g(2, 5, G.CX),
        _g(0, 6, G.CONTROL), _g(2, 6, G.CZ),
    ])


def superdense_coding():
    """Encodes 00; decoding measures 0 on both rows."""
    return create_grid(2, [
        _g(0, 0, G.H),
        _g(0, 1, G.CONTROL), _g(1, 1, G.CX),
        _g(0, 3, G.CONTROL), _g(1, 3, G.CX),
        _g(0, 4, G.H),
        _g(0, 5, G.MEASURE), _g(1, 5, G.MEASURE),
    ])


def swap_decomposition():
    return create_grid(2, [
        _g(0, 0, G.CONTROL), _g(1, 0, G.CX),
        _g(1, 1, G.CONTROL), _g(0, 1, G.CX),
        _g(0, 2, G.CONTROL), _g(1, 2, G.CX),
    ])


def toffoli_demo():
    """Both controls set: |110> → |111>."""
    return create_grid(3, [
        _g(0, 0, G.X), _g(1, 0, G.X),
        _g(0, 1, G.CONTROL), _g(1, 1, G.CONTROL), _g(2, 1, G.CCX),
    ])


# ── register arithmetic ─────────────────────────────────────────────
def add_a_mod_r_demo():
    """A=2 (rows 0-1), R=3 (rows 2-3), effect=1 (rows 4-5): (1+2) mod 3 = 0."""
    return create_grid(6, [
        _g(1, 0, G.X),
        _g(2, 0, G.X), _g(3, 0, G.X),
        _g(4, 0, G.X),
        *span_cells(G.INPUT_A, 0, 1, 2),
        *span_cells(G.INPUT_R, 2, 3, 2),
        *span_cells(G.ADD_A_MOD_R, 4, 5, 2),
        _g(4, 4, G.MEASURE), _g(5, 4, G.MEASURE),
    ])


def modular_add_demo():
    """A=2 (rows 0-1) added to effect=1 (rows 2-3): 3."""
    return create_grid(4, [
        _g(1, 0, G.X),
        _g(2, 0, G.X),
        *span_cells(G.INPUT_A, 0, 1, 2),
        *span_cells(G.ADD_A, 2, 3, 2),
        _g(2, 4, G.MEASURE), _g(3, 4, G.MEASURE),
    ])


def modular_mul_demo():
    """A=3 (rows 0-1) times effect=2 (rows 2-3) mod 4: 2."""
    return create_grid(4, [
        _g(0, 0, G.X), _g(1, 0, G.X),
        _g(3, 0, G.X),
        *span_cells(G.INPUT_A, 0, 1, 2),
        *span_cells(G.MUL_A, 2, 3, 2),
        _g(2, 4, G.MEASURE), _g(3, 4, G.MEASURE),
    ])


def increment_demo():
    """Register (rows 0-1) = 2; INC, INC, DEC → 3."""
    return create_grid(4, [
        _g(1, 0, G.X),
        *span_cells(G.INC, 0, 1, 2),
        *span_cells(G.INC, 0, 1, 3),
        *span_cells(G.DEC, 0, 1, 4),
        _g(0, 6, G.MEASURE), _g(1, 6, G.MEASURE),
    ])


def shor_demo():
    """Period finding for a=2, N=3 with 2-qubit registers.

    Rows 0-1 count, A sits on rows 2-3, R=3 on rows 4-5 and the work
    register (rows 6-7) starts at 1.  A is 2 for the first controlled
    multiply and 1 (= 2² mod 3) for the second.
    """
    return create_grid(8, [
        _g(0, 0, G.H), _g(1, 0, G.H),
        _g(3, 0, G.X),                      # A = 2
        _g(4, 0, G.X), _g(5, 0, G.X),       # R = 3
        _g(6, 0, G.X),                      # work = 1
        _g(1, 2, G.CONTROL),
        *span_cells(G.INPUT_A, 2, 3, 2),
        *span_cells(G.INPUT_R, 4, 5, 2),
        *span_cells(G.MUL_A_MOD_R, 6, 7, 2),
        _g(2, 3, G.X), _g(3, 3, G.X),       # A: 2 → 1
        _g(0, 4, G.CONTROL),
        *span_cells(G.INPUT_A, 2, 3, 4),
        *span_cells(G.INPUT_R, 4, 5, 4),
        *span_cells(G.MUL_A_MOD_R, 6, 7, 4),
        _g(0, 6, G.SWAP), _g(1, 6, G.SWAP),
        _g(0, 7, G.H),
        _g(0, 8, G.CONTROL), _g(1, 8, G.RZ, -np.pi / 2),
        _g(1, 9, G.H),
        _g(0, 11, G.MEASURE), _g(1, 11, G.MEASURE),
    ])


TEMPLATES: dict[str, Template] = {t.id: t for t in [
    Template("bell-state", "Bell State (EPR Pair)",
             "Maximally entangled (|00>+|11>)/√2", "Entanglement", 2, bell_state),
    Template("entangle-two-qubits", "Entangle Two Qubits",
             "H then CNOT, both measured; results are correlated", "Entanglement", 2,
             entangle_two_qubits),
    Template("ghz-state", "GHZ State", "(|000>+|111>)/√2", "Entanglement", 3, ghz_state),
    Template("qft-3qubit", "Quantum Fourier Transform (3-qubit)",
             "QFT built from H, controlled phases and SWAP", "Algorithms", 3, qft_3qubit),
    Template("teleportation", "Quantum Teleportation",
             "Teleports row 0 onto row 2 with mid-circuit measurement", "Fundamental", 3,
             teleportation),
    Template("superdense-coding", "Superdense Coding",
             "Two classical bits over one qubit of a Bell pair", "Fundamental", 2,
             superdense_coding),
    Template("swap-decomposition", "SWAP from CNOTs", "SWAP as three CNOTs", "Gates", 2,
             swap_decomposition),
    Template("toffoli-demo", "Toffoli Gate Demo", "CCX with both controls set", "Gates", 3,
             toffoli_demo),
    Template("modular-add-mod-r-demo", "Add A mod R Demo", "(1 + 2) mod 3 = 0",
             "Algorithms", 6, add_a_mod_r_demo),
    Template("modular-add-demo", "Modular Addition Demo", "(1 + 2) mod 4 = 3",
             "Algorithms", 4, modular_add_demo),
    Template("modular-mul-demo", "Modular Multiply Demo", "(2 × 3) mod 4 = 2",
             "Algorithms", 4, modular_mul_demo),
    Template("increment-demo", "Increment/Decrement Demo", "2 → 3 → 0 → 3",
             "Algorithms", 4, increment_demo),
    Template("shor-algorithm", "Shor's Algorithm (Simplified)",
             "Controlled modular multiplication and inverse QFT for a=2, N=3",
             "Algorithms", 8, shor_demo),
]}


def get_template(template_id: str) -> Template:
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise ValueError(f"unknown template {template_id!r}; known: {sorted(TEMPLATES)}") from None


def templates_by_category() -> dict[str, list[Template]]:
    out: dict[str, list[Template]] = {}
    for t in TEMPLATES.values():
        out.setdefault(t.category, []).append(t)
    return out
