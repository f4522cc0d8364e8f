"""Gate types and the 2×2 gate-matrix catalog.

Convention:
  1-qubit gates: 2×2 complex128 ndarray, rows = output |0>,|1>, cols = input.
  Multi-qubit behaviour (controls, SWAP, registers) is handled by the column
  simulator; every gate here is described by at most one 2×2 matrix.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

_S2 = 1.0 / np.sqrt(2.0)


class GateType(str, Enum):
    # single qubit, fixed
    X = "X"
    Y = "Y"
    Z = "Z"
    H = "H"
    S = "S"
    SDG = "SDG"
    T = "T"
    I = "I"
    SQRT_X = "SQRT_X"
    SQRT_X_DG = "SQRT_X_DG"
    SQRT_Y = "SQRT_Y"
    SQRT_Y_DG = "SQRT_Y_DG"
    RX_PI_2 = "RX_PI_2"
    RX_PI_4 = "RX_PI_4"
    RX_PI_8 = "RX_PI_8"
    RX_PI_12 = "RX_PI_12"
    RY_PI_2 = "RY_PI_2"
    RY_PI_4 = "RY_PI_4"
    RY_PI_8 = "RY_PI_8"
    RY_PI_12 = "RY_PI_12"
    RZ_PI_2 = "RZ_PI_2"
    RZ_PI_4 = "RZ_PI_4"
    RZ_PI_8 = "RZ_PI_8"
    RZ_PI_12 = "RZ_PI_12"
    CX = "CX"
    CZ = "CZ"
    CCX = "CCX"

    # parameterised
    RX = "RX"
    RY = "RY"
    RZ = "RZ"
    CUSTOM = "CUSTOM"

    # time parameterised
    ZT = "ZT"
    XT = "XT"
    YT = "YT"
    EXP_Z = "EXP_Z"
    EXP_X = "EXP_X"
    EXP_Y = "EXP_Y"

    # controls
    CONTROL = "CONTROL"
    ANTI_CONTROL = "ANTI_CONTROL"
    X_CONTROL = "X_CONTROL"
    X_ANTI_CONTROL = "X_ANTI_CONTROL"
    Y_CONTROL = "Y_CONTROL"
    Y_ANTI_CONTROL = "Y_ANTI_CONTROL"

    SWAP = "SWAP"
    MEASURE = "MEASURE"

    # span transforms
    REVERSE = "REVERSE"
    PHASE_GRADIENT = "PHASE_GRADIENT"
    QFT = "QFT"
    QFT_DG = "QFT_DG"

    # arithmetic permutations
    INC = "INC"
    DEC = "DEC"
    ADD_A = "ADD_A"
    SUB_A = "SUB_A"
    MUL_A = "MUL_A"
    DIV_A = "DIV_A"
    MUL_B = "MUL_B"
    DIV_B = "DIV_B"
    INC_MOD_R = "INC_MOD_R"
    DEC_MOD_R = "DEC_MOD_R"
    ADD_A_MOD_R = "ADD_A_MOD_R"
    SUB_A_MOD_R = "SUB_A_MOD_R"
    MUL_A_MOD_R = "MUL_A_MOD_R"
    DIV_A_MOD_R = "DIV_A_MOD_R"

    # comparisons
    A_LT_B = "A_LT_B"
    A_LEQ_B = "A_LEQ_B"
    A_GT_B = "A_GT_B"
    A_GEQ_B = "A_GEQ_B"
    A_EQ_B = "A_EQ_B"
    A_NEQ_B = "A_NEQ_B"

    # scalars
    SCALE_I = "SCALE_I"
    SCALE_NEG_I = "SCALE_NEG_I"
    SCALE_SQRT_I = "SCALE_SQRT_I"
    SCALE_SQRT_NEG_I = "SCALE_SQRT_NEG_I"

    # register markers
    INPUT_A = "INPUT_A"
    INPUT_B = "INPUT_B"
    INPUT_R = "INPUT_R"

    # input parameterised rotations
    ZA = "ZA"
    XA = "XA"
    YA = "YA"
    ZB = "ZB"
    XB = "XB"
    YB = "YB"

    # display markers (no effect on the state)
    BLOCH_DISPLAY = "BLOCH_DISPLAY"
    PROBABILITY_DISPLAY = "PROBABILITY_DISPLAY"


G = GateType

PARAMETERIZED = frozenset({G.RX, G.RY, G.RZ})
TIME_PARAMETERIZED = frozenset({G.ZT, G.XT, G.YT})
EXPONENTIAL = frozenset({G.EXP_Z, G.EXP_X, G.EXP_Y})

PLAIN_CONTROLS = frozenset({G.CONTROL, G.ANTI_CONTROL})
X_BASIS_CONTROLS = frozenset({G.X_CONTROL, G.X_ANTI_CONTROL})
Y_BASIS_CONTROLS = frozenset({G.Y_CONTROL, G.Y_ANTI_CONTROL})
CONTROLS = PLAIN_CONTROLS | X_BASIS_CONTROLS | Y_BASIS_CONTROLS

SPAN_TRANSFORMS = frozenset({G.REVERSE, G.PHASE_GRADIENT, G.QFT, G.QFT_DG})
ARITHMETIC = frozenset({
    G.INC, G.DEC, G.ADD_A, G.SUB_A, G.MUL_A, G.DIV_A, G.MUL_B, G.DIV_B,
    G.INC_MOD_R, G.DEC_MOD_R, G.ADD_A_MOD_R, G.SUB_A_MOD_R,
    G.MUL_A_MOD_R, G.DIV_A_MOD_R,
})
COMPARISONS = frozenset({G.A_LT_B, G.A_LEQ_B, G.A_GT_B, G.A_GEQ_B, G.A_EQ_B, G.A_NEQ_B})
SCALARS = frozenset({G.SCALE_I, G.SCALE_NEG_I, G.SCALE_SQRT_I, G.SCALE_SQRT_NEG_I})
REGISTER_MARKERS = frozenset({G.INPUT_A, G.INPUT_B, G.INPUT_R})
INPUT_ROTATIONS_A = frozenset({G.ZA, G.XA, G.YA})
INPUT_ROTATIONS_B = frozenset({G.ZB, G.XB, G.YB})
INPUT_ROTATIONS = INPUT_ROTATIONS_A | INPUT_ROTATIONS_B
DISPLAY_MARKERS = frozenset({G.BLOCH_DISPLAY, G.PROBABILITY_DISPLAY})

REQUIRES_A = frozenset({
    G.ADD_A, G.SUB_A, G.MUL_A, G.DIV_A,
    G.ADD_A_MOD_R, G.SUB_A_MOD_R, G.MUL_A_MOD_R, G.DIV_A_MOD_R,
}) | COMPARISONS | INPUT_ROTATIONS_A
REQUIRES_B = frozenset({G.MUL_B, G.DIV_B}) | COMPARISONS | INPUT_ROTATIONS_B
REQUIRES_R = frozenset({
    G.INC_MOD_R, G.DEC_MOD_R, G.ADD_A_MOD_R, G.SUB_A_MOD_R,
    G.MUL_A_MOD_R, G.DIV_A_MOD_R,
})

SCALAR_VALUES = {
    G.SCALE_I: 1j,
    G.SCALE_NEG_I: -1j,
    G.SCALE_SQRT_I: complex(_S2, _S2),
    G.SCALE_SQRT_NEG_I: complex(_S2, -_S2),
}


def required_markers(gate: GateType) -> list[GateType]:
    """Register markers ``gate`` reads, in A, B, R order."""
    out = []
    if gate in REQUIRES_A:
        out.append(G.INPUT_A)
    if gate in REQUIRES_B:
        out.append(G.INPUT_B)
    if gate in REQUIRES_R:
        out.append(G.INPUT_R)
    return out


def _mat(*rows):
    return np.array(rows, dtype=np.complex128)


# ── 1-qubit fixed ───────────────────────────────────────────────────
def identity():
    return _mat([1, 0], [0, 1])

def H():
    return _mat([_S2, _S2], [_S2, -_S2])

def X():
    return _mat([0, 1], [1, 0])

def Y():
    return _mat([0, -1j], [1j, 0])

def Z():
    return _mat([1, 0], [0, -1])

def S():
    return _mat([1, 0], [0, 1j])

def SDG():
    return _mat([1, 0], [0, -1j])

def T():
    return _mat([1, 0], [0, np.exp(1j * np.pi / 4)])


# ── 1-qubit parameterised ──────────────────────────────────────────
def RX(theta: float):
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return _mat([c, -1j * s], [-1j * s, c])

def RY(theta: float):
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return _mat([c, -s], [s, c])

def RZ(theta: float):
    return _mat([np.exp(-0.5j * theta), 0], [0, np.exp(0.5j * theta)])


# ── time parameterised (t in [0, 1]) ────────────────────────────────
def ZT(t: float):
    return _mat([1, 0], [0, np.exp(2j * np.pi * t)])

def XT(t: float):
    c, s = np.cos(np.pi * t), np.sin(np.pi * t)
    return _mat([c, -1j * s], [-1j * s, c])

def YT(t: float):
    c, s = np.cos(np.pi * t), np.sin(np.pi * t)
    return _mat([c, -s], [s, c])

def EXP_Z(t: float):
    return _mat([np.exp(1j * np.pi * t), 0], [0, np.exp(-1j * np.pi * t)])

def EXP_X(t: float):
    c, s = np.cos(np.pi * t), np.sin(np.pi * t)
    return _mat([c, 1j * s], [1j * s, c])

def EXP_Y(t: float):
    c, s = np.cos(np.pi * t), np.sin(np.pi * t)
    return _mat([c, s], [-s, c])


# ── dispatcher ──────────────────────────────────────────────────────
_FIXED_1Q = {
    G.X: X, G.Y: Y, G.Z: Z, G.H: H, G.S: S, G.SDG: SDG, G.T: T, G.I: identity,
    G.CX: X, G.CZ: Z, G.CCX: X,
    G.SQRT_X: lambda: RX(np.pi / 2),
    G.SQRT_X_DG: lambda: RX(-np.pi / 2),
    G.SQRT_Y: lambda: RY(np.pi / 2),
    G.SQRT_Y_DG: lambda: RY(-np.pi / 2),
}
_PRESET_ROTATIONS = {
    G.RX_PI_2: (RX, 2), G.RX_PI_4: (RX, 4), G.RX_PI_8: (RX, 8), G.RX_PI_12: (RX, 12),
    G.RY_PI_2: (RY, 2), G.RY_PI_4: (RY, 4), G.RY_PI_8: (RY, 8), G.RY_PI_12: (RY, 12),
    G.RZ_PI_2: (RZ, 2), G.RZ_PI_4: (RZ, 4), G.RZ_PI_8: (RZ, 8), G.RZ_PI_12: (RZ, 12),
}
_PARAM_1Q = {G.RX: RX, G.RY: RY, G.RZ: RZ}
_TIME_1Q = {G.ZT: ZT, G.XT: XT, G.YT: YT, G.EXP_Z: EXP_Z, G.EXP_X: EXP_X, G.EXP_Y: EXP_Y}


def _fixed_matrix(gate: GateType) -> Optional[np.ndarray]:
    if gate in _FIXED_1Q:
        return _FIXED_1Q[gate]()
    if gate in _PRESET_ROTATIONS:
        fn, denom = _PRESET_ROTATIONS[gate]
        return fn(np.pi / denom)
    if gate in SCALAR_VALUES:
        return SCALAR_VALUES[gate] * identity()
    return None


class GateMatrixCatalog:
    """2×2 matrix per gate type, memoising the fixed ones.

    Parameterised (angle), time-parameterised, exponential and custom matrices
    are rebuilt on every call.  Gate types without a matrix of their own
    (markers, arithmetic, ...) resolve to an uncached identity.
    """

    def __init__(self):
        self._cache: dict[GateType, np.ndarray] = {}

    def get(self, gate: GateType, params=None, t: Optional[float] = None) -> np.ndarray:
        if gate in _TIME_1Q:
            return _TIME_1Q[gate](0.0 if t is None else t)
        if gate in _PARAM_1Q:
            angle = getattr(params, "angle", None)
            return _PARAM_1Q[gate](0.0 if angle is None else angle)
        if gate == G.CUSTOM:
            custom = getattr(params, "custom_matrix", None)
            if custom is not None:
                return np.asarray(custom, dtype=np.complex128)
            return identity()

        cached = self._cache.get(gate)
        if cached is not None:
            return cached
        U = _fixed_matrix(gate)
        if U is None:
            return identity()
        U.setflags(write=False)
        self._cache[gate] = U
        return U

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def is_cached(self, gate: GateType) -> bool:
        return gate in self._cache

    def clear(self) -> None:
        self._cache.clear()


DEFAULT_CATALOG = GateMatrixCatalog()


def gate_matrix(gate: GateType, params=None, t: Optional[float] = None) -> np.ndarray:
    """Return the 2×2 unitary for a gate using the shared catalog."""
    return DEFAULT_CATALOG.get(gate, params, t)


def is_unitary(U: np.ndarray, atol: float = 1e-9) -> bool:
    U = np.asarray(U, dtype=np.complex128)
    return np.allclose(U.conj().T @ U, np.eye(U.shape[0]), atol=atol)
