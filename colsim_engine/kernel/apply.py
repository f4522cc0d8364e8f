"""Column kernels: vectorised numpy, one gate at a time.

Every kernel takes the current state and returns a NEW array; the input is
never written.  Rows are grid rows (MSB-first, see ``kernel.state``).

Control gating: ``control_mask`` bits must be 1 and ``anti_mask`` bits must
be 0 for a basis index to be acted on; other indices pass through unchanged.
The test is made per basis index for every masked kernel; bit reversal takes
no mask and always acts.  Control rows never coincide with a gate's own rows,
so pairs/groups of indices that differ only in target bits always agree on it.
"""
from __future__ import annotations

import numpy as np

from colsim_engine.kernel.complex_ops import add, mul, phase
from colsim_engine.kernel.gates import GateType, SCALAR_VALUES, INPUT_ROTATIONS
from colsim_engine.kernel.registers import Span, read_register, write_register
from colsim_engine.kernel.state import row_bit


def _indices(n_amps: int) -> np.ndarray:
    return np.arange(n_amps, dtype=np.int64)


def in_mask(idx, control_mask: int, anti_mask: int):
    return ((idx & control_mask) == control_mask) & ((idx & anti_mask) == 0)


def _pairs(psi: np.ndarray, row: int, num_qubits: int, control_mask: int, anti_mask: int):
    """(i0, i1) index arrays of in-mask pairs differing only in ``row``'s bit."""
    bit = 1 << row_bit(row, num_qubits)
    idx = _indices(len(psi))
    i0 = idx[(idx & bit) == 0]
    i0 = i0[in_mask(i0, control_mask, anti_mask)]
    return i0, i0 | bit


# ── standard gates ───────────────────────────────────────────────────

def apply_1q(psi: np.ndarray, U: np.ndarray, row: int, num_qubits: int,
             control_mask: int = 0, anti_mask: int = 0) -> np.ndarray:
    i0, i1 = _pairs(psi, row, num_qubits, control_mask, anti_mask)
    out = psi.copy()
    a, b = psi[i0], psi[i1]
    out[i0] = add(mul(U[0, 0], a), mul(U[0, 1], b))
    out[i1] = add(mul(U[1, 0], a), mul(U[1, 1], b))
    return out


def apply_swap(psi: np.ndarray, row_a: int, row_b: int, num_qubits: int,
               control_mask: int = 0, anti_mask: int = 0) -> np.ndarray:
    """Exchange amplitudes of in-mask pairs that differ in exactly the two bits."""
    ba = 1 << row_bit(row_a, num_qubits)
    bb = 1 << row_bit(row_b, num_qubits)
    idx = _indices(len(psi))
    # one representative per unordered pair: bit a set, bit b clear
    i = idx[((idx & ba) != 0) & ((idx & bb) == 0)]
    i = i[in_mask(i, control_mask, anti_mask)]
    j = i ^ ba ^ bb
    out = psi.copy()
    out[i], out[j] = psi[j], psi[i]
    return out


# ── span transforms ──────────────────────────────────────────────────

def _bit_reverse(values, width: int):
    out = values & 0
    for i in range(width):
        out = out | (((values >> i) & 1) << (width - 1 - i))
    return out


def apply_bit_reverse(psi: np.ndarray, span: Span, num_qubits: int) -> np.ndarray:
    """Reverse the span's bit order on every basis index; controls do not apply."""
    if span.size <= 1:
        return psi.copy()
    idx = _indices(len(psi))
    values = read_register(idx, span, num_qubits)
    target = write_register(idx, _bit_reverse(values, span.size), span, num_qubits)
    out = np.zeros_like(psi)
    np.add.at(out, target, psi)
    return out


def apply_phase_gradient(psi: np.ndarray, span: Span, num_qubits: int,
                         control_mask: int = 0, anti_mask: int = 0) -> np.ndarray:
    """|k> -> e^(2πik/2^m)|k> for span value k (m = span size)."""
    idx = _indices(len(psi))
    k = read_register(idx, span, num_qubits)
    factor = phase(2 * np.pi * k / (1 << span.size))
    return psi * np.where(in_mask(idx, control_mask, anti_mask), factor, 1.0)


def dft_matrix(width: int, inverse: bool = False) -> np.ndarray:
    """QFT[j][k] = e^(±2πijk/2^w) / √2^w."""
    size = 1 << width
    j = np.arange(size)
    sign = -1.0 if inverse else 1.0
    return np.exp(sign * 2j * np.pi * np.outer(j, j) / size) / np.sqrt(size)


def apply_qft(psi: np.ndarray, span: Span, num_qubits: int, inverse: bool = False,
              control_mask: int = 0, anti_mask: int = 0) -> np.ndarray:
    """Apply the DFT (or its inverse) to the span value, block-wise.

    Unlike the arithmetic registers, the QFT reads its span MSB-first: the
    span's start row is the most significant bit of the transformed value.

    Indices are grouped by their bits outside the span; within a group they
    are ordered by span value, giving a (groups × 2^m) block that is
    multiplied by the DFT matrix in one go.
    """
    size = 1 << span.size
    idx = _indices(len(psi))
    values = _bit_reverse(read_register(idx, span, num_qubits), span.size)
    rest = write_register(idx, 0, span, num_qubits)
    groups = np.lexsort((values, rest)).reshape(-1, size)  # groups[g, v]
    active = in_mask(groups[:, 0], control_mask, anti_mask)
    F = dft_matrix(span.size, inverse)
    out = psi.copy()
    sel = groups[active]
    out[sel] = psi[sel] @ F.T
    return out


# ── register-driven gates ────────────────────────────────────────────

_COMPARE = {
    GateType.A_LT_B: np.less,
    GateType.A_LEQ_B: np.less_equal,
    GateType.A_GT_B: np.greater,
    GateType.A_GEQ_B: np.greater_equal,
    GateType.A_EQ_B: np.equal,
    GateType.A_NEQ_B: np.not_equal,
}


def apply_comparison(psi: np.ndarray, gate: GateType, target_row: int,
                     span_a: Span, span_b: Span, num_qubits: int,
                     control_mask: int = 0, anti_mask: int = 0) -> np.ndarray:
    """Flip ``target_row`` wherever ``A <op> B`` holds."""
    idx = _indices(len(psi))
    a = read_register(idx, span_a, num_qubits)
    b = read_register(idx, span_b, num_qubits)
    flip = in_mask(idx, control_mask, anti_mask) & _COMPARE[gate](a, b)
    target = np.where(flip, idx ^ (1 << row_bit(target_row, num_qubits)), idx)
    out = np.zeros_like(psi)
    np.add.at(out, target, psi)
    return out


def apply_scalar(psi: np.ndarray, gate: GateType, num_qubits: int,
                 control_mask: int = 0, anti_mask: int = 0) -> np.ndarray:
    idx = _indices(len(psi))
    return psi * np.where(in_mask(idx, control_mask, anti_mask), SCALAR_VALUES[gate], 1.0)


def apply_input_rotation(psi: np.ndarray, gate: GateType, target_row: int,
                         input_span: Span, num_qubits: int,
                         control_mask: int = 0, anti_mask: int = 0) -> np.ndarray:
    """Z^A / X^A / Y^A (and B): rotate ``target_row`` by value/2^m full turns.

    The register value is read per basis index, so superposed inputs give a
    superposition of rotations.
    """
    if gate not in INPUT_ROTATIONS:
        raise ValueError(f"{gate} is not an input-parameterised rotation")
    turns = 2 * np.pi / (1 << input_span.size)

    if gate in (GateType.ZA, GateType.ZB):
        bit = 1 << row_bit(target_row, num_qubits)
        idx = _indices(len(psi))
        v = read_register(idx, input_span, num_qubits)
        hit = in_mask(idx, control_mask, anti_mask) & ((idx & bit) != 0)
        return psi * np.where(hit, phase(turns * v), 1.0)

    i0, i1 = _pairs(psi, target_row, num_qubits, control_mask, anti_mask)
    half = turns * read_register(i0, input_span, num_qubits) / 2
    c, s = np.cos(half), np.sin(half)
    a, b = psi[i0], psi[i1]
    out = psi.copy()
    if gate in (GateType.XA, GateType.XB):
        out[i0] = c * a - 1j * s * b
        out[i1] = -1j * s * a + c * b
    else:
        out[i0] = c * a - s * b
        out[i1] = s * a + c * b
    return out
