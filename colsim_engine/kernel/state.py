"""Dense state-vector storage.

Endianness convention: MSB-FIRST.
  row 0 = bit (n-1) (MSB) of the state-vector index.
  |q_0 q_1 ... q_{n-1}>  has index  q_{n-1} + 2*q_{n-2} + ... + 2^{n-1}*q_0.

A state is a plain 1-D complex128 ndarray of length 2^n.  Kernels never
mutate their input; every step hands back a fresh array.
"""
from __future__ import annotations

import numpy as np

from colsim_engine.kernel.complex_ops import abs_sq

ENDIANNESS = "msb-first"
DTYPE = np.complex128


def row_bit(row: int, num_qubits: int) -> int:
    """Bit position of grid row ``row`` inside a basis index."""
    return num_qubits - 1 - row


def num_qubits_of(state: np.ndarray) -> int:
    n = int(len(state)).bit_length() - 1
    if 1 << n != len(state):
        raise ValueError(f"state length {len(state)} is not a power of two")
    return n


def initial_state(num_qubits: int) -> np.ndarray:
    """|0...0>."""
    psi = np.zeros(1 << num_qubits, dtype=DTYPE)
    psi[0] = 1.0
    return psi


def basis_state(num_qubits: int, index: int) -> np.ndarray:
    if index < 0 or index >= 1 << num_qubits:
        raise ValueError(f"basis index {index} out of range [0, {1 << num_qubits})")
    psi = np.zeros(1 << num_qubits, dtype=DTYPE)
    psi[index] = 1.0
    return psi


def norm(state: np.ndarray) -> float:
    """Σ|a|² (the squared norm, which is what normalisation checks compare to 1)."""
    return float(np.sum(abs_sq(state)))


def probabilities(state: np.ndarray) -> np.ndarray:
    return abs_sq(np.asarray(state, dtype=DTYPE))


def as_pairs(state: np.ndarray) -> list[tuple[float, float]]:
    """(re, im) per amplitude, for consumers that do not speak numpy."""
    return [(float(a.real), float(a.imag)) for a in state]


def from_pairs(pairs) -> np.ndarray:
    return np.array([complex(re, im) for re, im in pairs], dtype=DTYPE)
