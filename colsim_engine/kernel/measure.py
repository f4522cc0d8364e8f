"""Single-qubit measurement and Bloch-vector extraction."""
from __future__ import annotations

import logging
import random
from typing import Callable, NamedTuple, Optional

import numpy as np

from colsim_engine.kernel.complex_ops import EPSILON, abs_sq, conj, mul
from colsim_engine.kernel.state import row_bit

log = logging.getLogger(__name__)

RandomSource = Callable[[], float]


class MeasureResult(NamedTuple):
    result: int
    probability: float
    collapsed: np.ndarray


def _bit_set(num_amps: int, qubit: int, num_qubits: int) -> np.ndarray:
    idx = np.arange(num_amps, dtype=np.int64)
    return ((idx >> row_bit(qubit, num_qubits)) & 1).astype(bool)


def probability_of_zero(state: np.ndarray, qubit: int, num_qubits: int) -> float:
    ones = _bit_set(len(state), qubit, num_qubits)
    return float(np.sum(abs_sq(state[~ones])))


def measure(state: np.ndarray, qubit: int, num_qubits: int,
            random_source: Optional[RandomSource] = None) -> MeasureResult:
    """Sample qubit ``qubit`` and collapse.

    ``random_source`` returns a float in [0, 1); outcome 0 is chosen when the
    draw is <= P(0) (and P(0) > 0, so a draw of exactly 0.0 cannot pick an
    empty branch).  Amplitudes agreeing with the outcome are divided by
    √P(outcome), the rest become exactly 0.
    """
    draw = random_source if random_source is not None else random.random
    ones = _bit_set(len(state), qubit, num_qubits)
    p0 = float(np.sum(abs_sq(state[~ones])))
    r = draw()
    result = 0 if r <= p0 and p0 > 0.0 else 1
    p = p0 if result == 0 else 1.0 - p0
    if p <= 0.0:
        raise ValueError(
            f"measurement of qubit {qubit} selected outcome {result} with zero probability (draw={r})"
        )
    keep = ones if result == 1 else ~ones
    collapsed = np.where(keep, state / np.sqrt(p), 0.0).astype(state.dtype)
    log.debug("measure q%d: r=%.6f p0=%.6f -> %d", qubit, r, p0, result)
    return MeasureResult(result, p, collapsed)


def _clamp_snap(v: float, threshold: float) -> float:
    if abs(v) < threshold:
        return 0.0
    return max(-1.0, min(1.0, v))


def bloch_vector(state: np.ndarray, qubit: int, num_qubits: int,
                 snap_threshold: float = EPSILON) -> tuple[float, float, float]:
    """(⟨X⟩, ⟨Y⟩, ⟨Z⟩) of one qubit's reduced state."""
    state = np.asarray(state, dtype=np.complex128)
    bit = 1 << row_bit(qubit, num_qubits)
    idx = np.arange(len(state), dtype=np.int64)
    i0 = idx[(idx & bit) == 0]
    a0, a1 = state[i0], state[i0 | bit]
    z = float(np.sum(abs_sq(a0)) - np.sum(abs_sq(a1)))
    coherence = np.sum(mul(conj(a0), a1))  # ρ01* summed over the other qubits
    x = float(2 * coherence.real)
    y = float(2 * coherence.imag)
    return (_clamp_snap(x, snap_threshold),
            _clamp_snap(y, snap_threshold),
            _clamp_snap(z, snap_threshold))


def bloch_vectors(state: np.ndarray, num_qubits: int,
                  snap_threshold: float = EPSILON) -> list[tuple[float, float, float]]:
    return [bloch_vector(state, q, num_qubits, snap_threshold) for q in range(num_qubits)]
