"""Arithmetic permutation gates (+1, -A, ×A mod R, ...).

Each gate rewrites the effect register of every in-mask basis state with a
value computed from the register itself and, where needed, the A/B/R input
registers read from the SAME basis state.  The map is a permutation of basis
indices, so amplitudes are moved, never mixed.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from colsim_engine.kernel.complex_ops import EPSILON, is_near_zero
from colsim_engine.kernel.gates import GateType, ARITHMETIC
from colsim_engine.kernel.modular import are_coprime, is_odd, modular_inverse, proper_mod
from colsim_engine.kernel.registers import Span, read_register, write_register

G = GateType


def arithmetic_result(gate: GateType, effect: int, a: Optional[int], b: Optional[int],
                      r: Optional[int], mod2n: int) -> Optional[int]:
    """New effect-register value, or None when the gate does not apply.

    None covers both a missing input and a failed precondition (even
    multiplier, effect >= R, gcd(A, R) != 1, ...); the caller leaves the
    basis state where it is.
    """
    if gate == G.INC:
        return proper_mod(effect + 1, mod2n)
    if gate == G.DEC:
        return proper_mod(effect - 1, mod2n)
    if gate == G.ADD_A and a is not None:
        return proper_mod(effect + a, mod2n)
    if gate == G.SUB_A and a is not None:
        return proper_mod(effect - a, mod2n)

    if gate in (G.MUL_A, G.DIV_A, G.MUL_B, G.DIV_B):
        m = a if gate in (G.MUL_A, G.DIV_A) else b
        if m is None or not is_odd(m):
            return None
        if gate in (G.MUL_A, G.MUL_B):
            return proper_mod(effect * m, mod2n)
        inv = modular_inverse(m, mod2n)
        return None if inv is None else proper_mod(effect * inv, mod2n)

    if r is None or r <= 0 or effect >= r:
        return None
    if gate == G.INC_MOD_R:
        return proper_mod(effect + 1, r)
    if gate == G.DEC_MOD_R:
        return proper_mod(effect - 1, r)
    if a is None:
        return None
    if gate in (G.ADD_A_MOD_R, G.SUB_A_MOD_R):
        if a >= r:
            return None
        return proper_mod(effect + a if gate == G.ADD_A_MOD_R else effect - a, r)
    if gate in (G.MUL_A_MOD_R, G.DIV_A_MOD_R):
        if not are_coprime(a, r):
            return None
        if gate == G.MUL_A_MOD_R:
            return proper_mod(effect * a, r)
        inv = modular_inverse(a, r)
        return None if inv is None else proper_mod(effect * inv, r)
    return None


def apply_arithmetic(psi: np.ndarray, gate: GateType, effect_span: Span,
                     span_a: Optional[Span], span_b: Optional[Span], span_r: Optional[Span],
                     num_qubits: int, control_mask: int = 0, anti_mask: int = 0,
                     epsilon: float = EPSILON) -> tuple[np.ndarray, bool]:
    """Permute basis states per ``gate``.

    Returns ``(new_state, declined)`` where ``declined`` is True when at least
    one populated in-mask basis state was left unchanged because the gate did
    not apply to it.  Amplitudes within ``epsilon`` of zero do not count as
    populated.
    """
    if gate not in ARITHMETIC:
        raise ValueError(f"{gate} is not an arithmetic gate")
    mod2n = 1 << effect_span.size
    out = np.zeros_like(psi)
    declined = False

    # zero amplitudes cannot contribute
    for i in np.flatnonzero(psi):
        i = int(i)
        amp = psi[i]
        if (i & control_mask) != control_mask or (i & anti_mask) != 0:
            out[i] += amp
            continue
        effect = read_register(i, effect_span, num_qubits)
        a = read_register(i, span_a, num_qubits) if span_a is not None else None
        b = read_register(i, span_b, num_qubits) if span_b is not None else None
        r = read_register(i, span_r, num_qubits) if span_r is not None else None
        new = arithmetic_result(gate, effect, a, b, r, mod2n)
        if new is None:
            declined = declined or not is_near_zero(amp, epsilon)
            new = effect
        out[write_register(i, new, effect_span, num_qubits)] += amp
    return out, declined
