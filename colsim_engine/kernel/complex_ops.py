"""Complex primitives shared by the kernels.

Amplitudes are numpy complex128 values; the helpers below accept Python
``complex`` scalars as well as arrays so the same expressions serve the scalar
paths (measurement, Bloch, arithmetic) and the vectorised gate kernels.
"""
from __future__ import annotations

import numpy as np

EPSILON = 1e-10


def add(a, b):
    return a + b


def mul(a, b):
    return a * b


def conj(a):
    return np.conj(a)


def abs_sq(a):
    """|a|² without the square root."""
    return a.real * a.real + a.imag * a.imag


def phase(theta):
    """e^(iθ); vectorised over ``theta``."""
    return np.cos(theta) + 1j * np.sin(theta)


def is_near_zero(a, epsilon: float = EPSILON):
    return (abs(a.real) < epsilon) & (abs(a.imag) < epsilon)
