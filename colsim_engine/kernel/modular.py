"""Integer helpers for the arithmetic permutation gates."""
from __future__ import annotations

from typing import Optional


def gcd(a: int, b: int) -> int:
    """Euclid on absolute values; gcd(0, 0) == 0."""
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def proper_mod(a: int, m: int) -> int:
    """Modulo that is never negative, whatever the sign of ``a``."""
    return ((a % m) + m) % m


def modular_inverse(a: int, m: int) -> Optional[int]:
    """x with (a * x) mod m == 1, or None when gcd(a, m) != 1."""
    a = proper_mod(a, m)
    if gcd(a, m) != 1:
        return None
    old_r, r = a, m
    old_s, s = 1, 0
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
    return proper_mod(old_s, m)


def is_odd(n: int) -> bool:
    return (n & 1) == 1


def are_coprime(a: int, b: int) -> bool:
    return gcd(a, b) == 1
