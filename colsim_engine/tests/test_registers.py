"""Register codec, modular helpers and state helpers."""
import numpy as np
import pytest

from colsim_engine.kernel.modular import (
    are_coprime, gcd, is_odd, modular_inverse, proper_mod,
)
from colsim_engine.kernel.registers import Span, read_register, span_mask, write_register
from colsim_engine.kernel.state import (
    as_pairs, basis_state, from_pairs, initial_state, norm, num_qubits_of,
)


def _spans(n):
    for start in range(n):
        for end in range(start, n):
            yield Span(start, end)


@pytest.mark.parametrize("n", [1, 2, 3, 4])
def test_write_read_leaves_index_unchanged(n):
    for span in _spans(n):
        for x in range(1 << n):
            assert write_register(x, read_register(x, span, n), span, n) == x


@pytest.mark.parametrize("n", [2, 4])
def test_read_after_write_from_zero(n):
    for span in _spans(n):
        for v in range(1 << span.size):
            assert read_register(write_register(0, v, span, n), span, n) == v


def test_write_only_touches_span_bits():
    n = 5
    span = Span(1, 3)
    mask = span_mask(span, n)
    for x in range(1 << n):
        y = write_register(x, 5, span, n)
        assert (x & ~mask) == (y & ~mask)


def test_codec_vectorised_matches_scalar():
    n = 4
    span = Span(1, 2)
    idx = np.arange(1 << n)
    vals = read_register(idx, span, n)
    assert list(vals) == [read_register(int(i), span, n) for i in idx]
    out = write_register(idx, 3, span, n)
    assert list(out) == [write_register(int(i), 3, span, n) for i in idx]


def test_span_helpers():
    s = Span(2, 4)
    assert s.size == 3
    assert list(s.rows()) == [2, 3, 4]
    assert s.overlaps(Span(4, 6))
    assert not s.overlaps(Span(5, 6))


def test_gcd():
    assert gcd(12, 18) == 6
    assert gcd(-12, 18) == 6
    assert gcd(0, 7) == 7
    assert gcd(0, 0) == 0


def test_proper_mod_non_negative():
    assert proper_mod(-1, 4) == 3
    assert proper_mod(-9, 4) == 3
    assert proper_mod(5, 4) == 1


@pytest.mark.parametrize("m", [2, 3, 4, 7, 8, 15, 16])
def test_modular_inverse(m):
    for a in range(1, m):
        inv = modular_inverse(a, m)
        if gcd(a, m) == 1:
            assert inv is not None
            assert (a * inv) % m == 1
        else:
            assert inv is None


def test_parity_and_coprime():
    assert is_odd(3) and not is_odd(4)
    assert are_coprime(3, 4)
    assert not are_coprime(2, 4)


def test_initial_and_basis_state():
    psi = initial_state(3)
    assert psi.dtype == np.complex128
    assert psi[0] == 1 and np.count_nonzero(psi) == 1
    b = basis_state(2, 3)
    assert b[3] == 1
    with pytest.raises(ValueError):
        basis_state(2, 4)


def test_norm_and_pairs():
    psi = np.array([0.6, 0.8j], dtype=np.complex128)
    assert abs(norm(psi) - 1.0) < 1e-12
    pairs = as_pairs(psi)
    assert pairs == [(0.6, 0.0), (0.0, 0.8)]
    np.testing.assert_allclose(from_pairs(pairs), psi)


def test_num_qubits_of():
    assert num_qubits_of(np.zeros(8)) == 3
    with pytest.raises(ValueError, match="power of two"):
        num_qubits_of(np.zeros(6))
