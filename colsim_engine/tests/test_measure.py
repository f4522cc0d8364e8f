"""Measurement collapse and Bloch vectors."""
import numpy as np
import pytest

from colsim_engine.kernel import apply
from colsim_engine.kernel import gates as gmod
from colsim_engine.kernel.measure import bloch_vector, bloch_vectors, measure, probability_of_zero
from colsim_engine.kernel.state import basis_state, initial_state

S2 = 1.0 / np.sqrt(2.0)
PLUS = np.array([S2, S2], dtype=complex)


def test_measure_plus_draw_low():
    m = measure(PLUS, 0, 1, lambda: 0.3)
    assert m.result == 0
    assert abs(m.probability - 0.5) < 1e-12
    assert m.collapsed[0] == 1 + 0j
    assert m.collapsed[1] == 0


def test_measure_plus_draw_high():
    m = measure(PLUS, 0, 1, lambda: 0.7)
    assert m.result == 1
    assert abs(m.probability - 0.5) < 1e-12
    assert abs(m.collapsed[1] - (1 + 0j)) < 1e-12
    assert m.collapsed[0] == 0


def test_draw_equal_to_p0_picks_zero():
    # P(0) = 0.25 exactly
    psi = np.array([0.5, np.sqrt(0.75)], dtype=complex)
    assert probability_of_zero(psi, 0, 1) == 0.25
    assert measure(psi, 0, 1, lambda: 0.25).result == 0
    # |+> has P(0) = 0.4999999999999999 in floating point
    p0 = probability_of_zero(PLUS, 0, 1)
    assert measure(PLUS, 0, 1, lambda: p0).result == 0


def test_measure_does_not_mutate():
    psi = PLUS.copy()
    measure(psi, 0, 1, lambda: 0.9)
    np.testing.assert_array_equal(psi, PLUS)


def test_measure_bell_collapses_partner():
    psi = np.array([S2, 0, 0, S2], dtype=complex)
    m = measure(psi, 0, 2, lambda: 0.99)
    assert m.result == 1
    np.testing.assert_allclose(m.collapsed, [0, 0, 0, 1], atol=1e-12)


def test_zero_draw_never_picks_empty_branch():
    # row 1 of |01> is certainly 1; r = 0.0 must not select outcome 0
    m = measure(basis_state(2, 0b01), 1, 2, lambda: 0.0)
    assert m.result == 1
    assert abs(m.probability - 1) < 1e-12
    np.testing.assert_allclose(m.collapsed, basis_state(2, 0b01))


def test_zero_probability_branch_raises():
    # draws outside [0, 1) can force the empty branch
    with pytest.raises(ValueError, match="zero probability"):
        measure(basis_state(1, 0), 0, 1, lambda: 1.5)


def test_default_random_source():
    m = measure(basis_state(1, 1), 0, 1)
    assert m.result == 1 and abs(m.probability - 1) < 1e-12


def test_probability_of_zero():
    psi = np.array([0.6, 0, 0.8, 0], dtype=complex)
    assert abs(probability_of_zero(psi, 0, 2) - 0.36) < 1e-12
    assert abs(probability_of_zero(psi, 1, 2) - 1.0) < 1e-12


@pytest.mark.parametrize("prep,expected", [
    ([], (0, 0, 1)),
    (["X"], (0, 0, -1)),
    (["H"], (1, 0, 0)),
    (["X", "H"], (-1, 0, 0)),
    (["H", "S"], (0, 1, 0)),
    (["H", "SDG"], (0, -1, 0)),
])
def test_bloch_single_qubit(prep, expected):
    psi = initial_state(1)
    for name in prep:
        psi = apply.apply_1q(psi, getattr(gmod, name)(), 0, 1)
    np.testing.assert_allclose(bloch_vector(psi, 0, 1), expected, atol=1e-12)


def test_bloch_snaps_small_values():
    x, y, z = bloch_vector(np.array([1, 1e-12], dtype=complex), 0, 1)
    assert x == 0.0 and y == 0.0 and z == 1.0


def test_bloch_clamped():
    # slightly over-normalised state
    x, y, z = bloch_vector(np.array([1.0 + 1e-9, 0], dtype=complex), 0, 1)
    assert z == 1.0


def test_bloch_entangled_is_origin():
    psi = np.array([S2, 0, 0, S2], dtype=complex)
    for vec in bloch_vectors(psi, 2):
        np.testing.assert_allclose(vec, (0, 0, 0), atol=1e-12)


def test_bloch_product_state_rows():
    # |1>|+>
    psi = np.array([0, 0, S2, S2], dtype=complex)
    v0, v1 = bloch_vectors(psi, 2)
    np.testing.assert_allclose(v0, (0, 0, -1), atol=1e-12)
    np.testing.assert_allclose(v1, (1, 0, 0), atol=1e-12)
