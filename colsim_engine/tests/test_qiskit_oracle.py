"""Compare grid simulation against Qiskit Statevector.

Qiskit is little-endian, so grid row r is Qiskit qubit n-1-r; with that
mapping the amplitude indices line up directly.
"""
import numpy as np
import pytest

try:
    from qiskit import QuantumCircuit
    from qiskit.circuit.library import QFTGate
    from qiskit.quantum_info import Statevector
    HAS_QISKIT = True
except ImportError:
    HAS_QISKIT = False

from colsim_engine.circuit.grid import create_grid, span_cells
from colsim_engine.runner.driver import run, simulate
from colsim_engine.tests.fixtures.circuits import G, g


def _q(n, row):
    return n - 1 - row


def _compare(ours, qc, atol=1e-8):
    ref = np.array(Statevector(qc).data)
    overlap = np.abs(np.vdot(ref, ours))
    assert overlap > 1.0 - atol, f"overlap={overlap}"


@pytest.mark.skipif(not HAS_QISKIT, reason="qiskit not installed")
class TestQiskitOracle:
    def test_bell(self):
        grid = create_grid(2, [g(0, 0, G.H), g(0, 1, G.CONTROL), g(1, 1, G.CX)])
        qc = QuantumCircuit(2)
        qc.h(_q(2, 0)); qc.cx(_q(2, 0), _q(2, 1))
        _compare(simulate(grid)[-1], qc)

    @pytest.mark.parametrize("n", [3, 4, 5])
    def test_random_1q_and_controlled(self, n):
        rng = np.random.default_rng(100 + n)
        names = [G.H, G.X, G.Y, G.Z, G.S, G.T, G.SDG]
        qiskit_name = {G.H: "h", G.X: "x", G.Y: "y", G.Z: "z", G.S: "s", G.T: "t", G.SDG: "sdg"}
        placements = []
        qc = QuantumCircuit(n)
        for col in range(4 * n):
            if col % 3 == 2:
                c, t = (int(v) for v in rng.choice(n, size=2, replace=False))
                theta = float(rng.uniform(-np.pi, np.pi))
                placements += [g(c, col, G.CONTROL), g(t, col, G.RZ, angle=theta)]
                qc.crz(theta, _q(n, c), _q(n, t))
            else:
                row = int(rng.integers(n))
                gate = names[int(rng.integers(len(names)))]
                placements.append(g(row, col, gate))
                getattr(qc, qiskit_name[gate])(_q(n, row))
        grid = create_grid(n, placements, num_cols=4 * n)
        _compare(simulate(grid)[-1], qc)

    def test_anti_control_and_swap(self):
        grid = create_grid(3, [
            g(0, 0, G.H), g(2, 0, G.X),
            g(0, 1, G.ANTI_CONTROL), g(1, 1, G.X),
            g(1, 2, G.SWAP), g(2, 2, G.SWAP),
        ])
        qc = QuantumCircuit(3)
        qc.h(_q(3, 0)); qc.x(_q(3, 2))
        qc.x(_q(3, 0)); qc.cx(_q(3, 0), _q(3, 1)); qc.x(_q(3, 0))
        qc.swap(_q(3, 1), _q(3, 2))
        _compare(simulate(grid)[-1], qc)

    @pytest.mark.parametrize("n", [2, 3, 4])
    def test_qft_span(self, n):
        placements = [g(0, 0, G.H), g(n - 1, 0, G.X)] + span_cells(G.QFT, 0, n - 1, 1)
        ours = run(create_grid(n, placements), seed=0).final_state
        qc = QuantumCircuit(n)
        qc.h(_q(n, 0)); qc.x(_q(n, n - 1))
        # span start row is the QFT register MSB; QFTGate takes its LSB first
        qc.append(QFTGate(n), [_q(n, r) for r in reversed(range(n))])
        _compare(ours, qc)
