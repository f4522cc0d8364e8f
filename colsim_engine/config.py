"""
Configuration for the column simulator.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from colsim_engine.kernel.complex_ops import EPSILON


@dataclass(frozen=True)
class SimulatorConfig:
    """Configuration for circuit runs."""

    # Numerical tolerances
    epsilon: float = EPSILON  # amplitudes below this never raise a precondition diagnostic
    bloch_snap_threshold: float = 1e-10  # Bloch components below this read as 0

    # Grids larger than this are rejected (state is 2^n complex128)
    max_qubits: int = 20

    # Time parameter for Z^t / X^t / Y^t and e^{iπtP} gates when none is given
    default_time_parameter: float = 0.0

    # Keep the per-column state history in RunResult
    record_history: bool = True

    def resolve_time(self, time_parameter: Optional[float]) -> float:
        return self.default_time_parameter if time_parameter is None else time_parameter

    def with_overrides(self, **kwargs) -> "SimulatorConfig":
        return replace(self, **kwargs)


# Default configuration instance
DEFAULT_CONFIG = SimulatorConfig()
