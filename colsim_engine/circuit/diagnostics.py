"""Structured warnings and validation errors."""
from __future__ import annotations

from dataclasses import asdict, dataclass

from colsim_engine.kernel.gates import GateType

MISSING_INPUT = "missing_input"
PRECONDITION_FAILED = "precondition_failed"
OVERLAP = "overlap"


@dataclass(frozen=True)
class Diagnostic:
    column: int
    row: int
    gate_type: GateType
    message: str
    category: str

    def to_dict(self) -> dict:
        d = asdict(self)
        d["gate_type"] = self.gate_type.value
        return d
