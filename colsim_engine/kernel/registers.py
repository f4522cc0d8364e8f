"""Register codec: basis index <-> little-endian register value.

A register is an inclusive row span.  Its FIRST row is the least-significant
bit of the register value, which is the reverse of the global MSB-first index
convention.  Every conversion between the two goes through the two functions
below; nothing else derives span bit positions.

Both functions only use integer operators, so ``basis`` may be a Python int or
a numpy integer array of indices (the vectorised kernels rely on this).
"""
from __future__ import annotations

from typing import NamedTuple


class Span(NamedTuple):
    start_row: int
    end_row: int

    @property
    def size(self) -> int:
        return self.end_row - self.start_row + 1

    def rows(self) -> range:
        return range(self.start_row, self.end_row + 1)

    def overlaps(self, other: "Span") -> bool:
        return self.start_row <= other.end_row and other.start_row <= self.end_row


def read_register(basis, span: Span, num_qubits: int):
    """Integer held by ``span`` inside ``basis``."""
    value = basis & 0
    for i, row in enumerate(span.rows()):
        bit = num_qubits - 1 - row
        value = value | (((basis >> bit) & 1) << i)
    return value


def write_register(basis, value, span: Span, num_qubits: int):
    """``basis`` with the bits of ``span`` replaced by ``value``."""
    out = basis
    for row in span.rows():
        out = out & ~(1 << (num_qubits - 1 - row))
    for i, row in enumerate(span.rows()):
        out = out | (((value >> i) & 1) << (num_qubits - 1 - row))
    return out


def span_mask(span: Span, num_qubits: int) -> int:
    """Index bits covered by ``span``."""
    return write_register(0, (1 << span.size) - 1, span, num_qubits)
