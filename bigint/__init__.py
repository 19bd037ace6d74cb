"""Fixed-width big integers stored in octet buffers.

Two instantiations of one engine:

SignedBigInt     two's complement, width == capacity
UnsignedBigInt   plain magnitude, active width within a capacity

Arithmetic, bitwise and shift operations work in place inside the first
operand's buffer and report overflow instead of growing it.
"""
from __future__ import annotations

from bigint.results import Cmp, DivResult, Overflowing
from bigint.signed import SignedBigInt
from bigint.unsigned import UnsignedBigInt

__all__ = [
    "Cmp",
    "DivResult",
    "Overflowing",
    "SignedBigInt",
    "UnsignedBigInt",
]
