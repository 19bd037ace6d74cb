"""Magnitude-only integers with a separate capacity.

``cap`` octets are allocated; the low ``sz`` of them form the active
width.  Octets from ``sz`` up to ``cap`` are a reserve that stays zero:
no operation grows into it, so overflow is always modulo ``2**(8*sz)``.
"""
from __future__ import annotations

from pydantic import validate_call
from typing_extensions import Self

from bigint.base import OctetInt
from bigint.limits import U8, U16, U32, U64, Width


class UnsignedBigInt(OctetInt):
    SIGNED = False

    __slots__ = ()

    @property
    def cap(self) -> int:
        """Allocated octets, including the reserve above ``sz``."""
        return len(self.data)

    def __repr__(self) -> str:
        base = super().__repr__()
        if self.cap == self.sz:
            return base
        return f"{base[:-1]}, cap={self.cap})"

    # -- construction -------------------------------------------------------

    @classmethod
    @validate_call
    def init(cls, width: Width, cap: Width | None = None) -> Self:
        """Zero value ``width`` octets wide, reserving ``cap`` octets."""
        if cap is None:
            cap = width
        if cap < width:
            raise ValueError(f"cap ({cap}) must be >= width ({width})")
        return cls(bytearray(cap), width)

    @classmethod
    def _make(cls, n: int, width: int) -> Self:
        return cls(bytearray(n.to_bytes(width, "little")))

    @classmethod
    @validate_call
    def make64(cls, n: U64) -> Self:
        return cls._make(n, 8)

    @classmethod
    @validate_call
    def make32(cls, n: U32) -> Self:
        return cls._make(n, 4)

    @classmethod
    @validate_call
    def make16(cls, n: U16) -> Self:
        return cls._make(n, 2)

    @classmethod
    @validate_call
    def make8(cls, n: U8) -> Self:
        return cls._make(n, 1)
