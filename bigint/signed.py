"""Two's-complement integers of caller-chosen width.

The high bit of the last octet is the sign.  Capacity and width are the
same thing: the buffer is exactly ``sz`` octets long.
"""
from __future__ import annotations

from pydantic import validate_call
from typing_extensions import Self

from bigint import octets
from bigint.base import OctetInt
from bigint.limits import S8, S16, S32, S64, ShiftCount, Width


class SignedBigInt(OctetInt):
    SIGNED = True

    __slots__ = ()

    # -- construction -------------------------------------------------------

    @classmethod
    @validate_call
    def init(cls, width: Width) -> Self:
        """Zero value ``width`` octets wide (``0`` gives the empty value)."""
        return cls(bytearray(width))

    @classmethod
    def _make(cls, n: int, width: int) -> Self:
        return cls(bytearray(n.to_bytes(width, "little", signed=True)))

    @classmethod
    @validate_call
    def make64(cls, n: S64) -> Self:
        return cls._make(n, 8)

    @classmethod
    @validate_call
    def make32(cls, n: S32) -> Self:
        return cls._make(n, 4)

    @classmethod
    @validate_call
    def make16(cls, n: S16) -> Self:
        return cls._make(n, 2)

    @classmethod
    @validate_call
    def make8(cls, n: S8) -> Self:
        return cls._make(n, 1)

    # -- sign ---------------------------------------------------------------

    @property
    def negative(self) -> bool:
        return octets.is_negative(self.data)

    @validate_call
    def asr(self, count: ShiftCount) -> Self:
        """Shift right, replicating the sign bit into the vacated bits."""
        scratch = self._octets()
        fill = octets.fill_for(scratch, signed=True)
        return self._store(octets.shift_right(scratch, count, fill))
