"""Fixed-width integer buffer.

``OctetInt`` is the generic half shared by ``SignedBigInt`` and
``UnsignedBigInt``.  A subclass fixes ``SIGNED`` and the primitive
constructors; everything else is written once here against the octet
engine.

Storage model
-------------
``data`` is a ``bytearray`` allocated once, at construction.  The low
``sz`` octets are the active width every operation reads and writes.
Non-allocating operations compute on scratch copies and store the result
back into ``data`` with a same-length slice assignment, so the buffer
object (and its size) never changes.  They return ``self``: callers must
not assume the result and the first operand are distinct.
"""
from __future__ import annotations

import logging
from typing import ClassVar, TypeVar

from pydantic import validate_call
from typing_extensions import Self

from bigint import octets
from bigint.limits import OCTET_BITS, ShiftCount
from bigint.results import Cmp, DivResult, Overflowing

log = logging.getLogger(__name__)

IntT = TypeVar("IntT", bound="OctetInt")


class OctetInt:
    SIGNED: ClassVar[bool]

    __slots__ = ("data", "sz")

    def __init__(self, data: bytearray, sz: int | None = None) -> None:
        self.data = data
        self.sz = len(data) if sz is None else sz

    # -- storage helpers ----------------------------------------------------

    def _octets(self) -> bytes:
        """Scratch copy of the active width."""
        return bytes(self.data[:self.sz])

    def _store(self: IntT, result: octets.Octets) -> IntT:
        """Write ``result`` (already ``sz`` octets) into our own buffer."""
        self.data[:self.sz] = result
        return self

    def _operand(self, other: OctetInt) -> bytes:
        if type(other) is not type(self):
            raise TypeError(
                f"cannot combine {type(self).__name__} with "
                f"{type(other).__name__}"
            )
        return other._octets()

    def _blank(self: IntT, width: int) -> IntT:
        return type(self)(bytearray(width))

    # -- inspection ---------------------------------------------------------

    @property
    def width(self) -> int:
        """Active width in octets."""
        return self.sz

    @property
    def bits(self) -> int:
        return OCTET_BITS * self.sz

    @property
    def empty(self) -> bool:
        return self.sz == 0

    def __int__(self) -> int:
        return octets.to_int(self._octets(), self.SIGNED)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(width={self.sz}, "
            f"data={self._octets().hex() or '-'})"
        )

    def _to_primitive(self, bits: int) -> Overflowing[int]:
        scratch = self._octets()
        width = bits // OCTET_BITS
        wide = octets.resize(
            scratch, max(len(scratch), width) + 1, self.SIGNED
        )
        return Overflowing(
            octets.to_int(wide[:width], self.SIGNED),
            not octets.fits(wide, width, self.SIGNED),
        )

    def to64(self) -> Overflowing[int]:
        return self._to_primitive(64)

    def to32(self) -> Overflowing[int]:
        return self._to_primitive(32)

    def to16(self) -> Overflowing[int]:
        return self._to_primitive(16)

    def to8(self) -> Overflowing[int]:
        return self._to_primitive(8)

    # -- lifecycle ----------------------------------------------------------

    def dup(self: IntT) -> IntT:
        """Deep copy holding only the significant octets."""
        scratch = self._octets()
        if not scratch:
            return self._blank(0)
        keep = octets.significant(scratch, self.SIGNED)
        return type(self)(bytearray(scratch[:keep]))

    def fini(self) -> None:
        """Release the buffer.  The value is empty afterwards."""
        if self.data:
            self.data = bytearray()
        self.sz = 0

    def zero(self: IntT) -> IntT:
        """Clear every allocated octet in place."""
        self.data[:] = bytes(len(self.data))
        return self

    # -- comparison ---------------------------------------------------------

    def _compare(self, other: OctetInt) -> int | None:
        a, b = self._octets(), self._operand(other)
        if not a or not b:
            return None
        if self.SIGNED:
            a_neg, b_neg = octets.is_negative(a), octets.is_negative(b)
            if a_neg != b_neg:
                return -1 if a_neg else 1
        # Scratch copies only: extend the shorter one and clear sign bits.
        n = max(len(a), len(b))
        a = octets.resize(a, n, self.SIGNED)
        b = octets.resize(b, n, self.SIGNED)
        if self.SIGNED:
            a[-1] &= 0x7F
            b[-1] &= 0x7F
        return octets.compare(a, b)

    def cmp_eq(self, other: OctetInt) -> Cmp:
        a, b = self._octets(), self._operand(other)
        if not a or not b:
            return Cmp.UNDEFINED
        return Cmp.of(a == b)

    def cmp_gt(self, other: OctetInt) -> Cmp:
        order = self._compare(other)
        if order is None:
            return Cmp.UNDEFINED
        return Cmp.of(order > 0)

    def cmp_ge(self, other: OctetInt) -> Cmp:
        order = self._compare(other)
        if order is None:
            return Cmp.UNDEFINED
        return Cmp.of(order >= 0)

    # -- arithmetic ---------------------------------------------------------

    def _settle(
        self: IntT, wide: octets.Octets, op: str
    ) -> Overflowing[IntT]:
        """Store the low octets of an exact result, flagging truncation."""
        overflow = not octets.fits(wide, self.sz, self.SIGNED)
        if overflow:
            log.debug("%s overflowed %d-octet %s", op, self.sz,
                      type(self).__name__)
        self._store(wide[:self.sz])
        return Overflowing(self, overflow)

    def _exact_sum(self, other: OctetInt, subtract: bool) -> bytearray:
        a, b = self._octets(), self._operand(other)
        # One spare octet holds the carry (or the sign of a negative
        # unsigned difference).
        wide = max(len(a), len(b)) + 1
        a = octets.resize(a, wide, self.SIGNED)
        b = octets.resize(b, wide, self.SIGNED)
        return octets.sub(a, b) if subtract else octets.add(a, b)

    def add(self: IntT, other: IntT) -> Overflowing[IntT]:
        return self._settle(self._exact_sum(other, subtract=False), "add")

    def sub(self: IntT, other: IntT) -> Overflowing[IntT]:
        return self._settle(self._exact_sum(other, subtract=True), "sub")

    def _exact_product(self, a: bytes, b: bytes) -> bytearray:
        negative = self.SIGNED and (
            octets.is_negative(a) != octets.is_negative(b)
        )
        product = octets.mul(
            octets.magnitude(a, self.SIGNED), octets.magnitude(b, self.SIGNED)
        )
        product.append(0)
        return octets.negate(product) if negative else product

    def mul(self: IntT, other: IntT) -> Overflowing[IntT]:
        b = self._operand(other)
        return self._settle(self._exact_product(self._octets(), b), "mul")

    def div(self: IntT, other: IntT) -> DivResult[IntT]:
        """Truncating division; the remainder takes the dividend's sign."""
        a, b = self._octets(), self._operand(other)
        rem = self._blank(self.sz)
        if octets.is_zero(b):
            log.debug("division by zero in %s", type(self).__name__)
            return DivResult(self, rem, err=True)

        a_neg = self.SIGNED and octets.is_negative(a)
        b_neg = self.SIGNED and octets.is_negative(b)
        quot, r = octets.divmod_(
            octets.magnitude(a, self.SIGNED), octets.magnitude(b, self.SIGNED)
        )
        quot.append(0)
        r.append(0)
        if a_neg != b_neg:
            quot = octets.negate(quot)
        if a_neg:
            r = octets.negate(r)

        if not octets.fits(quot, self.sz, self.SIGNED):
            log.debug("quotient wrapped in %d-octet %s", self.sz,
                      type(self).__name__)
        rem._store(octets.resize(r, self.sz, self.SIGNED))
        return DivResult(self._store(quot[:self.sz]), rem)

    def pow(self: IntT, other: IntT) -> Overflowing[IntT]:
        """Raise to a non-negative power by binary exponentiation."""
        exponent = self._operand(other)
        if self.SIGNED and octets.is_negative(exponent):
            raise ValueError("negative exponents not supported")

        top = 8 * len(exponent) - octets.leading_zeros(exponent)
        if top == 0:
            one = octets.resize(b"\x01\x00", max(self.sz, 1) + 1, self.SIGNED)
            return self._settle(one, "pow")

        base = self._octets()
        base_overflow = False
        result = None
        overflow = False
        for bit in range(top):
            if exponent[bit >> 3] >> (bit & 7) & 1:
                if result is None:
                    result, overflow = base, base_overflow
                else:
                    wide = self._exact_product(result, base)
                    overflow |= base_overflow or not octets.fits(
                        wide, self.sz, self.SIGNED)
                    result = bytes(wide[:self.sz])
            if bit + 1 < top:
                wide = self._exact_product(base, base)
                base_overflow |= not octets.fits(wide, self.sz, self.SIGNED)
                base = bytes(wide[:self.sz])

        if overflow:
            log.debug("pow overflowed %d-octet %s", self.sz,
                      type(self).__name__)
        return Overflowing(self._store(result), overflow)

    # -- roots --------------------------------------------------------------

    def _root(self: IntT, extract, keep_rem: bool, op: str) -> DivResult[IntT]:
        scratch = self._octets()
        rem = self._blank(self.sz)
        if self.SIGNED and octets.is_negative(scratch):
            log.debug("%s of negative %s", op, type(self).__name__)
            return DivResult(self, rem, err=True)
        root, r = extract(scratch)
        if keep_rem:
            rem._store(r)
        return DivResult(self._store(root), rem)

    def sqrt(self: IntT) -> DivResult[IntT]:
        """Floor square root; remainder is the radicand minus root squared."""
        return self._root(octets.isqrt, True, "sqrt")

    def cbrt(self: IntT) -> DivResult[IntT]:
        """Floor cube root.  The remainder is unused and always zero."""
        return self._root(octets.icbrt, False, "cbrt")

    # -- bitwise ------------------------------------------------------------

    def _fitted(self, other: OctetInt) -> bytearray:
        return octets.resize(self._operand(other), self.sz, self.SIGNED)

    def orr(self: IntT, other: IntT) -> IntT:
        return self._store(octets.orr(self._octets(), self._fitted(other)))

    def and_(self: IntT, other: IntT) -> IntT:
        return self._store(octets.and_(self._octets(), self._fitted(other)))

    def xor(self: IntT, other: IntT) -> IntT:
        return self._store(octets.xor(self._octets(), self._fitted(other)))

    def not_(self: IntT) -> IntT:
        return self._store(octets.not_(self._octets()))

    # -- shifts and rotations ----------------------------------------------

    @validate_call
    def lsl(self, count: ShiftCount) -> Self:
        return self._store(octets.shift_left(self._octets(), count))

    @validate_call
    def lsr(self, count: ShiftCount) -> Self:
        return self._store(octets.shift_right(self._octets(), count))

    @validate_call
    def rol(self, count: ShiftCount) -> Self:
        return self._store(octets.rotate_left(self._octets(), count))

    @validate_call
    def ror(self, count: ShiftCount) -> Self:
        return self._store(octets.rotate_right(self._octets(), count))

    # -- counts -------------------------------------------------------------

    def clz(self) -> int:
        return octets.leading_zeros(self._octets())

    def ctz(self) -> int:
        return octets.trailing_zeros(self._octets())

    def popcount(self) -> int:
        return octets.popcount(self._octets())
