"""Octet engine.

Pure functions over little-endian octet strings (octet 0 is the least
significant).  Inputs may be any bytes-like object and are never
modified; every function returns a fresh ``bytearray`` used as scratch
by the integer types, which copy the final result back into their own
buffer.

Signedness is a parameter, not a property of the data: the same octets
read as two's complement when ``signed`` is true and as a plain
magnitude otherwise.
"""
from __future__ import annotations

from typing import Union

Octets = Union[bytes, bytearray, memoryview]


# ---------------------------------------------------------------------------
# Sign and width
# ---------------------------------------------------------------------------

def is_negative(octets: Octets) -> bool:
    return len(octets) > 0 and octets[-1] & 0x80 != 0


def is_zero(octets: Octets) -> bool:
    return not any(octets)


def fill_for(octets: Octets, signed: bool) -> int:
    """Octet that extends ``octets`` without changing its value."""
    return 0xFF if signed and is_negative(octets) else 0x00


def resize(octets: Octets, width: int, signed: bool) -> bytearray:
    """Sign- or zero-extend (or truncate) to ``width`` octets."""
    out = bytearray(octets[:width])
    if len(out) < width:
        out.extend(bytes([fill_for(octets, signed)]) * (width - len(out)))
    return out


def fits(octets: Octets, width: int, signed: bool) -> bool:
    """True when the low ``width`` octets alone represent the same value.

    ``octets`` must be at least one octet wider than any value it can
    hold, so that a negative intermediate is visible as a 0xFF run even
    when read back unsigned.
    """
    if signed and width > 0 and octets[width - 1] & 0x80:
        fill = 0xFF
    else:
        fill = 0x00
    return all(o == fill for o in octets[width:])


def significant(octets: Octets, signed: bool) -> int:
    """Smallest width (at least one octet) that still holds the value."""
    n = len(octets)
    while n > 1:
        top = octets[n - 1]
        if signed:
            below_negative = octets[n - 2] & 0x80 != 0
            if not ((top == 0x00 and not below_negative)
                    or (top == 0xFF and below_negative)):
                break
        elif top != 0:
            break
        n -= 1
    return n


def to_int(octets: Octets, signed: bool) -> int:
    return int.from_bytes(bytes(octets), "little", signed=signed)


# ---------------------------------------------------------------------------
# Ripple arithmetic (equal widths, result wraps)
# ---------------------------------------------------------------------------

def add(a: Octets, b: Octets) -> bytearray:
    out = bytearray(len(a))
    carry = 0
    for i in range(len(a)):
        s = a[i] + b[i] + carry
        out[i] = s & 0xFF
        carry = s >> 8
    return out


def sub(a: Octets, b: Octets) -> bytearray:
    out = bytearray(len(a))
    borrow = 0
    for i in range(len(a)):
        d = a[i] - b[i] - borrow
        out[i] = d & 0xFF
        borrow = 1 if d < 0 else 0
    return out


def negate(octets: Octets) -> bytearray:
    """Two's-complement negation at the same width."""
    out = bytearray(len(octets))
    carry = 1
    for i, o in enumerate(octets):
        s = (~o & 0xFF) + carry
        out[i] = s & 0xFF
        carry = s >> 8
    return out


def magnitude(octets: Octets, signed: bool) -> bytearray:
    """Absolute value read unsigned at the same width.

    The most negative value maps onto itself, which read unsigned is its
    correct magnitude.
    """
    if signed and is_negative(octets):
        return negate(octets)
    return bytearray(octets)


def compare(a: Octets, b: Octets) -> int:
    """Compare two magnitudes of any widths: -1, 0 or 1."""
    n = max(len(a), len(b))
    for i in reversed(range(n)):
        x = a[i] if i < len(a) else 0
        y = b[i] if i < len(b) else 0
        if x != y:
            return 1 if x > y else -1
    return 0


# ---------------------------------------------------------------------------
# Multiplication and division (magnitudes)
# ---------------------------------------------------------------------------

def mul(a: Octets, b: Octets) -> bytearray:
    """Schoolbook product, ``len(a) + len(b)`` octets wide (never wraps)."""
    acc = bytearray(len(a) + len(b))
    for i, x in enumerate(a):
        if not x:
            continue
        carry = 0
        for j, y in enumerate(b):
            t = acc[i + j] + x * y + carry
            acc[i + j] = t & 0xFF
            carry = t >> 8
        k = i + len(b)
        while carry:
            t = acc[k] + carry
            acc[k] = t & 0xFF
            carry = t >> 8
            k += 1
    return acc


def divmod_(a: Octets, b: Octets) -> tuple[bytearray, bytearray]:
    """Shift-subtract long division of magnitudes.

    Returns a quotient ``len(a)`` octets wide and a remainder ``len(b)``
    octets wide.  ``b`` must not be zero.
    """
    quot = bytearray(len(a))
    divisor = resize(b, len(b) + 1, False)
    rem = bytearray(len(b) + 1)
    for bit in reversed(range(8 * len(a))):
        rem = shift_left(rem, 1)
        rem[0] |= (a[bit >> 3] >> (bit & 7)) & 1
        if compare(rem, divisor) >= 0:
            rem = sub(rem, divisor)
            quot[bit >> 3] |= 1 << (bit & 7)
    return quot, rem[:len(b)]


# ---------------------------------------------------------------------------
# Roots (magnitudes, digit by digit)
# ---------------------------------------------------------------------------

def isqrt(octets: Octets) -> tuple[bytearray, bytearray]:
    """Floor square root and remainder, both ``len(octets)`` wide."""
    width = len(octets)
    if width == 0:
        return bytearray(), bytearray()
    wide = width + 1
    rest = resize(octets, wide, False)
    root = bytearray(wide)
    bit = bytearray(wide)
    top = 8 * width - 2
    bit[top >> 3] = 1 << (top & 7)
    while not is_zero(bit):
        trial = add(root, bit)
        if compare(rest, trial) >= 0:
            rest = sub(rest, trial)
            root = add(shift_right(root, 1), bit)
        else:
            root = shift_right(root, 1)
        bit = shift_right(bit, 2)
    return root[:width], rest[:width]


def icbrt(octets: Octets) -> tuple[bytearray, bytearray]:
    """Floor cube root and remainder, both ``len(octets)`` wide.

    Each step doubles the partial root ``y`` and admits the next bit when
    ``3*y*(y + 1) + 1`` still fits under the shifted radicand.
    """
    width = len(octets)
    if width == 0:
        return bytearray(), bytearray()
    wide = width + 1
    one = resize(b"\x01", wide, False)
    rest = resize(octets, wide, False)
    root = bytearray(wide)
    for shift in range((8 * width - 1) // 3 * 3, -1, -3):
        root = shift_left(root, 1)
        step = mul(root, add(root, one))[:wide]
        step = add(add(add(step, step), step), one)
        if compare(shift_right(rest, shift), step) >= 0:
            rest = sub(rest, shift_left(step, shift))
            root = add(root, one)
    return root[:width], rest[:width]


# ---------------------------------------------------------------------------
# Boolean operations (equal widths)
# ---------------------------------------------------------------------------

def orr(a: Octets, b: Octets) -> bytearray:
    return bytearray(x | y for x, y in zip(a, b))


def and_(a: Octets, b: Octets) -> bytearray:
    return bytearray(x & y for x, y in zip(a, b))


def xor(a: Octets, b: Octets) -> bytearray:
    return bytearray(x ^ y for x, y in zip(a, b))


def not_(a: Octets) -> bytearray:
    return bytearray(~x & 0xFF for x in a)


# ---------------------------------------------------------------------------
# Shifts and rotations
# ---------------------------------------------------------------------------

def shift_left(octets: Octets, count: int) -> bytearray:
    n = len(octets)
    out = bytearray(n)
    whole, part = divmod(count, 8)
    for i in range(whole, n):
        v = octets[i - whole] << part
        if part and i - whole > 0:
            v |= octets[i - whole - 1] >> (8 - part)
        out[i] = v & 0xFF
    return out


def shift_right(octets: Octets, count: int, fill: int = 0x00) -> bytearray:
    """Shift toward octet 0, feeding ``fill`` in at the top."""
    n = len(octets)
    out = bytearray([fill]) * n
    whole, part = divmod(count, 8)
    for i in range(n - whole):
        lo = octets[i + whole]
        hi = octets[i + whole + 1] if i + whole + 1 < n else fill
        out[i] = ((lo >> part) | (hi << (8 - part))) & 0xFF
    return out


def rotate_left(octets: Octets, count: int) -> bytearray:
    bits = 8 * len(octets)
    if bits == 0 or count % bits == 0:
        return bytearray(octets)
    count %= bits
    return orr(shift_left(octets, count), shift_right(octets, bits - count))


def rotate_right(octets: Octets, count: int) -> bytearray:
    bits = 8 * len(octets)
    if bits == 0:
        return bytearray(octets)
    return rotate_left(octets, bits - count % bits)


# ---------------------------------------------------------------------------
# Bit counts
# ---------------------------------------------------------------------------

def leading_zeros(octets: Octets) -> int:
    count = 0
    for o in reversed(octets):
        if o:
            return count + 8 - o.bit_length()
        count += 8
    return count


def trailing_zeros(octets: Octets) -> int:
    count = 0
    for o in octets:
        if o:
            return count + (o & -o).bit_length() - 1
        count += 8
    return count


def popcount(octets: Octets) -> int:
    return sum(bin(o).count("1") for o in octets)
