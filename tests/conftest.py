"""Shared fixtures and strategies for the bigint tests."""
from __future__ import annotations

import pytest
from hypothesis import strategies as st

from bigint import SignedBigInt, UnsignedBigInt

S32_RANGE = (-(2**31), 2**31 - 1)
U32_RANGE = (0, 2**32 - 1)

s8 = st.integers(min_value=-128, max_value=127)
u8 = st.integers(min_value=0, max_value=255)
s32 = st.integers(min_value=S32_RANGE[0], max_value=S32_RANGE[1])
u32 = st.integers(min_value=U32_RANGE[0], max_value=U32_RANGE[1])
s64 = st.integers(min_value=-(2**63), max_value=2**63 - 1)
u64 = st.integers(min_value=0, max_value=2**64 - 1)
counts = st.integers(min_value=0, max_value=160)


def signed_of(n: int, width: int) -> SignedBigInt:
    """Signed value of any width, built through the public API only."""
    v = SignedBigInt.init(width)
    v.data[:] = n.to_bytes(width, "little", signed=True)
    return v


def unsigned_of(n: int, width: int) -> UnsignedBigInt:
    v = UnsignedBigInt.init(width)
    v.data[:] = n.to_bytes(width, "little")
    return v


@pytest.fixture
def s():
    """Shorthand for 32-bit signed values."""
    return SignedBigInt.make32


@pytest.fixture
def u():
    """Shorthand for 32-bit unsigned values."""
    return UnsignedBigInt.make32


def reserved(n: int, width: int = 1, cap: int = 4) -> UnsignedBigInt:
    """Unsigned value with ``cap - width`` spare octets above it."""
    v = UnsignedBigInt.init(width, cap=cap)
    v.data[:width] = n.to_bytes(width, "little")
    return v
