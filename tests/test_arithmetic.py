"""White-box tests for add, sub, mul, div and pow.

Every result lives in the first operand's buffer, so each test builds
fresh operands rather than reusing one across calls.
"""
from __future__ import annotations

import logging

import pytest

from bigint import SignedBigInt, UnsignedBigInt

from conftest import reserved, signed_of, unsigned_of


# ===================================================================
# IN-PLACE RESULT
# ===================================================================

class TestInPlace:

    @pytest.mark.parametrize("op", ["add", "sub", "mul", "pow"])
    def test_result_is_first_operand(self, s, op):
        a = s(3)
        buf = a.data
        out = getattr(a, op)(s(2))
        assert out.val is a
        assert a.data is buf
        assert a.width == 4

    def test_div_quotient_is_first_operand(self, u):
        a = u(9)
        out = a.div(u(2))
        assert out.quot is a
        assert out.rem is not a

    def test_second_operand_untouched(self, s):
        b = s(-6)
        s(10).mul(b)
        assert int(b) == -6

    def test_mixed_types_rejected(self):
        with pytest.raises(TypeError):
            SignedBigInt.make8(1).add(UnsignedBigInt.make8(1))


# ===================================================================
# ADD / SUB
# ===================================================================

class TestAddSub:

    def test_add(self, s):
        out = s(-7).add(s(10))
        assert (int(out.val), out.overflow) == (3, False)

    def test_signed_add_overflow_wraps(self):
        out = SignedBigInt.make8(127).add(SignedBigInt.make8(1))
        assert out.overflow
        assert int(out.val) == -128

    def test_signed_add_negative_overflow(self):
        out = SignedBigInt.make8(-128).add(SignedBigInt.make8(-1))
        assert out.overflow
        assert int(out.val) == 127

    def test_unsigned_add_overflow_wraps(self):
        out = UnsignedBigInt.make8(200).add(UnsignedBigInt.make8(100))
        assert out.overflow
        assert int(out.val) == 44

    def test_unsigned_sub_below_zero(self):
        out = UnsignedBigInt.make8(3).sub(UnsignedBigInt.make8(5))
        assert out.overflow
        assert int(out.val) == 254

    def test_signed_sub(self, s):
        out = s(-5).sub(s(-8))
        assert (int(out.val), out.overflow) == (3, False)

    def test_wider_second_operand_that_fits(self):
        out = SignedBigInt.make8(10).add(SignedBigInt.make64(-20))
        assert (int(out.val), out.overflow) == (-10, False)

    def test_wider_second_operand_that_does_not_fit(self):
        out = SignedBigInt.make8(0).add(SignedBigInt.make32(1000))
        assert out.overflow
        assert int(out.val) == 1000 - 1024

    def test_multi_octet_carry(self):
        out = unsigned_of(0x00FFFFFF, 5).add(UnsignedBigInt.make8(1))
        assert (int(out.val), out.overflow) == (0x01000000, False)

    def test_empty_first_operand(self):
        out = SignedBigInt.init(0).add(SignedBigInt.make8(0))
        assert not out.overflow
        out = SignedBigInt.init(0).add(SignedBigInt.make8(1))
        assert out.overflow


# ===================================================================
# MUL
# ===================================================================

class TestMul:

    def test_signs(self, s):
        assert int(s(-6).mul(s(7)).val) == -42
        assert int(s(-6).mul(s(-7)).val) == 42

    def test_signed_overflow(self):
        out = SignedBigInt.make8(16).mul(SignedBigInt.make8(8))
        assert out.overflow
        assert int(out.val) == -128

    def test_most_negative_fits(self):
        out = SignedBigInt.make8(-16).mul(SignedBigInt.make8(8))
        assert (int(out.val), out.overflow) == (-128, False)

    def test_unsigned_overflow(self):
        out = UnsignedBigInt.make16(300).mul(UnsignedBigInt.make16(300))
        assert out.overflow
        assert int(out.val) == 90000 % 65536

    @pytest.mark.parametrize("width", [1, 3, 8, 17])
    def test_one_is_identity_for_any_width(self, width):
        a = signed_of(-(2 ** (8 * width - 1)), width)
        out = a.mul(SignedBigInt.make8(1))
        assert not out.overflow
        assert int(out.val) == -(2 ** (8 * width - 1))

    def test_by_zero(self, u):
        out = u(12345).mul(u(0))
        assert (int(out.val), out.overflow) == (0, False)

    def test_large_width(self):
        a = unsigned_of(2**100 + 3, 16)
        out = a.mul(unsigned_of(2**20, 16))
        assert (int(out.val), out.overflow) == ((2**100 + 3) * 2**20, False)


# ===================================================================
# DIV
# ===================================================================

class TestDiv:

    def test_ten_by_three(self, u):
        out = u(10).div(u(3))
        assert (int(out.quot), int(out.rem), out.err) == (3, 1, False)

    def test_divide_by_zero(self, u):
        out = u(5).div(u(0))
        assert out.err

    def test_divide_by_zero_leaves_dividend(self, s):
        a = s(-77)
        a.div(s(0))
        assert int(a) == -77

    def test_divide_by_empty(self, s):
        assert s(5).div(SignedBigInt.init(0)).err

    @pytest.mark.parametrize("a, b, q, r", [
        (7, 2, 3, 1),
        (-7, 2, -3, -1),
        (7, -2, -3, 1),
        (-7, -2, 3, -1),
        (6, -3, -2, 0),
    ])
    def test_truncates_toward_zero(self, s, a, b, q, r):
        out = s(a).div(s(b))
        assert (int(out.quot), int(out.rem), out.err) == (q, r, False)

    def test_most_negative_by_minus_one_wraps(self):
        out = SignedBigInt.make8(-128).div(SignedBigInt.make8(-1))
        assert not out.err
        assert int(out.quot) == -128
        assert int(out.rem) == 0

    def test_remainder_has_dividend_width(self):
        out = UnsignedBigInt.make64(1000).div(UnsignedBigInt.make8(7))
        assert out.rem.width == 8
        assert (int(out.quot), int(out.rem)) == (142, 6)

    def test_wide_divisor(self):
        out = SignedBigInt.make8(100).div(SignedBigInt.make64(-7))
        assert (int(out.quot), int(out.rem)) == (-14, 2)

    def test_divisor_larger_than_dividend(self, u):
        out = u(3).div(u(10))
        assert (int(out.quot), int(out.rem)) == (0, 3)


# ===================================================================
# POW
# ===================================================================

class TestPow:

    def test_small_power(self, s):
        out = s(-3).pow(s(3))
        assert (int(out.val), out.overflow) == (-27, False)

    def test_zeroth_power(self, u):
        out = u(0).pow(u(0))
        assert (int(out.val), out.overflow) == (1, False)

    def test_first_power(self, s):
        assert int(s(-9).pow(s(1)).val) == -9

    def test_overflow(self):
        out = UnsignedBigInt.make8(2).pow(UnsignedBigInt.make8(8))
        assert out.overflow
        assert int(out.val) == 0

    def test_just_fits(self):
        out = UnsignedBigInt.make8(2).pow(UnsignedBigInt.make8(7))
        assert (int(out.val), out.overflow) == (128, False)

    def test_signed_most_negative_power(self):
        out = SignedBigInt.make8(-2).pow(SignedBigInt.make8(7))
        assert (int(out.val), out.overflow) == (-128, False)

    def test_signed_positive_overflow(self):
        out = SignedBigInt.make8(2).pow(SignedBigInt.make8(7))
        assert out.overflow
        assert int(out.val) == -128

    def test_unused_squared_base_does_not_flag(self):
        # 16 ** 1: the squared base (256) overflows but is never used.
        out = UnsignedBigInt.make8(16).pow(UnsignedBigInt.make8(1))
        assert (int(out.val), out.overflow) == (16, False)

    def test_wrapped_value_is_modular(self):
        out = UnsignedBigInt.make16(3).pow(UnsignedBigInt.make16(20))
        assert out.overflow
        assert int(out.val) == 3**20 % 65536

    def test_negative_exponent_rejected(self, s):
        with pytest.raises(ValueError, match="negative exponents"):
            s(2).pow(s(-1))

    def test_one_and_zero_bases(self, s):
        assert int(s(1).pow(s(10**6)).val) == 1
        assert int(s(0).pow(s(5)).val) == 0
        out = s(-1).pow(s(11))
        assert (int(out.val), out.overflow) == (-1, False)

    def test_empty_base(self):
        out = UnsignedBigInt.init(0).pow(UnsignedBigInt.make8(0))
        assert out.overflow
        out = UnsignedBigInt.init(0).pow(UnsignedBigInt.make8(3))
        assert not out.overflow


# ===================================================================
# LOGGING
# ===================================================================

class TestLogging:

    @pytest.fixture(autouse=True)
    def _debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="bigint.base")

    def test_overflow_is_logged(self, caplog):
        SignedBigInt.make8(127).add(SignedBigInt.make8(1))
        assert "add overflowed 1-octet SignedBigInt" in caplog.text

    def test_clean_result_is_silent(self, caplog, u):
        u(1).add(u(2))
        assert caplog.records == []

    def test_divide_by_zero_is_logged(self, caplog, u):
        u(1).div(u(0))
        assert "division by zero in UnsignedBigInt" in caplog.text

    def test_quotient_wrap_is_logged(self, caplog):
        SignedBigInt.make8(-128).div(SignedBigInt.make8(-1))
        assert "quotient wrapped in 1-octet SignedBigInt" in caplog.text

    def test_negative_radicand_is_logged(self, caplog, s):
        s(-4).sqrt()
        assert "sqrt of negative SignedBigInt" in caplog.text


# ===================================================================
# SPARE CAPACITY
# ===================================================================

class TestSpareCapacity:
    """Arithmetic on a one-octet value with three reserved octets."""

    @pytest.mark.parametrize("op, operand, exact", [
        ("add", 100, 300),
        ("add", 55, 255),
        ("sub", 201, -1),
        ("sub", 8, 192),
        ("mul", 2, 400),
        ("mul", 1, 200),
        ("pow", 2, 40000),
        ("pow", 1, 200),
    ])
    def test_wraps_at_active_width(self, op, operand, exact):
        v = reserved(200)
        out = getattr(v, op)(UnsignedBigInt.make8(operand))
        assert out.val is v
        assert int(out.val) == exact % 2**8
        assert out.overflow == (not 0 <= exact < 2**8)
        assert bytes(v.data[1:]) == b"\0\0\0"
        assert v.cap == 4

    def test_div(self):
        v = reserved(200)
        out = v.div(UnsignedBigInt.make8(7))
        assert (int(out.quot), int(out.rem), out.err) == (28, 4, False)
        assert out.rem.width == 1
        assert bytes(v.data[1:]) == b"\0\0\0"

    def test_div_by_zero(self):
        v = reserved(200)
        assert v.div(UnsignedBigInt.make8(0)).err
        assert bytes(v.data) == b"\xc8\0\0\0"

    @pytest.mark.parametrize("op, root, rem", [
        ("sqrt", 14, 4),
        ("cbrt", 5, 0),
    ])
    def test_roots(self, op, root, rem):
        v = reserved(200)
        out = getattr(v, op)()
        assert (int(out.quot), int(out.rem), out.err) == (root, rem, False)
        assert bytes(v.data[1:]) == b"\0\0\0"

    def test_wide_operand_does_not_reach_reserve(self):
        v = reserved(200)
        out = v.add(UnsignedBigInt.make32(0x01000000))
        assert out.overflow
        assert int(out.val) == 200
        assert bytes(v.data[1:]) == b"\0\0\0"
