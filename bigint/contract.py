"""Machine-readable contract for the fixed-width integers.

Each operation is described over plain Python ints by:
- postconditions: what the observed outcome must satisfy
- flag conditions: inputs that must raise the result's overflow/err flag
- error conditions: inputs that must raise a specific exception
- algebraic properties: relationships that must hold across operations

The contract never touches the octet engine.  ``bigint.search`` drives the
real types through it to hunt for counterexamples, and the conformance
tests iterate over it directly.

Layers
------
Bounds           the inclusive value range of one width and signedness
OperationContract  per-operation contract (post/flag/error/properties)
IntContract      the full contract for one width and signedness
build_contract() constructs an IntContract
"""
from __future__ import annotations

from dataclasses import dataclass
from math import isqrt
from typing import Any, Callable

from bigint.results import Cmp


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Bounds:
    """Inclusive integer interval [lo, hi]."""

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    @classmethod
    def of(cls, octets: int, signed: bool) -> Bounds:
        bits = 8 * octets
        if signed and bits:
            return cls(-(1 << (bits - 1)), (1 << (bits - 1)) - 1)
        return cls(0, (1 << bits) - 1)

    def contains(self, v: int) -> bool:
        return self.lo <= v <= self.hi

    @property
    def width(self) -> int:
        return self.hi - self.lo + 1

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def wrap(self, v: int) -> int:
        return self.lo + (v - self.lo) % self.width


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]      # (*inputs, outcome) -> bool


@dataclass(frozen=True)
class FlagCondition:
    name: str
    description: str
    trigger: Callable[..., bool]    # (*inputs) -> bool
    flag: str                       # "overflow" or "err"


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]      # (probe, *values) -> bool
    operands: tuple[str, ...] = ()  # defaults to all "value"

    @property
    def kinds(self) -> tuple[str, ...]:
        return self.operands or ("value",) * self.arity


@dataclass(frozen=True)
class OperationContract:
    name: str
    operands: tuple[str, ...]       # "value" or "count" per input
    postconditions: list[Postcondition]
    flag_conditions: list[FlagCondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]


@dataclass(frozen=True)
class IntContract:
    """Complete contract for one width and signedness."""

    octets: int
    signed: bool
    bounds: Bounds
    operations: dict[str, OperationContract]

    @property
    def bits(self) -> int:
        return 8 * self.octets

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    def counts(self) -> range:
        """Shift amounts worth checking: zero through twice the width."""
        return range(0, 2 * self.bits + 1)


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity.  The octet engine
    divides magnitudes, which truncates toward zero instead.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the result is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def icbrt(n: int) -> int:
    """Floor cube root of a non-negative int, by bisection."""
    lo, hi = 0, 1 << (n.bit_length() // 3 + 1)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if mid ** 3 <= n:
            lo = mid
        else:
            hi = mid - 1
    return lo


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(octets: int, signed: bool) -> IntContract:
    """Construct the full contract for ``octets``-wide values."""

    bounds = Bounds.of(octets, signed)
    bits = 8 * octets
    mask = (1 << bits) - 1

    def raw(v: int) -> int:
        """Bit pattern of ``v`` as an unsigned int."""
        return v & mask

    def cooked(u: int) -> int:
        """Value of an unsigned bit pattern at this width."""
        return bounds.wrap(u)

    def overflowing(exact: Callable[[int, int], int]) -> list[Postcondition]:
        return [
            Postcondition(
                "value_wrapped",
                "Value equals the exact result wrapped to the width",
                lambda a, b, out: out.val == bounds.wrap(exact(a, b)),
            ),
            Postcondition(
                "overflow_exact",
                "Overflow is set exactly when the exact result does not fit",
                lambda a, b, out: out.overflow != bounds.contains(exact(a, b)),
            ),
        ]

    def overflow_flag(exact: Callable[[int, int], int]) -> list[FlagCondition]:
        return [
            FlagCondition(
                "overflow",
                "Overflow flag raised when the exact result does not fit",
                lambda a, b: not bounds.contains(exact(a, b)),
                "overflow",
            ),
        ]

    def pattern(name: str, description: str, expected: Callable[..., int]):
        return [Postcondition(
            name, description,
            lambda *args: args[-1] == expected(*args[:-1]),
        )]

    def rotl(a: int, k: int) -> int:
        if not bits:
            return a
        k %= bits
        u = raw(a)
        return cooked(((u << k) | (u >> (bits - k))) & mask)

    def rotr(a: int, k: int) -> int:
        if not bits:
            return a
        return rotl(a, bits - k % bits)

    def clz(a: int) -> int:
        return bits - raw(a).bit_length()

    def ctz(a: int) -> int:
        u = raw(a)
        return bits if u == 0 else (u & -u).bit_length() - 1

    def popcount(a: int) -> int:
        return bin(raw(a)).count("1")

    zero = 0
    one = 1

    # ------------------------------------------------------------ add / sub
    add = OperationContract(
        name="add",
        operands=("value", "value"),
        postconditions=overflowing(lambda a, b: a + b),
        flag_conditions=overflow_flag(lambda a, b: a + b),
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a)", 2,
                lambda probe, a, b: probe.run("add", a, b)
                == probe.run("add", b, a),
            ),
            AlgebraicProperty(
                "sub_inverse",
                "sub(add(a, b), b) == a when add does not overflow", 2,
                lambda probe, a, b: (
                    probe.run("add", a, b).overflow
                    or probe.run("sub", probe.run("add", a, b).val, b).val == a
                ),
            ),
        ],
    )

    sub = OperationContract(
        name="sub",
        operands=("value", "value"),
        postconditions=overflowing(lambda a, b: a - b),
        flag_conditions=overflow_flag(lambda a, b: a - b),
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "self_inverse", "sub(a, a) == 0 without overflow", 1,
                lambda probe, a: (
                    probe.run("sub", a, a).val == zero
                    and not probe.run("sub", a, a).overflow
                ),
            ),
        ],
    )

    # ------------------------------------------------------------ mul / pow
    mul = OperationContract(
        name="mul",
        operands=("value", "value"),
        postconditions=overflowing(lambda a, b: a * b),
        flag_conditions=overflow_flag(lambda a, b: a * b),
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "identity", "mul(a, 1) == a and never overflows", 1,
                lambda probe, a: (
                    probe.run("mul", a, one).val == a
                    and not probe.run("mul", a, one).overflow
                ),
            ),
            AlgebraicProperty(
                "commutativity", "mul(a, b) == mul(b, a)", 2,
                lambda probe, a, b: probe.run("mul", a, b)
                == probe.run("mul", b, a),
            ),
        ],
    )

    pow_ = OperationContract(
        name="pow",
        operands=("value", "value"),
        postconditions=[
            Postcondition(
                "value_wrapped",
                "Value equals a ** b wrapped to the width",
                lambda a, b, out: b < 0 or out.val == bounds.wrap(a ** b),
            ),
            Postcondition(
                "overflow_exact",
                "Overflow is set exactly when a ** b does not fit",
                lambda a, b, out: (
                    b < 0 or out.overflow != bounds.contains(a ** b)
                ),
            ),
        ],
        flag_conditions=[
            FlagCondition(
                "overflow",
                "Overflow flag raised when a ** b does not fit",
                lambda a, b: b >= 0 and not bounds.contains(a ** b),
                "overflow",
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_exponent",
                "ValueError for a negative exponent",
                lambda a, b: b < 0,
                ValueError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "zeroth_power", "pow(a, 0) == 1", 1,
                lambda probe, a: probe.run("pow", a, zero).val == one,
            ),
        ],
    )

    # ----------------------------------------------------------------- div
    div = OperationContract(
        name="div",
        operands=("value", "value"),
        postconditions=[
            Postcondition(
                "quotient_truncated",
                "Quotient is a / b truncated toward zero (wrapped)",
                lambda a, b, out: (
                    b == 0 or out.quot == bounds.wrap(truncdiv(a, b))
                ),
            ),
            Postcondition(
                "remainder",
                "Remainder is a - b * trunc(a / b)",
                lambda a, b, out: (
                    b == 0 or out.rem == a - b * truncdiv(a, b)
                ),
            ),
            Postcondition(
                "err_only_on_zero",
                "Error flag set exactly when the divisor is zero",
                lambda a, b, out: out.err == (b == 0),
            ),
        ],
        flag_conditions=[
            FlagCondition(
                "divide_by_zero", "Error flag raised when b == 0",
                lambda a, b: b == 0, "err",
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "divide_by_zero", "div(a, 0) always sets err", 1,
                lambda probe, a: probe.run("div", a, zero).err,
            ),
            AlgebraicProperty(
                "identity", "div(a, 1) == a", 1,
                lambda probe, a: probe.run("div", a, one).quot == a,
            ),
        ],
    )

    # --------------------------------------------------------------- roots
    def root_contract(name: str, root: Callable[[int], int], power: int,
                      keeps_rem: bool) -> OperationContract:
        return OperationContract(
            name=name,
            operands=("value",),
            postconditions=[
                Postcondition(
                    "floor_root", f"Quotient is the floor {name} of a",
                    lambda a, out: a < 0 or out.quot == root(a),
                ),
                Postcondition(
                    "remainder",
                    (f"Remainder is a - root ** {power}" if keeps_rem
                     else "Remainder is unused and zero"),
                    lambda a, out: a < 0 or out.rem == (
                        a - root(a) ** power if keeps_rem else 0
                    ),
                ),
                Postcondition(
                    "err_only_on_negative",
                    "Error flag set exactly for a negative radicand",
                    lambda a, out: out.err == (a < 0),
                ),
            ],
            flag_conditions=[
                FlagCondition(
                    "negative_radicand", "Error flag raised when a < 0",
                    lambda a: a < 0, "err",
                ),
            ],
            error_conditions=[],
            properties=[],
        )

    sqrt = root_contract("sqrt", isqrt, 2, keeps_rem=True)
    cbrt = root_contract("cbrt", icbrt, 3, keeps_rem=False)

    # ------------------------------------------------------------- bitwise
    def bitwise(name: str, fn: Callable[[int, int], int]) -> OperationContract:
        return OperationContract(
            name=name,
            operands=("value", "value"),
            postconditions=pattern(
                "bit_pattern", f"Octet-wise {name} over the full width",
                lambda a, b: cooked(fn(raw(a), raw(b))),
            ),
            flag_conditions=[],
            error_conditions=[],
            properties=[],
        )

    orr = bitwise("orr", lambda x, y: x | y)
    and_ = bitwise("and_", lambda x, y: x & y)
    xor = bitwise("xor", lambda x, y: x ^ y)

    not_ = OperationContract(
        name="not_",
        operands=("value",),
        postconditions=pattern(
            "bit_pattern", "Every bit complemented",
            lambda a: cooked(raw(a) ^ mask),
        ),
        flag_conditions=[],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "popcount_complement",
                "popcount(a) + popcount(not(a)) == 8 * width", 1,
                lambda probe, a: (
                    probe.run("popcount", a)
                    + probe.run("popcount", probe.run("not_", a)) == bits
                ),
            ),
        ],
    )

    # ---------------------------------------------------- shifts / rotates
    def shift(name: str, description: str,
              expected: Callable[[int, int], int],
              properties: list[AlgebraicProperty] | None = None,
              ) -> OperationContract:
        return OperationContract(
            name=name,
            operands=("value", "count"),
            postconditions=pattern("bit_pattern", description, expected),
            flag_conditions=[],
            error_conditions=[],
            properties=properties or [],
        )

    lsl = shift("lsl", "Zero-filled left shift",
                lambda a, k: cooked((raw(a) << k) & mask))
    lsr = shift("lsr", "Zero-filled right shift ignoring the sign",
                lambda a, k: cooked(raw(a) >> k))
    rol = shift(
        "rol", "Circular left rotation", rotl,
        properties=[
            AlgebraicProperty(
                "ror_inverse", "ror(rol(a, k), k) == a", 2,
                lambda probe, a, k: probe.run(
                    "ror", probe.run("rol", a, k), k) == a,
                operands=("value", "count"),
            ),
        ],
    )
    ror = shift("ror", "Circular right rotation", rotr)

    # -------------------------------------------------------------- counts
    def count(name: str, description: str, fn: Callable[[int], int],
              properties: list[AlgebraicProperty] | None = None,
              ) -> OperationContract:
        return OperationContract(
            name=name,
            operands=("value",),
            postconditions=pattern("count", description, fn),
            flag_conditions=[],
            error_conditions=[],
            properties=properties or [],
        )

    clz_ = count(
        "clz", "Leading zero bits over the full width", clz,
        properties=[
            AlgebraicProperty(
                "all_zero", "clz(a) == 8 * width iff a is zero", 1,
                lambda probe, a: (probe.run("clz", a) == bits) == (a == 0),
            ),
        ],
    )
    ctz_ = count("ctz", "Trailing zero bits over the full width", ctz)
    popcount_ = count("popcount", "Set bits over the full width", popcount)

    # ---------------------------------------------------------- comparison
    def comparison(name: str, relation: Callable[[int, int], bool],
                   properties: list[AlgebraicProperty]) -> OperationContract:
        return OperationContract(
            name=name,
            operands=("value", "value"),
            postconditions=[
                Postcondition(
                    "ordering", f"{name} agrees with integer ordering",
                    lambda a, b, out: out is Cmp.of(relation(a, b)),
                ),
            ],
            flag_conditions=[],
            error_conditions=[],
            properties=properties,
        )

    cmp_eq = comparison(
        "cmp_eq", lambda a, b: a == b,
        [
            AlgebraicProperty(
                "symmetry", "cmp_eq(a, b) == cmp_eq(b, a)", 2,
                lambda probe, a, b: probe.run("cmp_eq", a, b)
                is probe.run("cmp_eq", b, a),
            ),
            AlgebraicProperty(
                "reflexivity", "cmp_eq(a, a) is TRUE", 1,
                lambda probe, a: probe.run("cmp_eq", a, a) is Cmp.TRUE,
            ),
        ],
    )
    cmp_gt = comparison(
        "cmp_gt", lambda a, b: a > b,
        [
            AlgebraicProperty(
                "antisymmetry", "cmp_gt(a, b) and cmp_gt(b, a) never both", 2,
                lambda probe, a, b: not (
                    probe.run("cmp_gt", a, b) is Cmp.TRUE
                    and probe.run("cmp_gt", b, a) is Cmp.TRUE
                ),
            ),
        ],
    )
    cmp_ge = comparison(
        "cmp_ge", lambda a, b: a >= b,
        [
            AlgebraicProperty(
                "totality", "cmp_ge(a, b) or cmp_ge(b, a)", 2,
                lambda probe, a, b: (
                    probe.run("cmp_ge", a, b) is Cmp.TRUE
                    or probe.run("cmp_ge", b, a) is Cmp.TRUE
                ),
            ),
        ],
    )

    operations: dict[str, OperationContract] = {
        op.name: op
        for op in (
            add, sub, mul, pow_, div, sqrt, cbrt,
            orr, and_, xor, not_, lsl, lsr, rol, ror,
            clz_, ctz_, popcount_, cmp_eq, cmp_gt, cmp_ge,
        )
    }

    if signed:
        operations["asr"] = shift(
            "asr", "Right shift replicating the sign bit",
            lambda a, k: a >> k,
        )

    return IntContract(
        octets=octets,
        signed=signed,
        bounds=bounds,
        operations=operations,
    )


def outcome_flag(outcome: Any, flag: str) -> bool:
    """Read the ``overflow`` or ``err`` flag off an observed outcome."""
    return bool(getattr(outcome, flag))
