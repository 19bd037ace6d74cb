"""Result types shared by the signed and unsigned integers.

Runtime outcomes are reported by value rather than by raising:

Cmp            tri-state comparison outcome (TRUE / FALSE / UNDEFINED)
Overflowing    a value paired with an overflow flag (add, sub, mul, pow)
DivResult      quotient and remainder paired with an error flag
               (divide by zero, negative radicand)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, TypeVar

T = TypeVar("T")


class Cmp(Enum):
    FALSE = auto()
    TRUE = auto()
    UNDEFINED = auto()

    @classmethod
    def of(cls, flag: bool) -> Cmp:
        return cls.TRUE if flag else cls.FALSE

    def __bool__(self) -> bool:
        if self is Cmp.UNDEFINED:
            raise ValueError(
                "comparison involving an empty operand has no truth value"
            )
        return self is Cmp.TRUE


@dataclass(frozen=True)
class Overflowing(Generic[T]):
    """Result of an operation that truncates instead of growing.

    ``val`` is always usable: when ``overflow`` is set it holds the exact
    result wrapped to the first operand's width.
    """

    val: T
    overflow: bool = False


@dataclass(frozen=True)
class DivResult(Generic[T]):
    """Result of a division or root extraction.

    When ``err`` is set, ``quot`` and ``rem`` carry no meaning.
    """

    quot: T
    rem: T
    err: bool = False
