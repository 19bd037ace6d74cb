"""Limits and validated parameter types.

Every width, primitive and shift count crosses the public API through
one of the ``Annotated`` aliases below.  ``pydantic.validate_call`` turns
the constraints into a ``ValidationError`` at the call boundary, so the
octet engine never sees a value it cannot represent.
"""
from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

OCTET_BITS = 8
MAX_WIDTH = 0xFFFF             # widths are 16-bit octet counts
MAX_SHIFT = 0xFFFF_FFFF        # shift/rotate amounts are 32-bit counts


# ---------------------------------------------------------------------------
# Validated parameter types
# ---------------------------------------------------------------------------

Width = Annotated[int, Field(strict=True, ge=0, le=MAX_WIDTH)]
ShiftCount = Annotated[int, Field(strict=True, ge=0, le=MAX_SHIFT)]

S8 = Annotated[int, Field(strict=True, ge=-(1 << 7), le=(1 << 7) - 1)]
S16 = Annotated[int, Field(strict=True, ge=-(1 << 15), le=(1 << 15) - 1)]
S32 = Annotated[int, Field(strict=True, ge=-(1 << 31), le=(1 << 31) - 1)]
S64 = Annotated[int, Field(strict=True, ge=-(1 << 63), le=(1 << 63) - 1)]

U8 = Annotated[int, Field(strict=True, ge=0, le=(1 << 8) - 1)]
U16 = Annotated[int, Field(strict=True, ge=0, le=(1 << 16) - 1)]
U32 = Annotated[int, Field(strict=True, ge=0, le=(1 << 32) - 1)]
U64 = Annotated[int, Field(strict=True, ge=0, le=(1 << 64) - 1)]
