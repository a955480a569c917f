"""Fixed-point decimals as stored in Decimal columns."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Union

MAX_PRECISION = 18
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_I32_MIN = -(2**31)


class NoBits(enum.Enum):
    """Width of the integer that holds a decimal's digits."""

    N32 = 32
    N64 = 64

    @classmethod
    def from_precision(cls, precision: int) -> "NoBits":
        """The storage width for ``precision`` digits; ValueError above 18."""
        if precision <= 9:
            return cls.N32
        if precision <= MAX_PRECISION:
            return cls.N64
        raise ValueError(f"precision {precision} is greater than {MAX_PRECISION}")


def _check_scale(scale: int) -> None:
    if not 0 <= scale <= MAX_PRECISION:
        raise ValueError(f"scale can't be greater than {MAX_PRECISION}")


def _truncating_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def _scaled(source: Union[int, float], factor: int) -> int:
    if isinstance(source, bool) or not isinstance(source, (int, float)):
        raise TypeError(f"cannot build a decimal from {type(source).__name__}")
    if isinstance(source, float):
        product = source * factor
        if math.isnan(product):
            return 0
        if product >= _I64_MAX:
            return _I64_MAX
        if product <= _I64_MIN:
            return _I64_MIN
        return int(product)
    product = source * factor
    if not _I64_MIN <= product <= _I64_MAX:
        raise OverflowError(f"{source} scaled by {factor} does not fit in 64 bits")
    return product


@dataclass(frozen=True, eq=False, repr=False)
class Decimal:
    """A decimal number: ``underlying / 10**scale``.

    Two decimals are equal when they denote the same number, whatever
    their scales.
    """

    underlying: int
    scale: int
    precision: int = MAX_PRECISION
    nobits: NoBits = field(init=False)

    def __post_init__(self) -> None:
        _check_scale(self.scale)
        object.__setattr__(self, "nobits", NoBits.from_precision(self.precision))

    @classmethod
    def of(cls, source: Union[int, float], scale: int) -> "Decimal":
        """Build a decimal from a number, keeping ``scale`` fraction digits."""
        _check_scale(scale)
        underlying = _scaled(source, 10**scale)
        limit = 10**MAX_PRECISION
        if underlying > limit:
            raise ValueError(f"{underlying} > {limit}")
        return cls(underlying, scale)

    def internal(self) -> int:
        """The stored integer, wrapped to 32 bits for narrow decimals."""
        if self.nobits is NoBits.N32:
            return (self.underlying - _I32_MIN) % (1 << 32) + _I32_MIN
        return self.underlying

    def with_scale(self, scale: int) -> "Decimal":
        """A copy rescaled to ``scale``; extra fraction digits are truncated."""
        _check_scale(scale)
        if scale == self.scale:
            return self
        if scale < self.scale:
            underlying = _truncating_div(self.underlying, 10 ** (self.scale - scale))
        else:
            underlying = self.underlying * 10 ** (scale - self.scale)
        return Decimal(underlying, scale, self.precision)

    def __str__(self) -> str:
        sign = "-" if self.underlying < 0 else ""
        digits = str(abs(self.underlying)).rjust(self.scale, "0")
        pos = len(digits) - self.scale
        whole = digits[:pos] or "0"
        return f"{sign}{whole}.{digits[pos:]}"

    __repr__ = __str__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Decimal):
            return NotImplemented
        if self.scale < other.scale:
            return self.underlying * 10 ** (other.scale - self.scale) == other.underlying
        return other.underlying * 10 ** (self.scale - other.scale) == self.underlying

    def __hash__(self) -> int:
        underlying, scale = self.underlying, self.scale
        while scale > 0 and underlying % 10 == 0:
            underlying //= 10
            scale -= 1
        return hash((underlying, scale))

    def __float__(self) -> float:
        return self.underlying / 10**self.scale