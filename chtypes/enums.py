"""Values of Enum8 and Enum16 columns, held by their numeric code."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, repr=False)
class Enum8:
    """An Enum8 value; equal values share the same code."""

    value: int = 0

    def __post_init__(self) -> None:
        if not -(2**7) <= self.value < 2**7:
            raise ValueError(f"Enum8 code out of range: {self.value}")

    @classmethod
    def of(cls, source: int) -> "Enum8":
        return cls(source)

    def internal(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"Enum8({self.value})"

    __repr__ = __str__


@dataclass(frozen=True, repr=False)
class Enum16:
    """An Enum16 value; equal values share the same code."""

    value: int = 0

    def __post_init__(self) -> None:
        if not -(2**15) <= self.value < 2**15:
            raise ValueError(f"Enum16 code out of range: {self.value}")

    @classmethod
    def of(cls, source: int) -> "Enum16":
        return cls(source)

    def internal(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"Enum({self.value})"

    __repr__ = __str__