"""Column type descriptions and server-side bookkeeping records."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Tuple

DEFAULT_TIMEZONE = "UTC"


class SimpleAggFunc(enum.Enum):
    """Aggregate functions allowed inside ``SimpleAggregateFunction``."""

    ANY = "any"
    ANY_LAST = "anyLast"
    MIN = "min"
    MAX = "max"
    SUM = "sum"
    SUM_WITH_OVERFLOW = "sumWithOverflow"
    GROUP_BIT_AND = "groupBitAnd"
    GROUP_BIT_OR = "groupBitOr"
    GROUP_BIT_XOR = "groupBitXor"
    GROUP_ARRAY_ARRAY = "groupArrayArray"
    GROUP_UNIQ_ARRAY_ARRAY = "groupUniqArrayArray"
    SUM_MAP = "sumMap"
    MIN_MAP = "minMap"
    MAX_MAP = "maxMap"
    ARG_MIN = "argMin"
    ARG_MAX = "argMax"

    @classmethod
    def parse(cls, text: str) -> "SimpleAggFunc":
        """Return the function named ``text``; raise ValueError if unknown."""
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"unknown simple aggregate function: {text!r}") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DateTimeType:
    """Flavour of a DateTime column.

    With no arguments this is a plain 32-bit ``DateTime``; giving a precision
    and a timezone makes it ``DateTime64``; ``chrono`` marks the variant used
    for values converted from native date-time objects.
    """

    precision: Optional[int] = None
    timezone: Optional[str] = None
    chrono: bool = False

    def __post_init__(self) -> None:
        if (self.precision is None) != (self.timezone is None):
            raise ValueError("DateTime64 needs both a precision and a timezone")
        if self.chrono and self.precision is not None:
            raise ValueError("a chrono DateTime type has no precision")
        if self.precision is not None and self.precision < 0:
            raise ValueError("precision must not be negative")

    @property
    def is_datetime64(self) -> bool:
        return self.precision is not None


_PLAIN_TYPES = frozenset(
    {
        "Bool",
        "UInt8",
        "UInt16",
        "UInt32",
        "UInt64",
        "UInt128",
        "Int8",
        "Int16",
        "Int32",
        "Int64",
        "Int128",
        "String",
        "Float32",
        "Float64",
        "Date",
        "IPv4",
        "IPv6",
        "UUID",
    }
)
_WRAPPERS = frozenset({"Nullable", "Array", "LowCardinality"})
_COMPOSITE = frozenset(
    {
        "FixedString",
        "DateTime",
        "Decimal",
        "Enum8",
        "Enum16",
        "SimpleAggregateFunction",
        "Map",
    }
)
_INNER_LOW_CARDINALITY = frozenset(
    {
        "String",
        "FixedString",
        "Date",
        "DateTime",
        "UInt8",
        "UInt16",
        "UInt32",
        "UInt64",
        "Int8",
        "Int16",
        "Int32",
        "Int64",
    }
)


@dataclass(frozen=True)
class SqlType:
    """A column type, named as the server names it.

    Nested types go in ``inner`` (Nullable, Array, LowCardinality,
    SimpleAggregateFunction) or ``key``/``value`` (Map).
    """

    name: str
    length: Optional[int] = None
    inner: Optional["SqlType"] = None
    key: Optional["SqlType"] = None
    value: Optional["SqlType"] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    datetime: Optional[DateTimeType] = None
    enum_values: Tuple[Tuple[str, int], ...] = field(default=())
    func: Optional[SimpleAggFunc] = None

    def __post_init__(self) -> None:
        name = self.name
        if name not in _PLAIN_TYPES | _WRAPPERS | _COMPOSITE:
            raise ValueError(f"unknown SQL type: {name!r}")
        if name in _WRAPPERS and self.inner is None:
            raise ValueError(f"{name} needs an inner type")
        if name == "FixedString" and (self.length is None or self.length < 0):
            raise ValueError("FixedString needs a non-negative length")
        if name == "Decimal" and (self.precision is None or self.scale is None):
            raise ValueError("Decimal needs a precision and a scale")
        if name == "Map" and (self.key is None or self.value is None):
            raise ValueError("Map needs a key type and a value type")
        if name == "SimpleAggregateFunction" and (self.func is None or self.inner is None):
            raise ValueError("SimpleAggregateFunction needs a function and an inner type")
        if name == "DateTime" and self.datetime is None:
            object.__setattr__(self, "datetime", DateTimeType())
        if name in ("Enum8", "Enum16"):
            pairs = tuple((str(label), int(number)) for label, number in self.enum_values)
            object.__setattr__(self, "enum_values", pairs)

    def __str__(self) -> str:
        name = self.name
        if name in _PLAIN_TYPES:
            return name
        if name == "FixedString":
            return f"FixedString({self.length})"
        if name in _WRAPPERS:
            return f"{name}({self.inner})"
        if name == "DateTime":
            kind = self.datetime
            if kind is not None and kind.is_datetime64:
                return f"DateTime64({kind.precision}, '{kind.timezone}')"
            return "DateTime"
        if name == "SimpleAggregateFunction":
            return f"SimpleAggregateFunction({self.func}, {self.inner})"
        if name == "Decimal":
            return f"Decimal({self.precision}, {self.scale})"
        if name in ("Enum8", "Enum16"):
            body = ",".join(f"'{label}' = {number}" for label, number in self.enum_values)
            return f"{name}({body})"
        return f"Map({self.key}, {self.value})"

    def level(self) -> int:
        """Depth of nesting that carries its own offsets or null masks."""
        if self.name in ("Nullable", "Array"):
            return 1 + self.inner.level()
        if self.name == "Map":
            return 1 + self.value.level()
        if self.name == "LowCardinality":
            return 1
        return 0

    def map_level(self) -> int:
        if self.name in ("Nullable", "Array"):
            return self.inner.level()
        if self.name == "Map":
            return 1 + self.value.level()
        return 0

    def is_datetime(self) -> bool:
        return self.name == "DateTime"

    def is_inner_low_cardinality(self) -> bool:
        """Whether this type may be wrapped in LowCardinality."""
        return self.name in _INNER_LOW_CARDINALITY


@dataclass
class Progress:
    rows: int = 0
    bytes: int = 0
    total_rows: int = 0
    written_rows: int = 0
    written_bytes: int = 0


@dataclass
class ProfileInfo:
    rows: int = 0
    bytes: int = 0
    blocks: int = 0
    applied_limit: bool = False
    rows_before_limit: int = 0
    calculated_rows_before_limit: bool = False


@dataclass
class TableColumns:
    table_name: str = ""
    columns: str = ""


@dataclass
class ServerInfo:
    name: str = ""
    revision: int = 0
    minor_version: int = 0
    major_version: int = 0
    timezone: str = DEFAULT_TIMEZONE
    display_name: str = ""
    patch_version: int = 0

    def __repr__(self) -> str:
        return (
            f"{self.name} {self.major_version}.{self.minor_version}."
            f"{self.revision}.{self.patch_version} ({self.timezone})"
        )


def _scalar_sql_type(value: Any) -> SqlType:
    if isinstance(value, bool):
        return SqlType("Bool")
    if isinstance(value, int):
        return SqlType("Int64")
    if isinstance(value, float):
        return SqlType("Float64")
    if isinstance(value, (str, bytes)):
        return SqlType("String")
    if isinstance(value, datetime):
        return SqlType("DateTime", datetime=DateTimeType())
    if isinstance(value, date):
        return SqlType("Date")
    if isinstance(value, dict):
        return _map_sql_type(value)
    raise TypeError(f"no SQL type for {type(value).__name__}")


def _map_sql_type(mapping: dict) -> SqlType:
    if not mapping:
        raise ValueError("cannot infer the SQL type of an empty mapping")
    key_types = {_scalar_sql_type(k) for k in mapping}
    value_types = {_scalar_sql_type(v) for v in mapping.values()}
    if len(key_types) != 1 or len(value_types) != 1:
        raise TypeError("mapping keys and values must each share one SQL type")
    return SqlType("Map", key=key_types.pop(), value=value_types.pop())


def sql_type_of(value: Any) -> SqlType:
    """Return the SQL type that a Python value is stored as."""
    return _scalar_sql_type(value)