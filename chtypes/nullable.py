"""Columns whose values may be NULL."""

from __future__ import annotations

from typing import Any, Callable, Optional

from chtypes.marshal import ByteReader, ByteWriter
from chtypes.sql_types import SqlType

_INTEGER_TYPES = frozenset(
    {
        "UInt8", "UInt16", "UInt32", "UInt64", "UInt128",
        "Int8", "Int16", "Int32", "Int64", "Int128",
    }
)
_DEFAULTS = {
    "Bool": False,
    "Float32": 0.0,
    "Float64": 0.0,
    "String": b"",
    "FixedString": b"",
}


def _default_value(sql_type: SqlType) -> Any:
    if sql_type.name in _INTEGER_TYPES:
        return 0
    try:
        return _DEFAULTS[sql_type.name]
    except KeyError:
        raise TypeError(f"no default value for {sql_type}") from None


class NullableColumn:
    """A null mask over an inner column; NULL cells read back as None."""

    def __init__(self, inner: Any, nulls: Optional[bytes] = None) -> None:
        self.inner = inner
        self._nulls = bytearray(len(inner)) if nulls is None else bytearray(nulls)
        if len(self._nulls) != len(inner):
            raise ValueError("null mask and inner column differ in length")

    @classmethod
    def load(
        cls,
        reader: ByteReader,
        inner_loader: Callable[[ByteReader, int], Any],
        size: int,
    ) -> "NullableColumn":
        """Read a null mask of ``size`` bytes, then the inner column."""
        nulls = reader.read_bytes(size)
        return cls(inner_loader(reader, size), nulls)

    def sql_type(self) -> SqlType:
        return SqlType("Nullable", inner=self.inner.sql_type())

    def save(self, writer: ByteWriter, start: int, end: int) -> None:
        writer.write_bytes(bytes(self._nulls[start:end]))
        self.inner.save(writer, start, end)

    def __len__(self) -> int:
        if len(self._nulls) != len(self.inner):
            raise RuntimeError("null mask and inner column differ in length")
        return len(self.inner)

    def push(self, value: Any) -> None:
        """Append a value, or NULL when ``value`` is None."""
        if value is None:
            self.inner.push(_default_value(self.inner.sql_type()))
            self._nulls.append(1)
        else:
            self.inner.push(value)
            self._nulls.append(0)

    def at(self, index: int) -> Any:
        if self._nulls[index] == 1:
            return None
        return self.inner.at(index)

    def clone(self) -> "NullableColumn":
        return NullableColumn(self.inner.clone(), bytes(self._nulls))