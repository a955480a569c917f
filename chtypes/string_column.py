"""Columns of variable-length byte strings."""

from __future__ import annotations

from typing import Iterable, Union

from chtypes.marshal import ByteReader, ByteWriter
from chtypes.sql_types import SqlType
from chtypes.string_pool import StringPool

Text = Union[str, bytes]


def _encode(value: Text) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"cannot store {type(value).__name__} in a String column")


class StringColumn:
    """A String column; values come back as bytes."""

    def __init__(self, values: Iterable[Text] = ()) -> None:
        self._pool = StringPool.from_strings(_encode(v) for v in values)

    @classmethod
    def load(cls, reader: ByteReader, size: int) -> "StringColumn":
        """Read ``size`` length-prefixed strings."""
        column = cls()
        column._pool = StringPool(size)
        for _ in range(size):
            data = reader.read_string()
            column._pool.allocate(len(data))[:] = data
        return column

    def sql_type(self) -> SqlType:
        return SqlType("String")

    def save(self, writer: ByteWriter, start: int, end: int) -> None:
        """Write the strings in ``[start, end)``."""
        for index in range(start, end):
            writer.write_string(self._pool.get(index))

    def __len__(self) -> int:
        return len(self._pool)

    def push(self, value: Text) -> None:
        """Append a string; text is encoded as UTF-8."""
        data = _encode(value)
        self._pool.allocate(len(data))[:] = data

    def at(self, index: int) -> bytes:
        return self._pool.get(index)

    def clone(self) -> "StringColumn":
        column = StringColumn()
        column._pool = StringPool.from_strings(self._pool.strings())
        return column