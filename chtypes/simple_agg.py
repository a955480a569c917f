"""Columns of ``SimpleAggregateFunction`` type: an inner column tagged with a function."""

from __future__ import annotations

from typing import Any, Callable

from chtypes.marshal import ByteReader, ByteWriter
from chtypes.sql_types import SimpleAggFunc, SqlType


class SimpleAggregateFunctionColumn:
    """Stores and encodes exactly like its inner column."""

    def __init__(self, inner: Any, func: SimpleAggFunc) -> None:
        self.inner = inner
        self.func = func

    @classmethod
    def load(
        cls,
        reader: ByteReader,
        func: SimpleAggFunc,
        inner_loader: Callable[[ByteReader, int], Any],
        size: int,
    ) -> "SimpleAggregateFunctionColumn":
        return cls(inner_loader(reader, size), func)

    def sql_type(self) -> SqlType:
        return SqlType("SimpleAggregateFunction", func=self.func, inner=self.inner.sql_type())

    def save(self, writer: ByteWriter, start: int, end: int) -> None:
        self.inner.save(writer, start, end)

    def __len__(self) -> int:
        return len(self.inner)

    def push(self, value: Any) -> None:
        self.inner.push(value)

    def at(self, index: int) -> Any:
        return self.inner.at(index)

    def clone(self) -> "SimpleAggregateFunctionColumn":
        return SimpleAggregateFunctionColumn(self.inner.clone(), self.func)