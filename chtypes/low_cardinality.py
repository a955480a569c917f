"""LowCardinality columns: a dictionary of distinct values plus per-row keys."""

from __future__ import annotations

import enum
from typing import Any, Callable, Dict, Iterable, Optional, Union

from chtypes.marshal import ByteReader, ByteWriter, ScalarType
from chtypes.numeric import VectorColumn
from chtypes.sql_types import SqlType
from chtypes.string_column import StringColumn

NEED_GLOBAL_DICTIONARY_BIT = 1 << 8
HAS_ADDITIONAL_KEYS_BIT = 1 << 9
NEED_UPDATE_DICTIONARY_BIT = 1 << 10

LOW_CARDINALITY_VERSION = 1
INDEX_TYPE_MASK = 0xFF


class IndexType(enum.Enum):
    """Width of the keys that point into the dictionary."""

    UINT8 = 0
    UINT16 = 1
    UINT32 = 2
    UINT64 = 3

    @classmethod
    def from_flags(cls, flags: int) -> "IndexType":
        """The key width encoded in the low byte of ``flags``."""
        try:
            return cls(flags & INDEX_TYPE_MASK)
        except ValueError:
            raise ValueError("Invalid index serialization version value") from None

    @property
    def scalar_type(self) -> ScalarType:
        return _SCALARS[self]

    @property
    def max_len(self) -> int:
        return (1 << (8 * self.scalar_type.size)) - 1

    def widened(self) -> "IndexType":
        """The next wider key type; OverflowError past 64 bits."""
        if self is IndexType.UINT64:
            raise OverflowError("LowCardinality index cannot grow past UInt64")
        return IndexType(self.value + 1)


_SCALARS = {
    IndexType.UINT8: ScalarType.UINT8,
    IndexType.UINT16: ScalarType.UINT16,
    IndexType.UINT32: ScalarType.UINT32,
    IndexType.UINT64: ScalarType.UINT64,
}


class LowCardinalityIndex:
    """Per-row dictionary positions, widened automatically as rows are added."""

    def __init__(self, index_type: IndexType = IndexType.UINT8, values: Iterable[int] = ()) -> None:
        self._type = index_type
        self._data = VectorColumn(index_type.scalar_type, values)

    @property
    def index_type(self) -> IndexType:
        return self._type

    def flags(self) -> int:
        """The serialization flags written ahead of the keys."""
        return self._type.value | HAS_ADDITIONAL_KEYS_BIT | NEED_UPDATE_DICTIONARY_BIT

    @classmethod
    def load(cls, reader: ByteReader, size: int, index_type: IndexType) -> "LowCardinalityIndex":
        index = cls(index_type)
        index._data = VectorColumn.load(reader, index_type.scalar_type, size)
        return index

    def __len__(self) -> int:
        return len(self._data)

    def get(self, index: int) -> int:
        return int(self._data.at(index))

    def _widen(self) -> None:
        wider = self._type.widened()
        self._data = VectorColumn(wider.scalar_type, (self._data.at(i) for i in range(len(self._data))))
        self._type = wider

    def push(self, value: int) -> None:
        """Append a dictionary position, switching to wider keys when needed."""
        if value < 0:
            raise ValueError("a dictionary position cannot be negative")
        while len(self) + 1 > self._type.max_len or value > self._type.max_len:
            self._widen()
        self._data.push(value)

    def save(self, writer: ByteWriter, start: int, end: int) -> None:
        self._data.save(writer, start, end)

    def clone(self) -> "LowCardinalityIndex":
        index = LowCardinalityIndex(self._type)
        index._data = self._data.clone()
        return index


def _key(value: Any) -> Any:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


def _column_for(sql_type: SqlType) -> Any:
    if sql_type.name == "String":
        return StringColumn()
    for scalar in ScalarType:
        if scalar.value[0] == sql_type.name:
            return VectorColumn(scalar)
    raise TypeError(f"no dictionary column for {sql_type}")


def _read_u64(reader: ByteReader) -> int:
    return int(reader.read_scalar(ScalarType.UINT64))


class LowCardinalityColumn:
    """Distinct values kept once in ``inner``; rows hold positions into it."""

    def __init__(self, inner: Any, index: Optional[LowCardinalityIndex] = None) -> None:
        self.inner = inner
        self.index = LowCardinalityIndex() if index is None else index
        self._value_map: Optional[Dict[Any, int]] = None

    @classmethod
    def empty(cls, inner: Union[SqlType, Any]) -> "LowCardinalityColumn":
        """An empty column over a dictionary of type ``inner``.

        ``inner`` is either a String or fixed-width scalar SqlType, or an
        empty column to use as the dictionary.
        """
        if isinstance(inner, SqlType):
            inner = _column_for(inner)
        elif len(inner) != 0:
            raise ValueError("the dictionary column must be empty")
        return cls(inner)

    @classmethod
    def load(
        cls,
        reader: ByteReader,
        inner_loader: Callable[[ByteReader, int], Any],
        size: int,
    ) -> "LowCardinalityColumn":
        """Read ``size`` rows; ``inner_loader(reader, n)`` reads the dictionary."""
        if size == 0:
            inner = inner_loader(reader, 0)
            return cls(inner, LowCardinalityIndex.load(reader, 0, IndexType.UINT8))

        version = _read_u64(reader)
        if version != LOW_CARDINALITY_VERSION:
            raise ValueError("Invalid low cardinality version")
        flags = _read_u64(reader)
        index_type = IndexType.from_flags(flags)
        if flags & NEED_GLOBAL_DICTIONARY_BIT:
            raise ValueError("Global dictionary is not supported.")
        if not flags & HAS_ADDITIONAL_KEYS_BIT:
            raise ValueError("HasAdditionalKeysBit is missing.")

        dictionary_size = _read_u64(reader)
        inner = inner_loader(reader, dictionary_size)
        keys_rows = _read_u64(reader)
        keys = LowCardinalityIndex.load(reader, keys_rows, index_type)
        if flags != keys.flags():
            raise ValueError(f"unexpected low cardinality flags: {flags:#x}")
        return cls(inner, keys)

    def sql_type(self) -> SqlType:
        return SqlType("LowCardinality", inner=self.inner.sql_type())

    def save(self, writer: ByteWriter, start: int, end: int) -> None:
        """Write the whole dictionary and the keys of rows ``[start, end)``."""
        if start == end:
            return
        writer.write_scalar(ScalarType.UINT64, LOW_CARDINALITY_VERSION)
        writer.write_scalar(ScalarType.UINT64, self.index.flags())
        writer.write_scalar(ScalarType.UINT64, len(self.inner))
        self.inner.save(writer, 0, len(self.inner))
        writer.write_scalar(ScalarType.UINT64, end - start)
        self.index.save(writer, start, end)

    def __len__(self) -> int:
        return len(self.index)

    def _build_value_map(self) -> Dict[Any, int]:
        mapping: Dict[Any, int] = {}
        for row in range(len(self.index)):
            position = self.index.get(row)
            mapping[_key(self.inner.at(position))] = position
        return mapping

    def push(self, value: Any) -> None:
        """Append a row, adding ``value`` to the dictionary if it is new."""
        if self._value_map is None:
            self._value_map = self._build_value_map()
        key = _key(value)
        position = self._value_map.get(key)
        if position is None:
            position = len(self.inner)
            self.inner.push(value)
            self._value_map[key] = position
        self.index.push(position)

    def at(self, index: int) -> Any:
        return self.inner.at(self.index.get(index))

    def clone(self) -> "LowCardinalityColumn":
        return LowCardinalityColumn(self.inner.clone(), self.index.clone())