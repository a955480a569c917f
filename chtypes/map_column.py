"""Map columns: per-row key/value pairs stored as two flat columns plus offsets."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Union

from chtypes.marshal import ByteReader, ByteWriter, ScalarType
from chtypes.nullable import NullableColumn
from chtypes.numeric import VectorColumn
from chtypes.sql_types import SqlType
from chtypes.string_column import StringColumn

Loader = Callable[[ByteReader, int], Any]


def _column_for(sql_type: SqlType) -> Any:
    if sql_type.name == "String":
        return StringColumn()
    if sql_type.name == "Nullable":
        return NullableColumn(_column_for(sql_type.inner))
    if sql_type.name == "Map":
        return MapColumn(_column_for(sql_type.key), _column_for(sql_type.value))
    for scalar in ScalarType:
        if scalar.sql_type.name == sql_type.name:
            return VectorColumn(scalar)
    raise TypeError(f"no column for {sql_type}")


def _empty_column(source: Union[SqlType, Any]) -> Any:
    if isinstance(source, SqlType):
        return _column_for(source)
    if len(source) != 0:
        raise ValueError("the key and value columns must start empty")
    return source


class MapColumn:
    """Rows of mappings; row ``i`` spans ``offsets[i-1]:offsets[i]`` of keys and values."""

    def __init__(self, keys: Any, values: Any, offsets: Iterable[int] = ()) -> None:
        self.keys = keys
        self.values = values
        self._offsets: List[int] = [int(o) for o in offsets]
        if len(keys) != len(values):
            raise ValueError("key and value columns differ in length")
        previous = 0
        for offset in self._offsets:
            if offset < previous:
                raise ValueError("offsets must not decrease")
            previous = offset
        if previous > len(keys):
            raise ValueError("offsets point past the end of the key column")

    @property
    def offsets(self) -> List[int]:
        return list(self._offsets)

    @classmethod
    def from_dicts(
        cls,
        keys: Union[SqlType, Any],
        values: Union[SqlType, Any],
        rows: Iterable[Mapping[Any, Any]],
    ) -> "MapColumn":
        """A column holding ``rows``.

        ``keys`` and ``values`` are each either a SqlType or an empty column
        that will store the keys and the values.
        """
        column = cls(_empty_column(keys), _empty_column(values))
        for row in rows:
            column.push(row)
        return column

    @classmethod
    def load(
        cls,
        reader: ByteReader,
        key_loader: Loader,
        value_loader: Loader,
        rows: int,
    ) -> "MapColumn":
        """Read ``rows`` offsets, then the keys and the values they cover."""
        offsets = [int(reader.read_scalar(ScalarType.UINT64)) for _ in range(rows)]
        size = offsets[-1] if offsets else 0
        keys = key_loader(reader, size)
        values = value_loader(reader, size)
        return cls(keys, values, offsets)

    def sql_type(self) -> SqlType:
        return SqlType("Map", key=self.keys.sql_type(), value=self.values.sql_type())

    def save(self, writer: ByteWriter, start: int, end: int) -> None:
        """Write the offsets of rows ``[start, end)``, then keys and values up to the last."""
        offset = 0
        for offset in self._offsets[start:end]:
            writer.write_scalar(ScalarType.UINT64, offset)
        self.keys.save(writer, 0, offset)
        self.values.save(writer, 0, offset)

    def __len__(self) -> int:
        return len(self._offsets)

    def push(self, value: Mapping[Any, Any]) -> None:
        """Append one row; TypeError unless ``value`` is a mapping."""
        if not isinstance(value, Mapping):
            raise TypeError("value should be a map")
        previous = self._offsets[-1] if self._offsets else 0
        self._offsets.append(previous + len(value))
        for key, item in value.items():
            self.keys.push(key)
            self.values.push(item)

    def at(self, index: int) -> Dict[Any, Any]:
        end = self._offsets[index]
        start = self._offsets[index - 1] if index > 0 else 0
        return {self.keys.at(i): self.values.at(i) for i in range(start, end)}

    def clone(self) -> "MapColumn":
        return MapColumn(self.keys.clone(), self.values.clone(), self._offsets)