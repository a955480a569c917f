"""Columns of fixed-width numbers stored one after another."""

from __future__ import annotations

from typing import Iterable, List, Union

from chtypes.marshal import ByteReader, ByteWriter, ScalarType
from chtypes.sql_types import SqlType

Number = Union[int, float, bool]

_FLOAT_TYPES = frozenset({ScalarType.FLOAT32, ScalarType.FLOAT64})


class VectorColumn:
    """A column of fixed-width scalars of one ``ScalarType``."""

    def __init__(self, scalar_type: ScalarType, values: Iterable[Number] = ()) -> None:
        self._type = scalar_type
        self._data: List[Number] = []
        for value in values:
            self.push(value)

    @classmethod
    def load(cls, reader: ByteReader, scalar_type: ScalarType, size: int) -> "VectorColumn":
        """Read ``size`` consecutive values of ``scalar_type``."""
        step = scalar_type.size
        raw = reader.read_bytes(size * step)
        column = cls(scalar_type)
        column._data = [
            scalar_type.unmarshal(raw[offset:offset + step])
            for offset in range(0, len(raw), step)
        ]
        return column

    @property
    def scalar_type(self) -> ScalarType:
        return self._type

    def sql_type(self) -> SqlType:
        return self._type.sql_type

    def save(self, writer: ByteWriter, start: int, end: int) -> None:
        """Write the values in ``[start, end)``."""
        writer.write_bytes(b"".join(self._type.marshal(v) for v in self._data[start:end]))

    def __len__(self) -> int:
        return len(self._data)

    def _coerce(self, value: Number) -> Number:
        if isinstance(value, (str, bytes)) or not isinstance(value, (int, float)):
            raise TypeError(f"cannot store {type(value).__name__} in {self._type.name}")
        if isinstance(value, float) and self._type not in _FLOAT_TYPES:
            raise TypeError(f"cannot store a float in {self._type.name}")
        return self._type.unmarshal(self._type.marshal(value))

    def push(self, value: Number) -> None:
        """Append a value; TypeError for a wrong kind, OverflowError if out of range."""
        self._data.append(self._coerce(value))

    def at(self, index: int) -> Number:
        return self._data[index]

    def clone(self) -> "VectorColumn":
        column = VectorColumn(self._type)
        column._data = list(self._data)
        return column