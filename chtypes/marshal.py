"""Fixed-width scalars in little-endian form, and byte stream helpers."""

from __future__ import annotations

import enum
import struct
from typing import Union

from chtypes.sql_types import SqlType


class ScalarType(enum.Enum):
    """Fixed-width column element types: (SQL name, byte size, kind)."""

    UINT8 = ("UInt8", 1, "u")
    UINT16 = ("UInt16", 2, "u")
    UINT32 = ("UInt32", 4, "u")
    UINT64 = ("UInt64", 8, "u")
    UINT128 = ("UInt128", 16, "u")
    INT8 = ("Int8", 1, "i")
    INT16 = ("Int16", 2, "i")
    INT32 = ("Int32", 4, "i")
    INT64 = ("Int64", 8, "i")
    INT128 = ("Int128", 16, "i")
    FLOAT32 = ("Float32", 4, "f")
    FLOAT64 = ("Float64", 8, "f")
    BOOL = ("Bool", 1, "b")

    @property
    def size(self) -> int:
        return self.value[1]

    @property
    def sql_type(self) -> SqlType:
        return SqlType(self.value[0])

    @property
    def _kind(self) -> str:
        return self.value[2]

    @property
    def _float_format(self) -> str:
        return "<f" if self.size == 4 else "<d"

    def marshal(self, value: Union[int, float, bool]) -> bytes:
        """Encode ``value``; OverflowError if it does not fit."""
        kind = self._kind
        if kind == "b":
            return bytes([1 if value else 0])
        if kind == "f":
            return struct.pack(self._float_format, value)
        return int(value).to_bytes(self.size, "little", signed=kind == "i")

    def unmarshal(self, data: bytes) -> Union[int, float, bool]:
        """Decode exactly ``size`` bytes."""
        if len(data) != self.size:
            raise ValueError(f"{self.name} needs {self.size} bytes, got {len(data)}")
        kind = self._kind
        if kind == "b":
            return data[0] != 0
        if kind == "f":
            return struct.unpack(self._float_format, bytes(data))[0]
        return int.from_bytes(data, "little", signed=kind == "i")


class ByteWriter:
    """Accumulates encoded data."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_scalar(self, scalar_type: ScalarType, value: Union[int, float, bool]) -> None:
        self._buffer += scalar_type.marshal(value)

    def write_bytes(self, data: bytes) -> None:
        self._buffer += data

    def _write_uvarint(self, number: int) -> None:
        if number < 0:
            raise ValueError("a length cannot be negative")
        while True:
            byte = number & 0x7F
            number >>= 7
            if number:
                self._buffer.append(byte | 0x80)
            else:
                self._buffer.append(byte)
                return

    def write_string(self, data: Union[str, bytes]) -> None:
        """Write a length-prefixed string; text is encoded as UTF-8."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._write_uvarint(len(data))
        self._buffer += data

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class ByteReader:
    """Reads encoded data from a bytes object; EOFError when it runs out."""

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(bytes(data))
        self._position = 0

    def read_bytes(self, size: int) -> bytes:
        end = self._position + size
        if size < 0 or end > len(self._data):
            raise EOFError(f"wanted {size} bytes, {len(self._data) - self._position} left")
        chunk = bytes(self._data[self._position:end])
        self._position = end
        return chunk

    def read_scalar(self, scalar_type: ScalarType) -> Union[int, float, bool]:
        return scalar_type.unmarshal(self.read_bytes(scalar_type.size))

    def _read_uvarint(self) -> int:
        number = 0
        for shift in range(0, 70, 7):
            byte = self.read_bytes(1)[0]
            number |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return number
        raise ValueError("varint is too long")

    def read_string(self) -> bytes:
        """Read a length-prefixed string as raw bytes."""
        return self.read_bytes(self._read_uvarint())