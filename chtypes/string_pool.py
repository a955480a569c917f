"""Byte strings packed into large shared chunks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Union

AVG_STR_SIZE = 80


@dataclass(frozen=True)
class _StringPtr:
    chunk: int
    shift: int
    length: int


class StringPool:
    """Append-only store of byte strings kept in a few large chunks."""

    def __init__(self, capacity: int = 0) -> None:
        self._capacity = capacity
        self._chunks: List[bytearray] = []
        self._pointers: List[_StringPtr] = []
        self._position = 0

    @classmethod
    def from_strings(cls, items: Iterable[Union[str, bytes]]) -> "StringPool":
        """A pool holding ``items`` in order; text is encoded as UTF-8."""
        encoded = [s.encode("utf-8") if isinstance(s, str) else bytes(s) for s in items]
        pool = cls(len(encoded))
        for data in encoded:
            pool.allocate(len(data))[:] = data
        return pool

    def _free_space(self) -> int:
        if not self._chunks:
            return 0
        return len(self._chunks[-1]) - self._position

    def _reserve(self, size: int) -> None:
        self._position = 0
        self._chunks.append(bytearray(max(self._capacity * AVG_STR_SIZE, size)))

    def allocate(self, size: int) -> memoryview:
        """Add a zero-filled string of ``size`` bytes and return it for writing."""
        if size < 0:
            raise ValueError("size cannot be negative")
        if not self._chunks or self._free_space() < size:
            self._reserve(size)
        chunk = len(self._chunks) - 1
        shift = self._position
        self._position += size
        self._pointers.append(_StringPtr(chunk, shift, size))
        return memoryview(self._chunks[chunk])[shift:shift + size]

    def get(self, index: int) -> bytes:
        pointer = self._pointers[index]
        return bytes(self._chunks[pointer.chunk][pointer.shift:pointer.shift + pointer.length])

    def __len__(self) -> int:
        return len(self._pointers)

    def strings(self) -> Iterator[bytes]:
        """All strings in insertion order."""
        for index in range(len(self._pointers)):
            yield self.get(index)