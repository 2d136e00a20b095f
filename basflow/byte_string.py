"""A mutable byte sequence with substring, replace and hashing helpers."""

from __future__ import annotations

from functools import total_ordering
from typing import Union

BytesLike = Union["ByteString", bytes, bytearray, memoryview, str]

_HASH_MASK = (1 << 64) - 1
_HASH_GOLDEN = 0x9E3779B9


def _as_bytes(data: object) -> bytes:
    """Convert supported inputs to an immutable ``bytes`` value."""
    if isinstance(data, ByteString):
        return bytes(data._buffer)
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, int):
        raise TypeError("an integer is not a byte sequence")
    try:
        return bytes(data)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise TypeError(f"cannot convert {type(data).__name__} to bytes") from exc


def _check_byte(value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError("a byte must be an integer")
    if not 0 <= value <= 0xFF:
        raise ValueError("a byte must be in range(0, 256)")
    return value


def _span(size: int, position: int, length: int | None) -> tuple[int, int] | None:
    """Return a valid (position, length) pair, or None when the span is out of range."""
    if position < 0:
        return None
    if length is None:
        if position >= size:
            return None
        length = size - position
    if length <= 0 or length > size or position >= size or position + length > size:
        return None
    return position, length


@total_ordering
class ByteString:
    """A growable string of bytes."""

    __slots__ = ("_buffer",)

    def __init__(self, data: BytesLike | None = None) -> None:
        self._buffer = bytearray() if data is None else bytearray(_as_bytes(data))

    def assign(self, data: BytesLike) -> ByteString:
        """Replace the whole content with ``data``."""
        self._buffer[:] = _as_bytes(data)
        return self

    def append(self, data: BytesLike | int) -> ByteString:
        """Append ``data``; an integer appends a single byte."""
        if isinstance(data, int) and not isinstance(data, bool):
            self._buffer.append(_check_byte(data))
        else:
            self._buffer.extend(_as_bytes(data))
        return self

    def fill(self, byte: int) -> None:
        """Set every byte of the content to ``byte``."""
        self._buffer[:] = bytes([_check_byte(byte)]) * len(self._buffer)

    def clear(self) -> None:
        """Remove all bytes."""
        self._buffer.clear()

    def substr(self, position: int = 0, length: int | None = None) -> ByteString:
        """Return a copy of part of the content; an invalid span gives an empty result."""
        span = _span(len(self._buffer), position, length)
        if span is None:
            return ByteString()
        start, count = span
        return ByteString(self._buffer[start:start + count])

    def replace(self, position: int, length: int | None, other: BytesLike) -> ByteString:
        """Replace a section with ``other``; an invalid span leaves the content unchanged."""
        replacement = _as_bytes(other)
        span = _span(len(self._buffer), position, length)
        if span is not None:
            start, count = span
            self._buffer[start:start + count] = replacement
        return self

    def erase(self, position: int = 0, length: int | None = None) -> ByteString:
        """Remove a section of the content."""
        return self.replace(position, length, b"")

    def hash_value(self) -> int:
        """Return a 64-bit hash combining every byte in order."""
        seed = 0
        for byte in self._buffer:
            seed ^= (byte + _HASH_GOLDEN + (seed << 6) + (seed >> 2)) & _HASH_MASK
            seed &= _HASH_MASK
        return seed

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self):
        return iter(self._buffer)

    def __getitem__(self, position):
        if isinstance(position, slice):
            return ByteString(self._buffer[position])
        return self._buffer[position]

    def __setitem__(self, position, value) -> None:
        if isinstance(position, slice):
            self._buffer[position] = _as_bytes(value)
        else:
            self._buffer[position] = _check_byte(value)

    def __bytes__(self) -> bytes:
        return bytes(self._buffer)

    def __add__(self, other: object) -> ByteString:
        try:
            tail = _as_bytes(other)
        except TypeError:
            return NotImplemented
        return ByteString(self._buffer + tail)

    def __radd__(self, other: object) -> ByteString:
        try:
            head = _as_bytes(other)
        except TypeError:
            return NotImplemented
        return ByteString(head + self._buffer)

    def __iadd__(self, other: object) -> ByteString:
        try:
            tail = _as_bytes(other)
        except TypeError:
            return NotImplemented
        self._buffer.extend(tail)
        return self

    @staticmethod
    def _comparable(other: object) -> bytes | None:
        if isinstance(other, ByteString):
            return bytes(other._buffer)
        if isinstance(other, (bytes, bytearray, memoryview)):
            return bytes(other)
        return None

    def __eq__(self, other: object) -> bool:
        value = self._comparable(other)
        if value is None:
            return NotImplemented
        return bytes(self._buffer) == value

    def __lt__(self, other: object) -> bool:
        value = self._comparable(other)
        if value is None:
            return NotImplemented
        return bytes(self._buffer) < value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ByteString({bytes(self._buffer)!r})"