"""Variable-length integers as stored in SQLite database files."""

from __future__ import annotations

DB_HEADER_SIZE = 100
BTREE_HEADER_SIZE = 8

_MAX_VARINT_BYTES = 9


class FormatError(ValueError):
    """Raised when database bytes do not have the expected layout."""


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Decode a big-endian varint at ``offset``.

    Returns ``(value, bytes_read)``. A varint is at most nine bytes long; the
    ninth byte contributes all eight of its bits.
    """
    value = 0
    for index in range(_MAX_VARINT_BYTES):
        position = offset + index
        if position >= len(data):
            raise FormatError(f"Not enough data to read varint at offset {offset}")
        byte = data[position]
        if index == _MAX_VARINT_BYTES - 1:
            return (value << 8) | byte, index + 1
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, index + 1
    raise AssertionError("unreachable")