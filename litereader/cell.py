"""Cells of table b-tree leaf pages."""

from __future__ import annotations

from dataclasses import dataclass

from .record import Record
from .varint import FormatError, read_varint


@dataclass
class Cell:
    """A table leaf cell: payload size, row id and the decoded record."""

    record_size: int
    row_id: int
    record: Record

    @classmethod
    def from_bytes(cls, data: bytes, offset: int) -> Cell:
        record_size, read = read_varint(data, offset)
        position = offset + read
        row_id, read = read_varint(data, position)
        position += read
        end = position + record_size
        if end > len(data):
            raise FormatError("Cell payload extends beyond page")
        return cls(record_size, row_id, Record.from_bytes(data[position:end]))