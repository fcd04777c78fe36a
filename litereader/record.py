"""Records: the serialized rows stored in b-tree cells."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .varint import FormatError, read_varint

_INT_SIZES = {1: 1, 2: 2, 3: 3, 4: 4, 5: 6, 6: 8}


class ValueKind(Enum):
    NULL = "null"
    INT = "int"
    FLOAT = "float"
    ZERO = "zero"
    ONE = "one"
    BLOB = "blob"
    TEXT = "text"
    RESERVED = "reserved"


def _take(data: bytes, offset: int, size: int, what: str) -> bytes:
    if offset + size > len(data):
        raise FormatError(f"Not enough data for {what}")
    return bytes(data[offset : offset + size])


def _format_float(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    text = f"{Decimal(repr(number)):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class RecordValue:
    """One column value of a record."""

    kind: ValueKind
    value: object = None

    @classmethod
    def from_serial_type(
        cls, serial_type: int, data: bytes, offset: int
    ) -> tuple[RecordValue, int]:
        """Decode a value of the given serial type; return it and its size."""
        if serial_type == 0:
            return cls(ValueKind.NULL), 0
        if serial_type in _INT_SIZES:
            size = _INT_SIZES[serial_type]
            raw = _take(data, offset, size, f"integer of size {size}")
            return cls(ValueKind.INT, int.from_bytes(raw, "big", signed=True)), size
        if serial_type == 7:
            raw = _take(data, offset, 8, "float")
            return cls(ValueKind.FLOAT, struct.unpack(">d", raw)[0]), 8
        if serial_type == 8:
            return cls(ValueKind.ZERO), 0
        if serial_type == 9:
            return cls(ValueKind.ONE), 0
        if serial_type in (10, 11):
            return cls(ValueKind.RESERVED, serial_type), 0
        if serial_type >= 12 and serial_type % 2 == 0:
            size = (serial_type - 12) // 2
            return cls(ValueKind.BLOB, _take(data, offset, size, "blob")), size
        if serial_type >= 13:
            size = (serial_type - 13) // 2
            raw = _take(data, offset, size, "text")
            return cls(ValueKind.TEXT, raw.decode("utf-8", errors="replace")), size
        raise FormatError(f"Invalid column type: {serial_type}")

    def display(self) -> str:
        """Render the value the way query output shows it."""
        kind = self.kind
        if kind is ValueKind.NULL:
            return "NULL"
        if kind is ValueKind.INT:
            return str(self.value)
        if kind is ValueKind.FLOAT:
            return _format_float(self.value)
        if kind is ValueKind.ZERO:
            return "0"
        if kind is ValueKind.ONE:
            return "1"
        if kind is ValueKind.TEXT:
            return self.value
        if kind is ValueKind.BLOB:
            return f"<BLOB {len(self.value)} bytes>"
        return f"<RESERVED {self.value}>"


@dataclass
class RecordHeader:
    """Header size and serial types of a record."""

    size: int
    column_types: list[int] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> RecordHeader:
        size, position = read_varint(data, 0)
        column_types = []
        while position < size:
            serial_type, read = read_varint(data, position)
            position += read
            column_types.append(serial_type)
        return cls(size, column_types)


@dataclass
class Record:
    """A decoded record: its header and column values."""

    header: RecordHeader
    body: list[RecordValue] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> Record:
        header = RecordHeader.from_bytes(data)
        offset = header.size
        body = []
        for serial_type in header.column_types:
            value, read = RecordValue.from_serial_type(serial_type, data, offset)
            body.append(value)
            offset += read
        return cls(header, body)

    def _text(self, index: int) -> str | None:
        if index < len(self.body) and self.body[index].kind is ValueKind.TEXT:
            return self.body[index].value
        return None

    def table_name(self) -> str | None:
        """The table name if this is a schema record of type ``table``."""
        if self._text(0) == "table":
            return self._text(2)
        return None

    def sql_schema(self) -> str | None:
        """The CREATE statement stored in a schema record."""
        return self._text(4)

    def page_number(self) -> int:
        """The root page of the object described by a schema record."""
        if len(self.body) > 3 and self.body[3].kind is ValueKind.INT:
            return self.body[3].value
        raise FormatError("Invalid or missing page number in record")