"""B-tree pages and the cells they hold."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .cell import Cell
from .record import Record, ValueKind
from .varint import BTREE_HEADER_SIZE, DB_HEADER_SIZE, FormatError, read_varint

_INTERIOR_HEADER_SIZE = 12
_U64_MASK = (1 << 64) - 1


class PageType(IntEnum):
    INTERIOR_INDEX = 2
    INTERIOR_TABLE = 5
    LEAF_INDEX = 10
    LEAF_TABLE = 13


@dataclass(frozen=True)
class IndexCell:
    key: str
    row_id: int


def _u16(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 2], "big")


def _u32(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 4], "big")


class Page:
    """The raw bytes of one b-tree page; page 1 starts after the file header."""

    def __init__(self, data: bytes, page_number: int) -> None:
        self.data = bytes(data)
        self.page_number = page_number
        self.header_offset = DB_HEADER_SIZE if page_number == 1 else 0

    def page_type(self) -> PageType:
        if self.header_offset >= len(self.data):
            raise FormatError("Page data too small for page header")
        raw = self.data[self.header_offset]
        try:
            return PageType(raw)
        except ValueError:
            raise FormatError(f"Unsupported page type {raw}") from None

    def cell_count(self) -> int:
        if self.header_offset + 5 > len(self.data):
            raise FormatError("Page data too small to contain B-tree header")
        return _u16(self.data, self.header_offset + 3)

    def _pointers(self, header_size: int) -> list[int]:
        start = self.header_offset + header_size
        end = start + 2 * self.cell_count()
        if end > len(self.data):
            raise FormatError("Page data too small to contain all cell pointers")
        return [_u16(self.data, position) for position in range(start, end, 2)]

    def cell_offsets(self) -> list[int]:
        """Offsets of the cells, read after an 8-byte b-tree header."""
        return self._pointers(BTREE_HEADER_SIZE)

    def cells(self) -> list[Cell]:
        return [Cell.from_bytes(self.data, offset) for offset in self.cell_offsets()]

    def rightmost_page(self) -> int:
        if self.header_offset + _INTERIOR_HEADER_SIZE > len(self.data):
            raise FormatError("Page data too small for interior page header")
        return _u32(self.data, self.header_offset + 8)

    def _page_number_at(self, offset: int) -> int | None:
        if offset + 4 > len(self.data):
            return None
        return _u32(self.data, offset)

    def child_pages(self) -> list[int]:
        """Child page numbers of an interior page, rightmost last."""
        pointers = self._pointers(_INTERIOR_HEADER_SIZE)
        rightmost = self.rightmost_page()
        children = [
            child
            for offset in pointers
            if (child := self._page_number_at(offset)) is not None
        ]
        children.append(rightmost)
        return children

    def index_cell(self, offset: int) -> IndexCell:
        """Decode an index cell (payload size, then a key and row id record)."""
        payload_size, read = read_varint(self.data, offset)
        start = offset + read
        end = start + payload_size
        if end > len(self.data):
            raise FormatError("Index cell payload extends beyond page")
        body = Record.from_bytes(self.data[start:end]).body
        if len(body) < 2:
            raise FormatError(f"Index cell has fewer than 2 fields: {len(body)}")
        first, second = body[0], body[1]
        key = first.value if first.kind is ValueKind.TEXT else first.display()
        if second.kind is not ValueKind.INT:
            raise FormatError("Index cell missing or invalid row ID")
        return IndexCell(key, second.value & _U64_MASK)

    def index_child_pages(self, search_value: str) -> list[int]:
        """Children of an interior index page that may hold ``search_value``."""
        self.cell_count()
        rightmost = self.rightmost_page()
        pointers = self._pointers(_INTERIOR_HEADER_SIZE)
        children = []
        for offset in pointers:
            child = self._page_number_at(offset)
            if child is None:
                continue
            try:
                cell = self.index_cell(offset)
            except FormatError:
                children.append(child)
                continue
            if search_value <= cell.key:
                children.append(child)
                return children
        children.append(rightmost)
        return children