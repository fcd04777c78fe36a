"""Read-only access to tables and indexes of an SQLite database file."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import BinaryIO

from .cell import Cell
from .pages import Page, PageType
from .record import Record, RecordValue, ValueKind
from .schema import ColumnInfo, TableSchema
from .varint import DB_HEADER_SIZE, FormatError

_NULL = RecordValue(ValueKind.NULL)


def _as_signed(number: int) -> int:
    """Reinterpret an unsigned 64-bit row id as a signed integer."""
    return number - (1 << 64) if number >= 1 << 63 else number


def _text_at(record: Record, index: int) -> str | None:
    if index < len(record.body) and record.body[index].kind is ValueKind.TEXT:
        return record.body[index].value
    return None


@dataclass(frozen=True)
class SchemaObject:
    """One row of the schema table: a table, index, view or trigger."""

    object_type: str
    name: str
    tbl_name: str
    rootpage: int
    sql: str | None = None

    @classmethod
    def from_record(cls, record: Record) -> SchemaObject | None:
        """Build from a schema record, or return None if it does not fit."""
        body = record.body
        if len(body) < 4:
            return None
        object_type = _text_at(record, 0)
        name = _text_at(record, 1)
        tbl_name = _text_at(record, 2)
        if object_type is None or name is None or tbl_name is None:
            return None
        if body[3].kind is not ValueKind.INT:
            return None
        return cls(object_type, name, tbl_name, body[3].value, _text_at(record, 4))


@dataclass
class TableRow:
    row_id: int
    values: list[RecordValue] = field(default_factory=list)


@dataclass
class TableRows:
    columns: list[ColumnInfo] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)


def _column_positions(
    columns: Sequence[ColumnInfo], names: Sequence[str], table_name: str
) -> list[int]:
    lowered = [column.name.lower() for column in columns]
    positions = []
    for name in names:
        try:
            positions.append(lowered.index(name.lower()))
        except ValueError:
            raise LookupError(
                f"Column '{name}' not found in table '{table_name}'"
            ) from None
    return positions


class Database:
    """An open database file; pages are read on demand."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._file: BinaryIO = open(path, "rb")
        try:
            header = self._file.read(DB_HEADER_SIZE)
            if len(header) < DB_HEADER_SIZE:
                raise FormatError("File too small to contain database header")
        except BaseException:
            self._file.close()
            raise
        self.page_size = int.from_bytes(header[16:18], "big")

    def close(self) -> None:
        self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _page(self, page_number: int) -> Page:
        if page_number < 1:
            raise FormatError(f"Invalid page number {page_number}")
        self._file.seek((page_number - 1) * self.page_size)
        data = self._file.read(self.page_size)
        if len(data) < self.page_size:
            raise FormatError(f"Page {page_number} extends beyond end of file")
        return Page(data, page_number)

    def read_page(self, page_number: int) -> list[Cell]:
        """Decode the cells of a table leaf page."""
        return self._page(page_number).cells()

    def find_table_info(self, table_name: str) -> Cell:
        """The schema cell describing ``table_name``."""
        for cell in self.read_page(1):
            if cell.record.table_name() == table_name:
                return cell
        raise LookupError(f"Table {table_name} not found")

    def _columns_of(self, table_name: str, info: Cell) -> list[ColumnInfo]:
        sql = info.record.sql_schema()
        if sql is None:
            raise FormatError(f"No SQL schema found for table {table_name}")
        return TableSchema.from_create_sql(sql).columns

    def col_names(self, table_name: str) -> list[ColumnInfo]:
        return self._columns_of(table_name, self.find_table_info(table_name))

    def _iter_table_cells(self, page_number: int) -> Iterator[Cell]:
        page = self._page(page_number)
        kind = page.page_type()
        if kind is PageType.LEAF_TABLE:
            yield from page.cells()
        elif kind is PageType.INTERIOR_TABLE:
            for child in page.child_pages():
                yield from self._iter_table_cells(child)
        else:
            raise FormatError(f"Unsupported page type {int(kind)} for table data")

    def count_table_rows(self, table_name: str) -> int:
        root = self.find_table_info(table_name).record.page_number()
        return sum(1 for _ in self._iter_table_cells(root))

    def table_names(self) -> list[str]:
        return [
            name
            for cell in self.read_page(1)
            if (name := cell.record.table_name()) is not None
        ]

    def schema_objects(self) -> list[SchemaObject]:
        """All tables, indexes and other objects listed on the schema page."""
        return [
            obj
            for cell in self.read_page(1)
            if (obj := SchemaObject.from_record(cell.record)) is not None
        ]

    def find_index_for_column(
        self, table_name: str, column_name: str
    ) -> SchemaObject | None:
        """An index on ``table_name`` whose definition covers ``column_name``."""
        needle = f"on {table_name} ({column_name})"
        for obj in self.schema_objects():
            if (
                obj.object_type == "index"
                and obj.tbl_name == table_name
                and obj.sql is not None
                and needle in obj.sql.lower()
            ):
                return obj
        return None

    def _traverse_index(self, page_number: int, search_value: str) -> Iterator[int]:
        page = self._page(page_number)
        kind = page.page_type()
        if kind is PageType.LEAF_INDEX:
            for offset in page.cell_offsets():
                try:
                    cell = page.index_cell(offset)
                except FormatError:
                    continue
                if cell.key == search_value:
                    yield cell.row_id
        elif kind is PageType.INTERIOR_INDEX:
            for child in page.index_child_pages(search_value):
                yield from self._traverse_index(child, search_value)
        else:
            raise FormatError(f"Unsupported page type {int(kind)} for index search")

    def search_index(self, index: SchemaObject, search_value: str) -> list[int]:
        """Row ids of the index entries whose key equals ``search_value``."""
        return list(self._traverse_index(index.rootpage, search_value))

    def num_tables(self) -> int:
        """Number of cells on the schema page."""
        return self._page(1).cell_count()

    @staticmethod
    def _make_row(cell: Cell, columns: Sequence[ColumnInfo]) -> TableRow:
        body = cell.record.body
        values = [
            RecordValue(ValueKind.INT, _as_signed(cell.row_id))
            if column.is_primary_key
            else (body[position] if position < len(body) else _NULL)
            for position, column in enumerate(columns)
        ]
        return TableRow(cell.row_id, values)

    def table_rows(self, table_name: str) -> TableRows:
        """Every row of a table, in row id order, with its columns."""
        info = self.find_table_info(table_name)
        columns = self._columns_of(table_name, info)
        root = info.record.page_number()
        rows = [self._make_row(cell, columns) for cell in self._iter_table_cells(root)]
        return TableRows(columns, rows)

    def column_values(
        self, table_name: str, column_names: Sequence[str]
    ) -> list[list[RecordValue]]:
        """The named columns of every row; names match case-insensitively."""
        table = self.table_rows(table_name)
        positions = _column_positions(table.columns, column_names, table_name)
        return [
            [
                row.values[position] if position < len(row.values) else _NULL
                for position in positions
            ]
            for row in table.rows
        ]

    def table_rows_by_ids(self, table_name: str, row_ids: Sequence[int]) -> TableRows:
        """The rows with the given ids, in the given order; missing ids are skipped."""
        columns = self.col_names(table_name)
        rows = [
            row
            for row_id in row_ids
            if (row := self.table_row_by_id(table_name, row_id)) is not None
        ]
        return TableRows(columns, rows)

    def table_row_by_id(self, table_name: str, row_id: int) -> TableRow | None:
        info = self.find_table_info(table_name)
        columns = self._columns_of(table_name, info)
        root = info.record.page_number()
        for cell in self._iter_table_cells(root):
            if cell.row_id == row_id:
                return self._make_row(cell, columns)
        return None