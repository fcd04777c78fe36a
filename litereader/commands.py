"""Dot-commands and a small SELECT dialect run against a database file."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .database import Database, TableRows
from .record import RecordValue, ValueKind

_NULL = RecordValue(ValueKind.NULL)


class ComparisonOperator(Enum):
    EQUAL = "="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="


# Longer patterns first so that "!=" is never mistaken for "=".
_OPERATOR_PATTERNS = (
    (" != ", ComparisonOperator.NOT_EQUAL),
    ("!=", ComparisonOperator.NOT_EQUAL),
    (" = ", ComparisonOperator.EQUAL),
    ("=", ComparisonOperator.EQUAL),
)


def _is_number(text: str) -> bool:
    if not text or "_" in text:
        return False
    try:
        float(text)
    except ValueError:
        return False
    return True


def _parse_value(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    if _is_number(text):
        return text
    raise ValueError(
        f"String values must be quoted. Use 'value' or \"value\" instead of {text}"
    )


@dataclass(frozen=True)
class WhereCondition:
    """A single ``column <op> value`` condition."""

    column_name: str
    operator: ComparisonOperator
    value: str

    @classmethod
    def parse(cls, where_clause: str) -> WhereCondition:
        """Parse the text after WHERE; only ``=`` and ``!=`` are understood."""
        clause = where_clause.strip()
        for pattern, operator in _OPERATOR_PATTERNS:
            position = clause.find(pattern)
            if position >= 0:
                column_name = clause[:position].strip()
                value = _parse_value(clause[position + len(pattern) :])
                return cls(column_name, operator, value)
        raise ValueError(f"Unsupported WHERE clause format: {clause}")

    def matches(self, value: RecordValue) -> bool:
        """Compare the displayed form of ``value`` with the condition's value."""
        shown = value.display()
        if self.operator is ComparisonOperator.EQUAL:
            return shown == self.value
        if self.operator is ComparisonOperator.NOT_EQUAL:
            return shown != self.value
        return False


def _column_position(table_data: TableRows, name: str) -> int:
    wanted = name.lower()
    for position, column in enumerate(table_data.columns):
        if column.name.lower() == wanted:
            return position
    raise LookupError(f"Column '{name}' not found in table")


def parse_table_and_where(
    parts: Sequence[str],
) -> tuple[str, WhereCondition | None]:
    """Split the words after FROM into a table name and an optional condition."""
    if not parts:
        raise ValueError("Missing table name in SELECT query")
    lowered = [part.lower() for part in parts]
    if "where" not in lowered:
        return parts[0], None
    where_position = lowered.index("where")
    if where_position == 0:
        raise ValueError("Missing table name before WHERE clause")
    clause = " ".join(parts[where_position + 1 :])
    return parts[0], WhereCondition.parse(clause)


def apply_where_filter(table_data: TableRows, condition: WhereCondition) -> TableRows:
    """The rows of ``table_data`` that satisfy ``condition``."""
    position = _column_position(table_data, condition.column_name)
    rows = [
        row
        for row in table_data.rows
        if position < len(row.values) and condition.matches(row.values[position])
    ]
    return TableRows(list(table_data.columns), rows)


def extract_columns(
    table_data: TableRows, column_names: Sequence[str]
) -> list[list[RecordValue]]:
    """The named columns of every row, matched case-insensitively."""
    positions = [_column_position(table_data, name) for name in column_names]
    return [
        [
            row.values[position] if position < len(row.values) else _NULL
            for position in positions
        ]
        for row in table_data.rows
    ]


def format_table(table_data: TableRows) -> list[str]:
    """Header, separator and one line per row, fields joined by ``|``."""
    headers = [column.name for column in table_data.columns]
    separator = "|".join("-" * max(len(header), 10) for header in headers)
    lines = ["|".join(headers), separator]
    lines.extend(
        "|".join(value.display() for value in row.values) for row in table_data.rows
    )
    return lines


def _dbinfo(database_path: str) -> list[str]:
    with Database(database_path) as db:
        return [
            f"database page size: {db.page_size}",
            f"number of tables: {db.num_tables()}",
        ]


def _tables(database_path: str) -> list[str]:
    with Database(database_path) as db:
        return db.table_names()


def _schema(database_path: str) -> list[str]:
    with Database(database_path) as db:
        objects = db.schema_objects()
    lines = []
    for obj in objects:
        lines.append(
            f"{obj.object_type}: {obj.name} (table: {obj.tbl_name}, page: {obj.rootpage})"
        )
        if obj.sql is not None:
            lines.append(f"  SQL: {obj.sql}")
    return lines


def _select_count(database_path: str, words: list[str]) -> list[str]:
    if len(words) < 2 or words[1].lower() != "from":
        raise ValueError("Expected FROM after SELECT COUNT(*)")
    if len(words) < 3:
        raise ValueError("Missing table name in SELECT COUNT(*) FROM query")
    with Database(database_path) as db:
        return [str(db.count_table_rows(words[2]))]


def _select_all(database_path: str, words: list[str]) -> list[str]:
    if len(words) < 2 or words[1].lower() != "from":
        raise ValueError("Expected FROM after SELECT *")
    table_name, condition = parse_table_and_where(words[2:])
    with Database(database_path) as db:
        table_data = db.table_rows(table_name)
    if not table_data.columns:
        raise ValueError(f"Table {table_name} not found or has no columns")
    if condition is not None:
        table_data = apply_where_filter(table_data, condition)
    return format_table(table_data)


def _filtered_rows(
    db: Database, table_name: str, condition: WhereCondition | None
) -> TableRows:
    if condition is None:
        return db.table_rows(table_name)
    if condition.operator is ComparisonOperator.EQUAL:
        try:
            index = db.find_index_for_column(table_name, condition.column_name)
        except (ValueError, OSError):
            index = None
        if index is not None:
            row_ids = db.search_index(index, condition.value)
            return db.table_rows_by_ids(table_name, row_ids)
    return apply_where_filter(db.table_rows(table_name), condition)


def _select_columns(database_path: str, query: str) -> list[str]:
    from_position = query.lower().find(" from ")
    if from_position < 0:
        raise ValueError("Missing FROM clause in SELECT query")
    columns_text = query[:from_position].strip()
    rest = query[from_position + 6 :].strip()

    where_position = rest.lower().find(" where ")
    if where_position >= 0:
        table_name = rest[:where_position].strip()
        condition = WhereCondition.parse(rest[where_position + 7 :].strip())
    else:
        table_name, condition = rest, None

    column_names = [name.strip() for name in columns_text.split(",")]

    with Database(database_path) as db:
        table_data = _filtered_rows(db, table_name, condition)
    if not table_data.columns:
        raise ValueError(f"Table {table_name} not found or has no columns")

    lines = ["|".join(column_names)]
    lines.extend(
        "|".join(value.display() for value in row)
        for row in extract_columns(table_data, column_names)
    )
    return lines


def _select(database_path: str, query: str) -> list[str]:
    if not query.lower().startswith("select "):
        raise ValueError("Query must start with SELECT")
    rest = query[7:]
    lowered = rest.lower()
    if lowered.startswith("count(*)"):
        return _select_count(database_path, rest.split())
    if lowered.startswith("*"):
        return _select_all(database_path, rest.split())
    return _select_columns(database_path, rest)


def command_output(database_path: str, command: str) -> list[str]:
    """Run a dot-command or SELECT query and return its output lines."""
    if command == ".dbinfo":
        return _dbinfo(database_path)
    if command == ".tables":
        return _tables(database_path)
    if command == ".schema":
        return _schema(database_path)
    words = command.split()
    if not words or words[0].lower() != "select":
        raise ValueError(f"Unsupported SQL command: {command}")
    return _select(database_path, command)


def execute_command(database_path: str, command: str) -> None:
    """Run a command and print its output, one line at a time."""
    for line in command_output(database_path, command):
        print(line)