"""State and actions of the interactive database browser."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

from .commands import (
    apply_where_filter,
    command_output,
    extract_columns,
    parse_table_and_where,
)
from .database import Database, TableRows

_HISTORY_LIMIT = 50
_FAST_SCROLL = 10
_QUERY_ERRORS = (ValueError, LookupError, OSError)


class AppMode(Enum):
    TABLES = "tables"
    QUERY = "query"
    SCHEMA = "schema"


class InputMode(Enum):
    NORMAL = "normal"
    EDITING = "editing"


class StatusLevel(Enum):
    """How a status message is shown: success, notice or failure."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class TextResult:
    text: str


@dataclass(frozen=True)
class TableResult:
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


QueryResult = TextResult | TableResult


@dataclass(frozen=True)
class QueryHistory:
    query: str
    result: QueryResult
    timestamp: float


_NEXT_MODE = {
    AppMode.TABLES: AppMode.QUERY,
    AppMode.QUERY: AppMode.SCHEMA,
    AppMode.SCHEMA: AppMode.TABLES,
}
_PREVIOUS_MODE = {after: before for before, after in _NEXT_MODE.items()}


def _table_result(table_data: TableRows) -> TableResult:
    return TableResult(
        headers=[column.name for column in table_data.columns],
        rows=[[value.display() for value in row.values] for row in table_data.rows],
    )


def _format_elapsed(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.3f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds * 1e6:.3f}µs"


class App:
    """Everything the browser shows and the actions that change it."""

    def __init__(self, database_path: str) -> None:
        self.database_path = database_path
        self.database = Database(database_path)
        self.mode = AppMode.TABLES
        self.input_mode = InputMode.NORMAL
        self.tables: list[str] = self.database.table_names()
        self.selected_table: str | None = None
        self.selected_index: int | None = None
        self.table_data: TableRows | None = None
        self.query_input = ""
        self.query_history: list[QueryHistory] = []
        self.status_message = (
            "Welcome to SQLite TUI! Use Tab to switch views, ? for help"
        )
        self.status_level = StatusLevel.INFO
        self.vertical_scroll = 0
        self.horizontal_scroll = 0
        self.show_help = False
        self.query_cursor_position = 0
        self.schema_content = ""
        self.query_scroll = 0
        self.schema_scroll = 0

        if self.tables:
            self.selected_index = 0
            self.selected_table = self.tables[0]
            self.load_table_data()

        try:
            self.load_schema_content()
        except _QUERY_ERRORS:
            pass

    # Views -------------------------------------------------------------

    def next_mode(self) -> None:
        self.mode = _NEXT_MODE[self.mode]
        self.set_status("Switched view", StatusLevel.WARNING)

    def previous_mode(self) -> None:
        self.mode = _PREVIOUS_MODE[self.mode]
        self.set_status("Switched view", StatusLevel.WARNING)

    # Table list --------------------------------------------------------

    def _choose_table(self, index: int) -> None:
        self.selected_index = index
        self.selected_table = self.tables[index]
        self.load_table_data()

    def next_table(self) -> None:
        if not self.tables:
            return
        selected = self.selected_index or 0
        self._choose_table(0 if selected >= len(self.tables) - 1 else selected + 1)

    def previous_table(self) -> None:
        if not self.tables:
            return
        selected = self.selected_index or 0
        self._choose_table(len(self.tables) - 1 if selected == 0 else selected - 1)

    def select_table(self) -> None:
        index = self.selected_index
        if index is None or not 0 <= index < len(self.tables):
            return
        table_name = self.tables[index]
        self.selected_table = table_name
        self.load_table_data()
        self.set_status(f"Loaded table: {table_name}", StatusLevel.INFO)

    def load_table_data(self) -> None:
        """Load the rows of the selected table; failures go to the status line."""
        table_name = self.selected_table
        if table_name is None:
            return
        try:
            data = self.database.table_rows(table_name)
        except _QUERY_ERRORS as error:
            self.set_status(
                f"Error loading table {table_name}: {error}", StatusLevel.ERROR
            )
            return
        self.table_data = data
        self.vertical_scroll = 0
        self.horizontal_scroll = 0

    # Queries -----------------------------------------------------------

    def execute_query(self) -> None:
        """Run the query in the input line and add it to the history."""
        if not self.query_input.strip():
            self.set_status("Please enter a query", StatusLevel.WARNING)
            return

        query = self.query_input.strip()
        started = time.monotonic()
        result: QueryResult
        try:
            result = self.run_query(query)
        except _QUERY_ERRORS as error:
            self.set_status(f"Query error: {error}", StatusLevel.ERROR)
            result = TextResult(f"Error: {error}")
        else:
            elapsed = _format_elapsed(time.monotonic() - started)
            self.set_status(
                f"Query executed successfully in {elapsed}", StatusLevel.INFO
            )

        self.query_history.append(QueryHistory(query, result, started))
        if len(self.query_history) > _HISTORY_LIMIT:
            del self.query_history[0]

        self.query_input = ""
        self.query_cursor_position = 0

    def run_query(self, query: str) -> QueryResult:
        """Run a dot-command or SELECT query and return what it produced."""
        query = query.strip()
        lowered = query.lower()

        if lowered.startswith("select count(*) from "):
            parts = query.split()
            if len(parts) >= 4 and parts[2].lower() == "from":
                return TextResult(str(self.database.count_table_rows(parts[3])))
            raise ValueError("Invalid COUNT query format")
        if query == ".tables":
            return TextResult("\n".join(self.database.table_names()))
        if query == ".dbinfo":
            return TextResult(
                f"database page size: {self.database.page_size}\n"
                f"number of tables: {self.database.num_tables()}"
            )
        if query.startswith(".schema"):
            lines = [
                obj.sql
                if obj.sql is not None
                else f"{obj.object_type}: {obj.name} "
                f"(table: {obj.tbl_name}, page: {obj.rootpage})"
                for obj in self.database.schema_objects()
            ]
            return TextResult("\n".join(lines))
        if lowered.startswith("select"):
            return self._run_select(query)
        command_output(self.database_path, query)
        return TextResult("Command executed successfully")

    def _run_select(self, query: str) -> QueryResult:
        lowered = query.lower()
        if " where " in lowered:
            return self._run_select_with_where(query)

        if lowered.startswith("select * from "):
            parts = query.split()
            if len(parts) < 4:
                raise ValueError("Invalid SELECT * FROM query format")
            return _table_result(self.database.table_rows(parts[3]))

        from_position = lowered.find(" from ")
        if from_position < 0:
            return self._run_select_with_where(query)

        columns_part = query[:from_position].strip()
        from_part = query[from_position + 6 :].strip()
        if not columns_part.lower().startswith("select "):
            raise ValueError("Query must start with SELECT")
        column_names = [name.strip() for name in columns_part[7:].strip().split(",")]
        from_words = from_part.split()
        table_name = from_words[0] if from_words else ""

        values = self.database.column_values(table_name, column_names)
        return TableResult(
            headers=list(column_names),
            rows=[[value.display() for value in row] for row in values],
        )

    def _run_select_with_where(self, query: str) -> QueryResult:
        if not query.lower().startswith("select "):
            raise ValueError("Query must start with SELECT")
        rest = query[7:]
        lowered = rest.lower()

        if lowered.startswith("*"):
            words = rest.split()
            if len(words) < 2:
                raise ValueError("Incomplete SELECT * query")
            if words[1].lower() != "from":
                raise ValueError("Expected FROM after SELECT *")
            table_name, condition = parse_table_and_where(words[2:])
            table_data = self.database.table_rows(table_name)
            if condition is not None:
                table_data = apply_where_filter(table_data, condition)
            return _table_result(table_data)

        from_position = lowered.find(" from ")
        if from_position < 0:
            raise ValueError("Complex SELECT queries not yet supported in TUI")

        column_names = [name.strip() for name in rest[:from_position].strip().split(",")]
        from_part = rest[from_position + 6 :].strip()
        table_name, condition = parse_table_and_where(from_part.split())
        table_data = self.database.table_rows(table_name)
        if condition is not None:
            table_data = apply_where_filter(table_data, condition)
        values = extract_columns(table_data, column_names)
        return TableResult(
            headers=list(column_names),
            rows=[[value.display() for value in row] for row in values],
        )

    # Query input -------------------------------------------------------

    def add_char_to_query(self, c: str) -> None:
        position = self.query_cursor_position
        self.query_input = self.query_input[:position] + c + self.query_input[position:]
        self.query_cursor_position += 1

    def delete_char_from_query(self) -> None:
        if self.query_cursor_position > 0:
            self.query_cursor_position -= 1
            position = self.query_cursor_position
            self.query_input = (
                self.query_input[:position] + self.query_input[position + 1 :]
            )

    def move_cursor_left(self) -> None:
        if self.query_cursor_position > 0:
            self.query_cursor_position -= 1

    def move_cursor_right(self) -> None:
        if self.query_cursor_position < len(self.query_input):
            self.query_cursor_position += 1

    # Scrolling ---------------------------------------------------------

    def _max_row_scroll(self) -> int | None:
        if self.table_data is None:
            return None
        return max(len(self.table_data.rows) - 1, 0)

    def scroll_up(self) -> None:
        if self.mode is AppMode.TABLES:
            self.vertical_scroll = max(self.vertical_scroll - 1, 0)
        elif self.mode is AppMode.QUERY:
            self.query_scroll = max(self.query_scroll - 1, 0)
        else:
            self.schema_scroll = max(self.schema_scroll - 1, 0)

    def scroll_down(self) -> None:
        if self.mode is AppMode.TABLES:
            limit = self._max_row_scroll()
            if limit is not None and self.vertical_scroll < limit:
                self.vertical_scroll += 1
        elif self.mode is AppMode.QUERY:
            self.query_scroll += 1
        else:
            self.schema_scroll += 1

    def scroll_left(self) -> None:
        self.horizontal_scroll = max(self.horizontal_scroll - 1, 0)

    def scroll_right(self) -> None:
        if self.mode is not AppMode.TABLES:
            self.horizontal_scroll += 1
            return
        if self.table_data is not None:
            limit = max(len(self.table_data.columns) - 1, 0)
            if self.horizontal_scroll < limit:
                self.horizontal_scroll += 1

    def scroll_table_down_fast(self) -> None:
        limit = self._max_row_scroll()
        if limit is not None:
            self.vertical_scroll = min(self.vertical_scroll + _FAST_SCROLL, limit)

    def scroll_table_up_fast(self) -> None:
        self.vertical_scroll = max(self.vertical_scroll - _FAST_SCROLL, 0)

    def scroll_to_table_top(self) -> None:
        self.vertical_scroll = 0

    def scroll_to_table_bottom(self) -> None:
        limit = self._max_row_scroll()
        if limit is not None:
            self.vertical_scroll = limit

    # Misc --------------------------------------------------------------

    def toggle_help(self) -> None:
        self.show_help = not self.show_help

    def set_status(self, message: str, level: StatusLevel) -> None:
        self.status_message = message
        self.status_level = level

    def load_schema_content(self) -> None:
        """Rebuild the schema text; on failure store the error and re-raise."""
        try:
            objects = self.database.schema_objects()
        except _QUERY_ERRORS as error:
            self.schema_content = f"Error loading schema: {error}"
            raise
        content = "".join(
            f"-- {obj.object_type.upper()}: {obj.name}\n{obj.sql}\n\n"
            for obj in objects
            if obj.sql is not None
        )
        self.schema_content = content or "No schema information available"
        self.schema_scroll = 0