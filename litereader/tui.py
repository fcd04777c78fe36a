"""Terminal front end of the database browser, drawn with curses."""

from __future__ import annotations

import curses
from dataclasses import dataclass, field

from .app import App, AppMode, InputMode, StatusLevel, TableResult, TextResult
from .keys import KeyPress, handle_key

_COLUMN_WIDTH = 20
_COLUMN_SLOT = 22
_CELL_LIMIT = 20
_HISTORY_ROW_LIMIT = 20
_INDENT = " " * 8
_POLL_MS = 100

_HELP_TEXT = (
    "SQLite TUI - Help",
    "",
    "Global Keys:",
    "  Tab / Shift+Tab    - Switch between views",
    "  Ctrl+Q             - Quit application",
    "  ?                  - Toggle this help",
    "",
    "Tables View:",
    "  ↑/↓ or j/k         - Navigate table list",
    "  Enter              - Load selected table",
    "  r                  - Refresh table data",
    "  w/s                - Scroll table data up/down",
    "  a/d                - Scroll table data left/right",
    "  ←/→                - Scroll table data left/right",
    "  Page Up/Down       - Fast scroll (10 rows)",
    "  g/G                - Jump to top/bottom",
    "  Home/End           - Jump to top/bottom",
    "",
    "Query View:",
    "  Type               - Enter SQL query",
    "  Enter              - Execute query",
    "  ←/→                - Move cursor in input",
    "  ↑/↓                - Scroll query results",
    "  Page Up/Down       - Fast scroll results",
    "  Backspace          - Delete character",
    "",
    "Schema View:",
    "  ↑/↓ or j/k         - Scroll vertically",
    "  Page Up/Down       - Fast scroll",
    "  r                  - Refresh schema",
    "  ←/→ or h/l         - Scroll horizontally",
    "",
    "Press ? or Esc to close help",
)

_QUERY_HELP = (
    "No query history yet.",
    "",
    "Try some sample queries:",
    "",
    "• SELECT COUNT(*) FROM superheroes",
    "• SELECT * FROM superheroes LIMIT 5",
    "• .tables",
    "• .schema",
    "• .dbinfo",
    "",
    "Navigation:",
    "• Type your query and press Enter",
    "• Use ↑↓ to scroll through results",
    "• Use Tab to switch views",
)

_SCHEMA_HELP = (
    "Loading schema information...",
    "",
    "This view shows:",
    "• CREATE TABLE statements",
    "• CREATE INDEX statements",
    "• Other database objects",
    "",
    "Navigation:",
    "• Use ↑↓ to scroll through schema",
    "• Use Tab to switch views",
    "• Press 'r' to refresh schema",
)

_MODE_HELP = {
    AppMode.TABLES: (
        "k/j: select table | Enter: load | wasd: scroll data | "
        "PageUp/Down: fast scroll | g/G: top/bottom"
    ),
    AppMode.QUERY: "Enter: execute | ↑↓: scroll results | ←→: move cursor",
    AppMode.SCHEMA: "↑↓: scroll | r: refresh | Page Up/Down: fast scroll",
}

_GLOBAL_HELP = "Tab: Switch | Ctrl+Q: Quit | ?: Help"
_TAB_TITLES = (("Tables", AppMode.TABLES), ("Query", AppMode.QUERY), ("Schema", AppMode.SCHEMA))


@dataclass(frozen=True)
class TableView:
    """What the table data panel shows for a given panel size."""

    title: str
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    message: str | None = None


def help_lines() -> list[str]:
    """Lines of the help popup."""
    return list(_HELP_TEXT)


def _status_parts(app: App) -> list[tuple[str, str]]:
    return [
        ("Status: ", "bold"),
        (app.status_message, app.status_level.value),
        (" | ", "dim"),
        (_MODE_HELP[app.mode], "dim"),
        (" | ", "dim"),
        (_GLOBAL_HELP, "dim"),
    ]


def status_line(app: App) -> str:
    """The status bar text: message, keys for the current view, global keys."""
    return "".join(text for text, _ in _status_parts(app))


def query_history_lines(app: App) -> list[str]:
    """Lines of the results panel, most recent query first."""
    if not app.query_history:
        return list(_QUERY_HELP)
    lines: list[str] = []
    for position, entry in enumerate(reversed(app.query_history)):
        if position:
            lines.extend(["", "─" * 60, ""])
        lines.append(f"Query: {entry.query}")
        lines.append("")
        result = entry.result
        if isinstance(result, TextResult):
            for number, line in enumerate(result.text.splitlines()):
                prefix = "Result: " if number == 0 else _INDENT
                lines.append(prefix + line)
        elif isinstance(result, TableResult):
            lines.append("Result: Table data")
            lines.append(_INDENT + " | ".join(result.headers))
            separator = "-+-".join("-" * max(len(h), 10) for h in result.headers)
            lines.append(_INDENT + separator)
            for number, row in enumerate(result.rows):
                if number >= _HISTORY_ROW_LIMIT:
                    remaining = len(result.rows) - _HISTORY_ROW_LIMIT
                    lines.append(f"{_INDENT}... and {remaining} more rows")
                    break
                lines.append(_INDENT + " | ".join(row))
    return lines


def schema_lines(app: App) -> list[str]:
    """Lines of the schema panel."""
    if not app.schema_content:
        return list(_SCHEMA_HELP)
    return app.schema_content.splitlines()


def _clip_cell(text: str) -> str:
    if len(text) > _CELL_LIMIT:
        return text[: _CELL_LIMIT - 3] + "..."
    return text


def table_view(app: App, width: int, height: int) -> TableView:
    """The visible window of the loaded table for a panel of this size."""
    table_data = app.table_data
    if table_data is None:
        return TableView("Table Data", message="Select a table to view its data")
    if not table_data.rows:
        return TableView("Table Data", message="No data in table")

    total_columns = len(table_data.columns)
    visible_columns = max(width - 4, 0) // _COLUMN_SLOT
    start = min(app.horizontal_scroll, max(total_columns - 1, 0))
    end = min(start + visible_columns, total_columns)
    headers = [column.name for column in table_data.columns[start:end]]

    total_rows = len(table_data.rows)
    visible_height = max(height - 3, 0)
    max_scroll = max(total_rows - visible_height, 0)
    scroll = min(app.vertical_scroll, max_scroll)
    shown = table_data.rows[scroll : scroll + visible_height]
    rows = [
        [_clip_cell(value.display()) for value in row.values[start:end]]
        for row in shown
    ]

    if total_rows > visible_height:
        last = min(scroll + len(shown), total_rows)
        vertical = f" │ Rows: {scroll + 1}-{last}/{total_rows}"
    else:
        vertical = f" │ Rows: {total_rows}"
    if total_columns > visible_columns:
        horizontal = f" │ Cols: {start + 1}-{end}/{total_columns}"
    else:
        horizontal = f" │ Cols: {total_columns}"

    name = app.selected_table if app.selected_table is not None else "None"
    return TableView(f"Table Data: {name}{vertical}{horizontal}", headers, rows)


def centered_rect(
    percent_x: int, percent_y: int, width: int, height: int
) -> tuple[int, int, int, int]:
    """A rectangle ``(x, y, width, height)`` centred in an area of this size."""
    margin_y = height * ((100 - percent_y) // 2) // 100
    margin_x = width * ((100 - percent_x) // 2) // 100
    return margin_x, margin_y, width * percent_x // 100, height * percent_y // 100


# Drawing ---------------------------------------------------------------


def _init_colors() -> dict[str, int]:
    names = {
        "green": curses.COLOR_GREEN,
        "yellow": curses.COLOR_YELLOW,
        "red": curses.COLOR_RED,
        "cyan": curses.COLOR_CYAN,
        "magenta": curses.COLOR_MAGENTA,
        "white": curses.COLOR_WHITE,
    }
    colors = dict.fromkeys(names, 0)
    if curses.has_colors():
        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        for number, (name, color) in enumerate(names.items(), start=1):
            curses.init_pair(number, color, background)
            colors[name] = curses.color_pair(number)
    colors["bold"] = curses.A_BOLD
    colors["dim"] = curses.A_DIM
    colors[StatusLevel.INFO.value] = colors["green"]
    colors[StatusLevel.WARNING.value] = colors["yellow"]
    colors[StatusLevel.ERROR.value] = colors["red"]
    return colors


def _put(win, y: int, x: int, text: str, attr: int = 0) -> int:
    rows, cols = win.getmaxyx()
    if y < 0 or y >= rows or x < 0 or x >= cols or not text:
        return x
    try:
        win.addnstr(y, x, text, cols - x, attr)
    except curses.error:
        pass
    return x + len(text)


def _box(win, top: int, left: int, height: int, width: int, title: str = "", attr: int = 0) -> None:
    if height < 2 or width < 2:
        return
    _put(win, top, left, "┌" + "─" * (width - 2) + "┐")
    for row in range(top + 1, top + height - 1):
        _put(win, row, left, "│")
        _put(win, row, left + width - 1, "│")
    _put(win, top + height - 1, left, "└" + "─" * (width - 2) + "┘")
    if title:
        _put(win, top, left + 1, title[: width - 2], attr)


def _fill(win, top: int, left: int, height: int, width: int, lines, skip: int = 0) -> None:
    """Write ``(text, attr)`` lines inside a box, starting at line ``skip``."""
    inner = max(width - 2, 0)
    for row, (text, attr) in enumerate(lines[skip : skip + max(height - 2, 0)]):
        _put(win, top + 1 + row, left + 1, text[:inner], attr)


def _draw_header(win, app: App, width: int, colors: dict[str, int]) -> None:
    _box(win, 0, 0, 3, width, "SQLite TUI")
    x = 1
    for number, (title, mode) in enumerate(_TAB_TITLES):
        if number:
            x = _put(win, 1, x, " │ ", colors["white"])
        attr = colors["yellow"] | curses.A_BOLD if app.mode is mode else colors["white"]
        x = _put(win, 1, x, title, attr)


def _draw_tables(win, app: App, top: int, height: int, width: int, colors: dict[str, int]) -> None:
    list_width = width * 25 // 100
    _box(win, top, 0, height, list_width, "Tables", colors["cyan"])
    items = []
    for index, name in enumerate(app.tables):
        if index == app.selected_index:
            items.append((">> " + name, curses.A_REVERSE | curses.A_BOLD))
        else:
            items.append(("   " + name, colors["white"]))
    _fill(win, top, 0, height, list_width, items)

    left = list_width
    data_width = width - list_width
    view = table_view(app, data_width, height)
    if view.message is not None:
        message_attr = colors["yellow"] if app.table_data is not None else curses.A_DIM
        _box(win, top, left, height, data_width, view.title)
        inner = max(data_width - 2, 0)
        _put(win, top + height // 2, left + 1, view.message.center(inner)[:inner], message_attr)
        return
    _box(win, top, left, height, data_width, view.title, colors["green"])
    header = " ".join(f"{name:<{_COLUMN_WIDTH}}" for name in view.headers)
    lines = [(header, colors["yellow"] | curses.A_BOLD), ("", 0)]
    lines.extend((" ".join(f"{cell:<{_COLUMN_WIDTH}}" for cell in row), 0) for row in view.rows)
    _fill(win, top, left, height, data_width, lines)


def _history_attr(line: str, colors: dict[str, int]) -> int:
    if line.startswith("Query: "):
        return colors["yellow"] | curses.A_BOLD
    if line.startswith("Result: "):
        return colors["green"]
    if line.startswith("─"):
        return curses.A_DIM
    return colors["white"]


def _scroll_title(base: str, suffix: str, total: int, visible: int, scroll: int) -> tuple[str, int]:
    position = min(scroll, max(total - visible, 0))
    if total > visible:
        return f"{base} (line {position + 1}/{total}, {suffix})", position
    return base, position


def _draw_query(win, app: App, top: int, height: int, width: int, colors: dict[str, int]) -> None:
    _box(
        win,
        top,
        0,
        3,
        width,
        "SQL Query (Enter: edit/execute, Esc: stop editing, ↑↓: scroll results)",
        colors["cyan"],
    )
    if app.query_input:
        attr = colors["yellow"] if app.input_mode is InputMode.EDITING else colors["white"]
        _fill(win, top, 0, 3, width, [(app.query_input, attr)])
    else:
        placeholder = (
            "Type your SQL query here..."
            if app.input_mode is InputMode.EDITING
            else "Press Enter to start editing..."
        )
        _fill(win, top, 0, 3, width, [(placeholder, curses.A_DIM)])

    results_top = top + 3
    results_height = max(height - 3, 0)
    lines = query_history_lines(app)
    if not app.query_history:
        _box(win, results_top, 0, results_height, width, "Query Results & Help", colors["green"])
        _fill(win, results_top, 0, results_height, width, [(line, curses.A_DIM) for line in lines])
        return
    title, position = _scroll_title(
        "Query History", "↑↓ to scroll", len(lines), max(results_height - 2, 0), app.query_scroll
    )
    _box(win, results_top, 0, results_height, width, title, colors["green"])
    styled = [(line, _history_attr(line, colors)) for line in lines]
    _fill(win, results_top, 0, results_height, width, styled, position)


def _schema_attr(line: str, colors: dict[str, int]) -> int:
    if line.startswith("--"):
        return colors["cyan"] | curses.A_BOLD
    if line.strip().upper().startswith("CREATE"):
        return colors["yellow"]
    return colors["white"]


def _draw_schema(win, app: App, top: int, height: int, width: int, colors: dict[str, int]) -> None:
    lines = schema_lines(app)
    if not app.schema_content:
        _box(win, top, 0, height, width, "Database Schema", colors["magenta"])
        _fill(win, top, 0, height, width, [(line, curses.A_DIM) for line in lines])
        return
    visible = max(height - 2, 0)
    if len(lines) > visible:
        title, position = _scroll_title(
            "Database Schema", "↑↓ to scroll, r to refresh", len(lines), visible, app.schema_scroll
        )
    else:
        title, position = "Database Schema (r to refresh)", 0
    _box(win, top, 0, height, width, title, colors["magenta"])
    offset = app.horizontal_scroll
    styled = [(line[offset:], _schema_attr(line, colors)) for line in lines]
    _fill(win, top, 0, height, width, styled, position)


def _draw_status(win, app: App, top: int, width: int, colors: dict[str, int]) -> None:
    _box(win, top, 0, 3, width)
    x = 1
    limit = width - 1
    for text, role in _status_parts(app):
        if x >= limit:
            break
        attr = colors["white"] | curses.A_BOLD if role == "bold" else colors.get(role, 0)
        x = _put(win, top + 1, x, text[: limit - x], attr)


def _draw_help(win, colors: dict[str, int]) -> None:
    rows, cols = win.getmaxyx()
    x, y, width, height = centered_rect(80, 80, cols, rows)
    for row in range(y, y + height):
        _put(win, row, x, " " * width)
    _box(win, y, x, height, width, "Help", colors["yellow"] | curses.A_BOLD)
    headings = {"Global Keys:", "Tables View:", "Query View:", "Schema View:"}
    styled = []
    for line in help_lines():
        if line == _HELP_TEXT[0]:
            styled.append((line, colors["yellow"] | curses.A_BOLD))
        elif line in headings:
            styled.append((line, colors["cyan"] | curses.A_BOLD))
        elif line == _HELP_TEXT[-1]:
            styled.append((line, colors["yellow"]))
        else:
            styled.append((line, colors["white"]))
    _fill(win, y, x, height, width, styled)


def _set_cursor(visible: bool) -> None:
    try:
        curses.curs_set(1 if visible else 0)
    except curses.error:
        pass


def _draw(win, app: App, colors: dict[str, int]) -> None:
    win.erase()
    rows, cols = win.getmaxyx()
    if app.show_help:
        _set_cursor(False)
        _draw_help(win, colors)
        win.refresh()
        return

    main_top = 3
    main_height = max(rows - 6, 0)
    _draw_header(win, app, cols, colors)
    if app.mode is AppMode.TABLES:
        _draw_tables(win, app, main_top, main_height, cols, colors)
    elif app.mode is AppMode.QUERY:
        _draw_query(win, app, main_top, main_height, cols, colors)
    else:
        _draw_schema(win, app, main_top, main_height, cols, colors)
    _draw_status(win, app, main_top + main_height, cols, colors)

    cursor_x = 1 + app.query_cursor_position
    if app.mode is AppMode.QUERY and app.input_mode is InputMode.EDITING and cursor_x < cols - 1:
        _set_cursor(True)
        try:
            win.move(main_top + 1, cursor_x)
        except curses.error:
            pass
    else:
        _set_cursor(False)
    win.refresh()


# Input -----------------------------------------------------------------

_SPECIAL_KEYS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_ENTER: "enter",
    curses.KEY_BTAB: "backtab",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_PPAGE: "pageup",
    curses.KEY_NPAGE: "pagedown",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
}

_CONTROL_CHARS = {
    "\t": "tab",
    "\n": "enter",
    "\r": "enter",
    "\x1b": "esc",
    "\x7f": "backspace",
    "\b": "backspace",
}


def _key_from_curses(ch: int | str) -> KeyPress | None:
    if isinstance(ch, int):
        code = _SPECIAL_KEYS.get(ch)
        return KeyPress(code) if code is not None else None
    if ch in _CONTROL_CHARS:
        return KeyPress(_CONTROL_CHARS[ch])
    if len(ch) == 1 and ord(ch) < 32:
        return KeyPress(chr(ord(ch) + 96), ctrl=True)
    return KeyPress(ch)


def _run(stdscr, database_path: str) -> None:
    app = App(database_path)
    try:
        try:
            curses.set_escdelay(25)
        except (AttributeError, curses.error):
            pass
        stdscr.keypad(True)
        stdscr.timeout(_POLL_MS)
        colors = _init_colors()
        while True:
            _draw(stdscr, app, colors)
            try:
                ch = stdscr.get_wch()
            except curses.error:
                continue
            key = _key_from_curses(ch)
            if key is not None and handle_key(app, key):
                return
    finally:
        app.database.close()


def run_tui(database_path: str) -> None:
    """Open the database and browse it until the user quits."""
    curses.wrapper(_run, database_path)