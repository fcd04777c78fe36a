import sqlite3

import pytest

from litereader.app import App, AppMode
from litereader.tui import (
    centered_rect,
    help_lines,
    query_history_lines,
    schema_lines,
    status_line,
    table_view,
)

CREATE_FRUITS = "CREATE TABLE fruits (id integer primary key, name text, color text)"


def _make_db(path, rows, extra=()):
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA page_size = 4096")
    conn.execute(CREATE_FRUITS)
    conn.executemany("INSERT INTO fruits (name, color) VALUES (?, ?)", rows)
    for statement in extra:
        conn.execute(statement)
    conn.commit()
    conn.close()
    return str(path)


@pytest.fixture
def app(tmp_path):
    path = _make_db(
        tmp_path / "fruits.db",
        [("apple", "red"), ("banana", "yellow"), ("cherry", "red")],
    )
    application = App(path)
    yield application
    application.database.close()


def test_help_lines_start_and_end():
    lines = help_lines()
    assert lines[0] == "SQLite TUI - Help"
    assert lines[-1] == "Press ? or Esc to close help"
    assert "Global Keys:" in lines


def test_help_lines_is_a_fresh_copy():
    lines = help_lines()
    lines.clear()
    assert help_lines()[0] == "SQLite TUI - Help"


@pytest.mark.parametrize("width,height", [(100, 50), (80, 24), (7, 3), (0, 0)])
def test_centered_rect_fits_and_is_centred(width, height):
    x, y, w, h = centered_rect(80, 80, width, height)
    assert 0 <= x and 0 <= y
    assert x + w <= width
    assert y + h <= height
    assert x * 2 + w <= width
    assert y * 2 + h <= height


def test_centered_rect_full_size_covers_area():
    assert centered_rect(100, 100, 40, 20) == (0, 0, 40, 20)


def test_status_line_has_message_and_global_keys(app):
    line = status_line(app)
    assert line.startswith("Status: Welcome to SQLite TUI!")
    assert line.endswith("Tab: Switch | Ctrl+Q: Quit | ?: Help")
    assert "k/j: select table" in line


def test_status_line_follows_mode(app):
    app.next_mode()
    assert app.mode is AppMode.QUERY
    line = status_line(app)
    assert "Enter: execute | ↑↓: scroll results | ←→: move cursor" in line
    assert "Switched view" in line


def test_query_history_lines_without_history(app):
    lines = query_history_lines(app)
    assert lines[0] == "No query history yet."
    assert "• .tables" in lines


def test_query_history_lines_text_result(app):
    app.query_input = "SELECT COUNT(*) FROM fruits"
    app.execute_query()
    lines = query_history_lines(app)
    assert lines[0] == "Query: SELECT COUNT(*) FROM fruits"
    assert "Result: 3" in lines


def test_query_history_lines_most_recent_first(app):
    app.query_input = ".tables"
    app.execute_query()
    app.query_input = "SELECT name FROM fruits"
    app.execute_query()
    lines = query_history_lines(app)
    assert lines[0] == "Query: SELECT name FROM fruits"
    assert "─" * 60 in lines
    assert lines.index("Query: .tables") > lines.index("─" * 60)


def test_query_history_lines_table_result(app):
    app.query_input = "SELECT name, color FROM fruits"
    app.execute_query()
    lines = query_history_lines(app)
    assert "Result: Table data" in lines
    assert "        name | color" in lines
    assert "        apple | red" in lines


def test_query_history_lines_limits_long_tables(tmp_path):
    path = _make_db(tmp_path / "many.db", [(f"fruit{n}", "green") for n in range(25)])
    application = App(path)
    try:
        application.query_input = "SELECT * FROM fruits"
        application.execute_query()
        lines = query_history_lines(application)
    finally:
        application.database.close()
    assert lines[-1] == "        ... and 5 more rows"
    assert "        19 | fruit18 | green" in lines
    assert not any("fruit20" in line for line in lines)


def test_schema_lines_show_create_statement(app):
    lines = schema_lines(app)
    assert "-- TABLE: fruits" in lines
    assert CREATE_FRUITS in lines


def test_schema_lines_placeholder_when_empty(app):
    app.schema_content = ""
    lines = schema_lines(app)
    assert lines[0] == "Loading schema information..."


def test_table_view_shows_loaded_table(app):
    view = table_view(app, 100, 20)
    assert view.message is None
    assert view.headers == ["id", "name", "color"]
    assert view.rows[0] == ["1", "apple", "red"]
    assert len(view.rows) == 3
    assert view.title.startswith("Table Data: fruits")


def test_table_view_without_data(app):
    app.table_data = None
    view = table_view(app, 100, 20)
    assert view.message == "Select a table to view its data"
    assert view.title == "Table Data"


def test_table_view_narrow_panel_shows_one_column(app):
    view = table_view(app, 26, 20)
    assert view.headers == ["id"]
    assert view.title.endswith(" │ Cols: 1-1/3")
    app.scroll_right()
    assert table_view(app, 26, 20).headers == ["name"]


def test_table_view_short_panel_limits_rows(app):
    view = table_view(app, 100, 5)
    assert len(view.rows) <= 5 - 3
    assert " │ Rows: 1-2/3" in view.title


def test_table_view_clips_long_values(tmp_path):
    long_name = "a-very-long-fruit-name-indeed"
    path = _make_db(tmp_path / "long.db", [(long_name, "red")])
    application = App(path)
    try:
        cell = table_view(application, 100, 20).rows[0][1]
    finally:
        application.database.close()
    assert len(cell) == 20
    assert cell.endswith("...")
    assert long_name.startswith(cell[:-3])