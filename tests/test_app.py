import sqlite3

import pytest

from litereader.app import (
    App,
    AppMode,
    InputMode,
    StatusLevel,
    TableResult,
    TextResult,
)

PEOPLE = [(1, "Ann", 30), (2, "Bob", 25), (3, "Cid", 30)]
PETS = [(1, "Rex"), (2, "Tom")]


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "sample.db"
    con = sqlite3.connect(path)
    con.execute("PRAGMA page_size=4096")
    con.execute("CREATE TABLE people (id integer primary key, name text, age integer)")
    con.execute("CREATE TABLE pets (id integer primary key, name text)")
    con.executemany("INSERT INTO people VALUES (?, ?, ?)", PEOPLE)
    con.executemany("INSERT INTO pets VALUES (?, ?)", PETS)
    con.commit()
    con.close()
    return str(path)


@pytest.fixture
def app(db_path):
    application = App(db_path)
    yield application
    application.database.close()


def test_initial_state_selects_first_table(app):
    assert app.tables == ["people", "pets"]
    assert app.selected_table == "people"
    assert app.selected_index == 0
    assert [column.name for column in app.table_data.columns] == ["id", "name", "age"]
    assert len(app.table_data.rows) == len(PEOPLE)
    assert app.mode is AppMode.TABLES
    assert app.input_mode is InputMode.NORMAL


def test_modes_cycle_both_ways(app):
    seen = []
    for _ in range(3):
        app.next_mode()
        seen.append(app.mode)
    assert seen == [AppMode.QUERY, AppMode.SCHEMA, AppMode.TABLES]
    app.previous_mode()
    assert app.mode is AppMode.SCHEMA
    assert app.status_message == "Switched view"
    assert app.status_level is StatusLevel.WARNING


def test_table_navigation_wraps(app):
    app.next_table()
    assert app.selected_table == "pets"
    assert len(app.table_data.rows) == len(PETS)
    app.next_table()
    assert app.selected_table == "people"
    app.previous_table()
    assert app.selected_table == "pets"


def test_select_table_reports_status(app):
    app.select_table()
    assert app.status_message == "Loaded table: people"
    assert app.status_level is StatusLevel.INFO


def test_count_query(app):
    assert app.run_query("SELECT COUNT(*) FROM people") == TextResult(str(len(PEOPLE)))


def test_tables_command(app):
    assert app.run_query(".tables") == TextResult("people\npets")


def test_dbinfo_command(app):
    result = app.run_query(".dbinfo")
    assert result.text.splitlines() == [
        "database page size: 4096",
        "number of tables: 2",
    ]


def test_schema_command_lists_sql(app):
    result = app.run_query(".schema")
    lines = result.text.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("CREATE TABLE people")


def test_select_all(app):
    result = app.run_query("select * from people")
    assert isinstance(result, TableResult)
    assert result.headers == ["id", "name", "age"]
    assert result.rows == [[str(i), name, str(age)] for i, name, age in PEOPLE]


def test_select_columns(app):
    result = app.run_query("SELECT name, age FROM people")
    assert result.headers == ["name", "age"]
    assert result.rows == [[name, str(age)] for _, name, age in PEOPLE]


def test_select_columns_with_where(app):
    result = app.run_query("SELECT name FROM people WHERE age = 30")
    assert result.headers == ["name"]
    assert result.rows == [["Ann"], ["Cid"]]


def test_select_all_with_where(app):
    result = app.run_query("SELECT * FROM people WHERE name != 'Ann'")
    assert [row[1] for row in result.rows] == ["Bob", "Cid"]


def test_unknown_column_raises(app):
    with pytest.raises(LookupError):
        app.run_query("SELECT nope FROM people")


def test_unsupported_command_raises(app):
    with pytest.raises(ValueError):
        app.run_query("DELETE FROM people")


def test_execute_query_records_history(app):
    for c in "SELECT COUNT(*) FROM pets":
        app.add_char_to_query(c)
    app.execute_query()
    assert app.query_history[-1].query == "SELECT COUNT(*) FROM pets"
    assert app.query_history[-1].result == TextResult(str(len(PETS)))
    assert app.query_input == ""
    assert app.query_cursor_position == 0
    assert app.status_level is StatusLevel.INFO


def test_execute_query_error_is_recorded(app):
    app.query_input = "SELECT * FROM missing"
    app.execute_query()
    result = app.query_history[-1].result
    assert result.text.startswith("Error: ")
    assert app.status_level is StatusLevel.ERROR
    assert app.status_message.startswith("Query error: ")


def test_execute_empty_query_warns(app):
    app.query_input = "   "
    app.execute_query()
    assert app.query_history == []
    assert app.status_message == "Please enter a query"
    assert app.status_level is StatusLevel.WARNING


def test_history_is_capped(app):
    for _ in range(55):
        app.query_input = ".tables"
        app.execute_query()
    assert len(app.query_history) == 50


def test_cursor_editing(app):
    for c in "abc":
        app.add_char_to_query(c)
    app.move_cursor_left()
    app.add_char_to_query("X")
    assert app.query_input == "abXc"
    app.delete_char_from_query()
    assert app.query_input == "abc"
    assert app.query_cursor_position == 2
    for _ in range(5):
        app.move_cursor_right()
    assert app.query_cursor_position == len(app.query_input)
    for _ in range(5):
        app.move_cursor_left()
    assert app.query_cursor_position == 0
    app.delete_char_from_query()
    assert app.query_input == "abc"


def test_table_scrolling_is_bounded(app):
    for _ in range(10):
        app.scroll_down()
    assert app.vertical_scroll == len(PEOPLE) - 1
    for _ in range(10):
        app.scroll_right()
    assert app.horizontal_scroll == len(app.table_data.columns) - 1
    app.scroll_table_up_fast()
    assert app.vertical_scroll == 0
    app.scroll_table_down_fast()
    assert app.vertical_scroll == len(PEOPLE) - 1
    app.scroll_to_table_top()
    assert app.vertical_scroll == 0
    app.scroll_to_table_bottom()
    assert app.vertical_scroll == len(PEOPLE) - 1
    app.scroll_left()
    assert app.horizontal_scroll == len(app.table_data.columns) - 2


def test_query_and_schema_scroll_are_unbounded_downwards(app):
    app.mode = AppMode.QUERY
    app.scroll_down()
    app.scroll_down()
    app.scroll_up()
    assert app.query_scroll == 1
    app.mode = AppMode.SCHEMA
    app.scroll_up()
    assert app.schema_scroll == 0
    app.scroll_down()
    assert app.schema_scroll == 1


def test_schema_content(app):
    assert app.schema_content.startswith("-- TABLE: people\nCREATE TABLE people")
    assert "-- TABLE: pets\n" in app.schema_content


def test_toggle_help(app):
    app.toggle_help()
    assert app.show_help is True
    app.toggle_help()
    assert app.show_help is False


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        App(str(tmp_path / "absent.db"))