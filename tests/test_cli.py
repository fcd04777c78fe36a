import sqlite3

import pytest

from litereader.cli import main


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "fruits.db"
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA page_size = 4096")
    conn.execute("CREATE TABLE fruits (id integer primary key, name text, color text)")
    conn.executemany(
        "INSERT INTO fruits (name, color) VALUES (?, ?)",
        [("apple", "red"), ("banana", "yellow"), ("cherry", "red")],
    )
    conn.commit()
    conn.close()
    return str(path)


@pytest.fixture
def indexed_db_path(db_path):
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE INDEX idx_color ON fruits (color)")
    conn.commit()
    conn.close()
    return db_path


def test_missing_database_path(capsys):
    assert main([]) == 1
    assert "Missing <database path>" in capsys.readouterr().err


def test_tables_command(db_path, capsys):
    assert main([db_path, ".tables"]) == 0
    assert capsys.readouterr().out == "fruits\n"


def test_dbinfo_command(db_path, capsys):
    assert main([db_path, ".dbinfo"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["database page size: 4096", "number of tables: 1"]


def test_count_query(db_path, capsys):
    assert main([db_path, "SELECT COUNT(*) FROM fruits"]) == 0
    assert capsys.readouterr().out == "3\n"


def test_column_query_with_where(db_path, capsys):
    assert main([db_path, "SELECT name, color FROM fruits WHERE color = 'red'"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "name, color".replace(", ", "|"),
        "apple|red",
        "cherry|red",
    ]


def test_unknown_table_reports_error(db_path, capsys):
    assert main([db_path, "SELECT * FROM nope"]) == 1
    assert "Table nope not found" in capsys.readouterr().err


def test_unsupported_command(db_path, capsys):
    assert main([db_path, "DELETE FROM fruits"]) == 1
    assert "Unsupported SQL command: DELETE FROM fruits" in capsys.readouterr().err


def test_missing_file_reports_error(tmp_path, capsys):
    missing = str(tmp_path / "absent.db")
    assert main([missing, ".tables"]) == 1
    assert capsys.readouterr().err.startswith("Error: ")