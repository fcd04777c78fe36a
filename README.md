# litereader

litereader reads SQLite database files by itself. It decodes the file header, the B-tree pages and the records directly and does not go through an SQLite library. With it you can inspect a database's schema, count rows and run simple `SELECT` queries, either from the command line or in an interactive terminal UI built on `curses`.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Command-line mode

Pass the database path and one command:

```
litereader sample.db .dbinfo
litereader sample.db .tables
litereader sample.db .schema
litereader sample.db "SELECT COUNT(*) FROM apples"
litereader sample.db "SELECT * FROM apples"
litereader sample.db "SELECT name, color FROM apples WHERE color = 'Yellow'"
```

- `.dbinfo` prints the database page size and the number of cells on the schema page (labelled "number of tables").
- `.tables` prints the name of each table, one per line.
- `.schema` prints every schema object (tables, indexes and so on) with its type, name, owning table and root page. When the object has a `CREATE` statement, that statement is printed on the next line.
- `SELECT COUNT(*) FROM t` prints the number of rows in `t`.
- `SELECT * FROM t [WHERE ...]` prints a header line, a separator line and then one line per row. Fields are separated by `|`.
- `SELECT a, b FROM t [WHERE ...]` prints the requested column names followed by their values, also separated by `|`. Column names are matched without regard to case.

A `WHERE` clause holds exactly one condition of the form `column = value` or `column != value`. String values have to be quoted with `'...'` or `"..."`. Numbers may be given without quotes. A value matches when it equals the text the value is displayed as. If a column list is selected with an `=` condition and the schema contains an index `ON table (column)` for that column, the matching rows are found through the index.

On failure, for example a missing table or column, an unsupported query or an unreadable file, the command writes `Error: ...` to standard error and exits with status 1.

## Terminal UI

Pass only the database path:

```
litereader sample.db
```

There are three views. Tab and Shift+Tab switch between them.

- **Tables**: use `j`/`k` or Up/Down to move through the table list, and press Enter to load a table. `w`/`s` scroll the rows, while `a`/`d` and Left/Right scroll the columns. PageUp/PageDown (or `W`/`S`) move 10 rows at a time. `g`/`G` and Home/End jump to the top or the bottom. `r` reloads the data.
- **Query**: press Enter to start typing and Enter again to run the query. Esc stops editing, and Up/Down scroll the results. The UI accepts `.tables`, `.dbinfo`, `.schema`, `SELECT COUNT(*) FROM t` and the same `SELECT` forms as the command line. The 50 most recent queries are kept, newest first, and each table result shows at most 20 rows.
- **Schema**: lists the `CREATE` statement of every schema object. Up/Down or `j`/`k` scroll it, PageUp/PageDown scroll faster, and `r` refreshes it.

Press `?` to show or hide the help and Ctrl+Q to quit.

## Library use

```python
from litereader.database import Database

with Database("sample.db") as db:
    print(db.table_names())
    table = db.table_rows("apples")
    for row in table.rows:
        print(row.row_id, [value.display() for value in row.values])
```

`Database` also provides `count_table_rows`, `column_values`, `schema_objects`, `find_index_for_column`, `search_index`, `table_row_by_id` and `table_rows_by_ids`.

`litereader.commands.command_output(path, command)` returns, as a list of lines, what the command-line mode would print for `command`. `litereader.commands.execute_command` prints those lines.

## What it does not do

- It only reads. Nothing is ever written to the database.
- The query support is limited to the forms listed above. There are no joins, no `ORDER BY`, no `LIMIT`, no expressions, no `<`/`>` comparisons and no combination of conditions with `AND`/`OR`.
- Records that spill onto overflow pages cannot be read and cause an error.
- The terminal UI needs the standard `curses` module. Python on Windows does not include it by default.