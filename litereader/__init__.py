"""Read SQLite database files directly and query them from a CLI or curses terminal UI."""

__version__ = "0.1.0"