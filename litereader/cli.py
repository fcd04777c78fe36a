"""Command line entry point: browse a database or run one command on it."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .commands import execute_command
from .tui import run_tui

_ERRORS = (ValueError, LookupError, OSError)


def main(argv: Sequence[str] | None = None) -> int:
    """Run a command if one is given, otherwise start the browser."""
    args = list(sys.argv[1:] if argv is None else argv)
    program = sys.argv[0] if sys.argv and sys.argv[0] else "program"
    try:
        if not args:
            raise ValueError(
                f"Missing <database path>. Usage: {program} <database_path> [command]"
            )
        database_path = args[0]
        if len(args) == 1:
            print(f"Launching SQLite TUI for database: {database_path}")
            run_tui(database_path)
        else:
            execute_command(database_path, args[1])
    except _ERRORS as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())