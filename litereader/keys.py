"""Keyboard handling for the interactive browser.

Key codes are single characters for printable keys and lower-case names for
the rest: ``up``, ``down``, ``left``, ``right``, ``enter``, ``esc``, ``tab``,
``backtab``, ``backspace``, ``pageup``, ``pagedown``, ``home`` and ``end``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .app import App, AppMode, InputMode, StatusLevel

_SCHEMA_ERRORS = (ValueError, LookupError, OSError)
_PAGE_STEPS = 10


@dataclass(frozen=True)
class KeyPress:
    """One key press: its code and whether Control was held."""

    code: str
    ctrl: bool = False

    @property
    def is_char(self) -> bool:
        return len(self.code) == 1


def _refresh_table(app: App) -> None:
    app.load_table_data()
    app.set_status("Table data refreshed", StatusLevel.INFO)


_TABLE_ACTIONS: dict[str, Callable[[App], None]] = {
    "up": App.previous_table,
    "k": App.previous_table,
    "down": App.next_table,
    "j": App.next_table,
    "enter": App.select_table,
    "r": _refresh_table,
    "w": App.scroll_up,
    "s": App.scroll_down,
    "a": App.scroll_left,
    "d": App.scroll_right,
    "pageup": App.scroll_table_up_fast,
    "W": App.scroll_table_up_fast,
    "pagedown": App.scroll_table_down_fast,
    "S": App.scroll_table_down_fast,
    "home": App.scroll_to_table_top,
    "g": App.scroll_to_table_top,
    "end": App.scroll_to_table_bottom,
    "G": App.scroll_to_table_bottom,
    "left": App.scroll_left,
    "right": App.scroll_right,
}


def _refresh_schema(app: App) -> None:
    try:
        app.load_schema_content()
    except _SCHEMA_ERRORS as error:
        app.set_status(f"Error refreshing schema: {error}", StatusLevel.ERROR)
    else:
        app.set_status("Schema refreshed", StatusLevel.INFO)


def _page_up(app: App) -> None:
    for _ in range(_PAGE_STEPS):
        app.scroll_up()


def _page_down(app: App) -> None:
    for _ in range(_PAGE_STEPS):
        app.scroll_down()


_SCHEMA_ACTIONS: dict[str, Callable[[App], None]] = {
    "up": App.scroll_up,
    "k": App.scroll_up,
    "down": App.scroll_down,
    "j": App.scroll_down,
    "left": App.scroll_left,
    "h": App.scroll_left,
    "right": App.scroll_right,
    "l": App.scroll_right,
    "r": _refresh_schema,
    "pageup": _page_up,
    "pagedown": _page_down,
}


def _handle_query_key(app: App, key: KeyPress) -> None:
    if app.input_mode is InputMode.NORMAL:
        if key.code == "enter":
            app.input_mode = InputMode.EDITING
        elif key.code == "up":
            app.scroll_up()
        elif key.code == "down":
            app.scroll_down()
        return

    if key.code == "esc":
        app.input_mode = InputMode.NORMAL
    elif key.code == "enter":
        app.execute_query()
        app.input_mode = InputMode.NORMAL
    elif key.code == "backspace":
        app.delete_char_from_query()
    elif key.code == "left":
        app.move_cursor_left()
    elif key.code == "right":
        app.move_cursor_right()
    elif key.is_char:
        app.add_char_to_query(key.code)


def handle_key(app: App, key: KeyPress) -> bool:
    """Apply a key press to ``app``; return True when the user asked to quit."""
    if app.show_help:
        if key.code in ("?", "esc"):
            app.toggle_help()
        return False

    if key.code == "q" and key.ctrl:
        return True
    if key.code == "?":
        app.toggle_help()
    elif key.code == "tab":
        app.input_mode = InputMode.NORMAL
        app.next_mode()
    elif key.code == "backtab":
        app.input_mode = InputMode.NORMAL
        app.previous_mode()
    elif app.mode is AppMode.TABLES:
        action = _TABLE_ACTIONS.get(key.code)
        if action is not None:
            action(app)
    elif app.mode is AppMode.QUERY:
        _handle_query_key(app, key)
    else:
        action = _SCHEMA_ACTIONS.get(key.code)
        if action is not None:
            action(app)
    return False