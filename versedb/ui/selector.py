# versedb/ui/selector.py
from __future__ import annotations

import curses
from typing import Sequence

_ENTER_KEYS = {curses.KEY_ENTER, 10, 13}
_UP_KEYS = {curses.KEY_UP, ord("k")}
_DOWN_KEYS = {curses.KEY_DOWN, ord("j")}


def menu_loop(stdscr, title: str, options: Sequence[str]) -> int:
    """Draw the menu, move the highlight on up/down (wrapping), return the index on Enter."""
    if not options:
        raise ValueError("menu needs at least one option")

    cur = 0
    while True:
        stdscr.clear()
        stdscr.addstr(0, 0, title, curses.A_BOLD)
        stdscr.addstr(1, 0, "Use the arrow keys to move, Enter to select.")

        for i, opt in enumerate(options):
            marker = ">" if i == cur else " "
            style = curses.A_REVERSE if i == cur else curses.A_NORMAL
            stdscr.addstr(3 + i, 2, f"{marker} {opt}", style)
        stdscr.refresh()

        key = stdscr.getch()
        if key in _UP_KEYS:
            cur = (cur - 1) % len(options)
        elif key in _DOWN_KEYS:
            cur = (cur + 1) % len(options)
        elif key in _ENTER_KEYS:
            return cur


def _run(stdscr, title: str, options: Sequence[str]) -> int:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    stdscr.keypad(True)
    return menu_loop(stdscr, title, options)


def select_option(title: str, options: Sequence[str]) -> int:
    """Full-screen arrow-key menu. Blocks until the user confirms a choice."""
    return curses.wrapper(_run, title, list(options))
