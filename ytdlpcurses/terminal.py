"""
Curses terminal session.

TerminalSession owns the managed terminal mode: cbreak, no echo, keypad
translation and a hidden cursor. It is used as a context manager around the
whole menu, and hands the real console over to child processes through
suspended().
"""

import curses
import os
from contextlib import contextmanager

from .logger import get_logger

logger = get_logger(__name__)

# Milliseconds curses waits after ESC for the rest of an escape sequence
ESC_DELAY_MS = 25


def set_cursor(visibility):
    """Show (1) or hide (0) the cursor, ignoring terminals that can't."""
    try:
        curses.curs_set(visibility)
    except curses.error:
        logger.debug(f"Terminal does not support cursor visibility {visibility}")


class TerminalSession:
    def __init__(self):
        self.screen = None

    @property
    def active(self):
        return self.screen is not None

    def start(self):
        """Enter managed terminal mode and return the main window."""
        os.environ.setdefault("ESCDELAY", str(ESC_DELAY_MS))
        self.screen = curses.initscr()
        try:
            curses.noecho()
            curses.cbreak()
            self.screen.keypad(True)
            set_cursor(0)
        except curses.error:
            self.stop()
            raise
        logger.debug("Managed terminal mode entered")
        return self.screen

    def stop(self):
        """Give the terminal back in the state curses found it."""
        if self.screen is None:
            return
        try:
            self.screen.keypad(False)
            curses.nocbreak()
            curses.echo()
        finally:
            self.screen = None
            curses.endwin()
        logger.debug("Managed terminal mode left")

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    @contextmanager
    def suspended(self):
        """Release the terminal for a child process, then take it back."""
        self.stop()
        try:
            yield
        finally:
            self.start()

    @contextmanager
    def line_input(self):
        """Echoing, visible-cursor mode for text entry."""
        curses.echo()
        set_cursor(1)
        try:
            yield self.screen
        finally:
            curses.noecho()
            set_cursor(0)
