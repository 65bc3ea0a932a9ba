"""
Curses menu: pick a download mode, type a URL, hand the terminal to yt-dlp.
"""

import curses
import subprocess
import sys
from typing import List, Optional

from .commands import Mode
from .download import read_key, report_launch_failure, run_download
from .exceptions import DownloadError
from .logger import get_logger

logger = get_logger(__name__)

MENU_ITEMS: List[str] = [mode.label for mode in Mode] + ["Quit"]
QUIT_INDEX = len(MENU_ITEMS) - 1

TITLE = "yt-dlp Download Manager"
TITLE_RULE = "=" * len(TITLE)
INSTRUCTIONS = "Use UP/DOWN arrows to navigate, ENTER to select, Q to quit"
URL_PROMPT = "Enter URL (ESC to cancel):"

MENU_TOP = 4
INPUT_X = 5

ESC = 27
ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)
QUIT_KEYS = (ord('q'), ord('Q'))


def move_selection(index, delta):
    """Move the menu selection, wrapping around at both ends."""
    return (index + delta + len(MENU_ITEMS)) % len(MENU_ITEMS)


def put(screen, y, x, text, attr=0):
    """Write text clipped to the screen; writes that fall outside are dropped."""
    max_y, max_x = screen.getmaxyx()
    if y < 0 or y >= max_y:
        return
    x = max(0, x)
    width = max_x - x
    if width <= 0:
        return
    try:
        screen.addnstr(y, x, text, width, attr)
    except curses.error:
        # curses reports an error after writing the bottom-right cell
        pass


class LineEditor:
    """Single-line text buffer with a cursor, driven by curses key codes."""

    SUBMIT = "submit"
    CANCEL = "cancel"

    def __init__(self, text=""):
        self.chars = list(text)
        self.cursor = len(self.chars)

    @property
    def text(self):
        return "".join(self.chars)

    def insert(self, char):
        self.chars.insert(self.cursor, char)
        self.cursor += 1

    def backspace(self):
        if self.cursor > 0:
            del self.chars[self.cursor - 1]
            self.cursor -= 1

    def move_left(self):
        if self.cursor > 0:
            self.cursor -= 1

    def move_right(self):
        if self.cursor < len(self.chars):
            self.cursor += 1

    def handle_key(self, key) -> Optional[str]:
        """Apply one key. Returns SUBMIT or CANCEL when editing is over."""
        if key == ESC:
            return self.CANCEL
        if key in ENTER_KEYS:
            return self.SUBMIT
        if key in BACKSPACE_KEYS:
            self.backspace()
        elif key == curses.KEY_LEFT:
            self.move_left()
        elif key == curses.KEY_RIGHT:
            self.move_right()
        elif 32 <= key <= 126:
            self.insert(chr(key))
        return None

    def visible(self, width):
        """Return (offset, text) of the slice that keeps the cursor on screen."""
        if width <= 0:
            return self.cursor, ""
        offset = max(0, self.cursor - width + 1)
        return offset, self.text[offset:offset + width]


class DownloadMenu:
    def __init__(self, session, paths, popen=subprocess.Popen, wait_key=read_key, out=None):
        self.session = session
        self.paths = paths
        self.popen = popen
        self.wait_key = wait_key
        self.out = out or sys.stdout
        self.selected_index = 0
        self.running = False

    @property
    def screen(self):
        # A new window object is created every time the session restarts
        return self.session.screen

    def run(self):
        """Show the menu until the user quits."""
        logger.info("Menu started")
        self.running = True
        while self.running:
            self.draw_menu()
            self.handle_key(self.screen.getch())
        logger.info("Menu closed")

    def handle_key(self, key):
        if key == curses.KEY_UP:
            self.selected_index = move_selection(self.selected_index, -1)
        elif key == curses.KEY_DOWN:
            self.selected_index = move_selection(self.selected_index, 1)
        elif key in ENTER_KEYS:
            self.select(self.selected_index)
        elif key in QUIT_KEYS:
            self.running = False

    def select(self, index):
        if index == QUIT_INDEX:
            self.running = False
            return

        url = self.prompt_url()
        if url is None or not url.strip():
            logger.debug("URL prompt cancelled or empty")
            return
        self.execute_mode(Mode(index), url)

    def draw_menu(self):
        screen = self.screen
        screen.clear()
        max_y, max_x = screen.getmaxyx()

        put(screen, 1, (max_x - len(TITLE)) // 2, TITLE)
        put(screen, 2, (max_x - len(TITLE_RULE)) // 2, TITLE_RULE)

        for i, label in enumerate(MENU_ITEMS):
            selected = i == self.selected_index
            prefix = " > " if selected else "   "
            item = f"{prefix}{i + 1}. {label}"
            attr = curses.A_REVERSE if selected else curses.A_NORMAL
            put(screen, MENU_TOP + i, (max_x - len(item)) // 2 - 5, item, attr)

        put(screen, max_y - 2, (max_x - len(INSTRUCTIONS)) // 2, INSTRUCTIONS)
        screen.refresh()

    def prompt_url(self) -> Optional[str]:
        """
        Read a URL on a cleared screen.

        Returns:
            The entered text (possibly blank), or None if ESC was pressed
        """
        screen = self.screen
        screen.clear()
        max_y, max_x = screen.getmaxyx()
        put(screen, max_y // 2 - 1, (max_x - len(URL_PROMPT)) // 2, URL_PROMPT)

        input_y = max_y // 2 + 1
        width = max_x - INPUT_X - 1
        editor = LineEditor()

        with self.session.line_input():
            while True:
                offset, text = editor.visible(width)
                screen.move(input_y, INPUT_X)
                screen.clrtoeol()
                put(screen, input_y, INPUT_X, text)
                screen.move(input_y, INPUT_X + editor.cursor - offset)
                screen.refresh()

                result = editor.handle_key(screen.getch())
                if result == LineEditor.CANCEL:
                    return None
                if result == LineEditor.SUBMIT:
                    return editor.text

    def execute_mode(self, mode, url):
        """Hand the terminal to yt-dlp for one download, then restore the menu."""
        with self.session.suspended():
            try:
                run_download(mode, url, self.paths,
                             popen=self.popen, wait_key=self.wait_key, out=self.out)
            except DownloadError as e:
                report_launch_failure(e, self.wait_key, self.out)
