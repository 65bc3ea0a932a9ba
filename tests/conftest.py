import subprocess
from contextlib import contextmanager
from pathlib import Path

import pytest

from ytdlpcurses.config import ToolPaths


class KeysExhausted(Exception):
    pass


class FakeScreen:
    """Stand-in for a curses window that replays a list of key codes."""

    def __init__(self, keys=(), size=(24, 80)):
        self.keys = list(keys)
        self.size = size
        self.writes = []
        self.clears = 0
        self.cursor = None

    def getmaxyx(self):
        return self.size

    def getch(self):
        if not self.keys:
            raise KeysExhausted()
        return self.keys.pop(0)

    def addnstr(self, y, x, text, n, attr=0):
        self.writes.append((y, x, text[:n], attr))

    def clear(self):
        self.clears += 1
        self.writes = []

    def move(self, y, x):
        self.cursor = (y, x)

    def clrtoeol(self):
        pass

    def refresh(self):
        pass

    def text_at(self, y):
        return "".join(text for row, _, text, _ in self.writes if row == y)


class FakeSession:
    def __init__(self, screen):
        self.screen = screen
        self.events = []

    @contextmanager
    def suspended(self):
        self.events.append("suspend")
        try:
            yield
        finally:
            self.events.append("resume")

    @contextmanager
    def line_input(self):
        self.events.append("input-start")
        try:
            yield self.screen
        finally:
            self.events.append("input-end")


class FakeProcess:
    def __init__(self, returncode=0, interrupt=False, hang=False, interrupt_stop=False):
        self.pid = 4242
        self.returncode = returncode
        self.interrupt = interrupt
        self.hang = hang
        self.interrupt_stop = interrupt_stop
        self.terminated = False
        self.killed = False

    def wait(self, timeout=None):
        if self.interrupt:
            self.interrupt = False
            raise KeyboardInterrupt()
        if self.terminated and self.interrupt_stop and timeout is not None:
            self.interrupt_stop = False
            raise KeyboardInterrupt()
        if self.terminated and self.hang and not self.killed:
            raise subprocess.TimeoutExpired("yt-dlp", timeout)
        return self.returncode

    def terminate(self):
        self.terminated = True

    def kill(self):
        self.killed = True


class FakePopen:
    """Records launched commands and hands out prepared processes."""

    def __init__(self, process=None, error=None):
        self.process = process or FakeProcess()
        self.error = error
        self.commands = []

    def __call__(self, command):
        self.commands.append(list(command))
        if self.error is not None:
            raise self.error
        return self.process


@pytest.fixture
def paths():
    return ToolPaths.defaults(home="/home/user")


@pytest.fixture
def fake_popen():
    return FakePopen()


@pytest.fixture
def key_presses():
    presses = []

    def wait_key():
        presses.append(True)
        return " "

    wait_key.presses = presses
    return wait_key
