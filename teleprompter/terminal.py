"""Terminal collaborators: console output and single-keystroke input.

WHY: The playback loops only know how to write a token and read a key.
This module supplies the real terminal behind those two calls: output
that appends without a newline and shows up immediately, and key reads
that return on one key press without waiting for Enter or echoing it.

HOW: ConsoleDisplay writes and flushes a text stream (stdout by default).
TerminalKeyReader is a context manager: on POSIX it switches stdin into
cbreak mode with termios/tty and restores the saved attributes on exit; on
Windows it reads keys with msvcrt.getwch(), which needs no mode switch.

RULES:
- Always use TerminalKeyReader in a ``with`` block so the terminal is
  restored on every exit path, including KeyboardInterrupt
- read_key() raises EOFError when stdin is closed
- Terminal modes are only touched when stdin is a TTY
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional, TextIO

from teleprompter.core.session import Display, KeySource

if os.name == "nt":
    import msvcrt
else:
    import termios
    import tty

logger = logging.getLogger(__name__)


def is_interactive(stream: Optional[TextIO] = None) -> bool:
    """True if ``stream`` (stdin by default) is attached to a terminal."""
    stream = stream if stream is not None else sys.stdin
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


class ConsoleDisplay(Display):
    """Appends tokens to a text stream and flushes after each one."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def write(self, token: str) -> None:
        self._stream.write(token)
        self._stream.flush()


class TerminalKeyReader(KeySource):
    """Reads single keystrokes from the terminal without echo.

    WHY: The reader presses '<', '>' or 'x' while text scrolls; waiting for
    Enter or echoing the key into the scrolling text would both get in the
    way.

    HOW: __enter__ saves the terminal attributes and calls tty.setcbreak(),
    which turns off line buffering and echo. __exit__ restores the saved
    attributes with TCSADRAIN. read_key() reads one character.

    RULES:
    - Non-TTY streams are read as-is, without any mode change
    - The saved attributes are restored at most once
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._saved_attrs: Optional[List] = None

    def __enter__(self) -> "TerminalKeyReader":
        if os.name != "nt" and is_interactive(self._stream):
            fd = self._stream.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            logger.debug("Terminal switched to cbreak mode")
        return self

    def __exit__(self, *exc_info) -> None:
        if self._saved_attrs is not None:
            termios.tcsetattr(self._stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
            logger.debug("Terminal attributes restored")

    def read_key(self) -> str:
        if os.name == "nt" and self._stream is sys.stdin:
            return msvcrt.getwch()
        ch = self._stream.read(1)
        if not ch:
            raise EOFError("Keyboard input closed")
        return ch
