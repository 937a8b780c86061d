"""Word wrapper: turns text lines into a lazy stream of display tokens.

WHY: The display loop shows one word at a time and pauses between words,
so it needs the script as a flat sequence of words and line breaks rather
than as whole lines. Long source lines also need extra breaks so the text
stays readable in a normal-width terminal.

HOW: wrap_lines() walks the source lines in order, splits each on single
spaces, and yields every word with one trailing space. A running line
length decides when to insert an extra break. ScriptSource opens the script
file up front and hands out a single-pass token stream that releases the
file when it is exhausted, closed, or abandoned.

RULES:
- A word token is the word text plus exactly one space, never a line break
- A break token is NEWLINE (the platform line separator)
- The running length resets to 0 at the start of every source line
- An extra break is emitted when the running length is strictly greater
  than the width, after the word that crossed it (words are never split)
- Every source line ends with one break, even right after a width break,
  so two consecutive breaks are possible
- An empty source line yields exactly one break and no words
- The token stream is single-pass; re-wrap by opening a new source
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union

from teleprompter.config import WRAP_WIDTH

logger = logging.getLogger(__name__)

NEWLINE = os.linesep
"""The break token."""


def is_break(token: str) -> bool:
    """True if the token is a line break rather than a word."""
    return token == NEWLINE


def wrap_lines(lines: Iterable[str], width: int = WRAP_WIDTH) -> Iterator[str]:
    """Yield word and break tokens for the given source lines.

    WHY: This is the producer side of the teleprompter. It is lazy so that
    a long script is read only as fast as it is displayed.

    HOW: For each line (trailing line terminators removed), split on single
    spaces. Yield ``word + " "`` for each word and add ``len(word) + 1`` to
    the running length; once that exceeds ``width`` yield a break and reset.
    Yield one more break at the end of every line.

    Args:
        lines: Source lines in order, e.g. an open text file.
        width: Running length after which an extra break is inserted.

    Yields:
        Word tokens and NEWLINE break tokens, in source order.
    """
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        line_length = 0

        if line:
            # Consecutive spaces produce empty words; they are kept as
            # single-space tokens so the spacing of the source survives.
            for word in line.split(" "):
                yield word + " "
                line_length += len(word) + 1
                if line_length > width:
                    yield NEWLINE
                    line_length = 0

        yield NEWLINE


def _release_after(tokens: Iterator[str], resource: IO[str]) -> Iterator[str]:
    try:
        yield from tokens
    finally:
        resource.close()


class ScriptSource:
    """A script file opened for playback, as a scoped resource.

    WHY: A missing script must be reported before anything is displayed,
    and the open file must be released even when the display loop is
    abandoned mid-stream (the session ends on 'x' without waiting for it).

    HOW: The file is opened in __init__, so FileNotFoundError surfaces at
    construction. tokens() wraps the file's lines in a generator whose
    ``finally`` closes the file. close() closes both the generator and the
    file, and the class is a context manager that calls close() on exit.

    RULES:
    - tokens() can be called once; the stream is a forward-only cursor
    - close() is idempotent
    - Leaving the ``with`` block always releases the file
    """

    def __init__(
        self,
        path: Union[str, Path],
        width: int = WRAP_WIDTH,
        encoding: str = "utf-8",
    ) -> None:
        self.path = Path(path)
        self.width = width
        self._handle: IO[str] = open(self.path, "r", encoding=encoding)
        self._tokens: Optional[Iterator[str]] = None
        logger.debug("Opened script %s (wrap width %d)", self.path, width)

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def tokens(self) -> Iterator[str]:
        """Return the single-pass token stream over the script.

        Raises:
            RuntimeError: If called a second time or after close().
        """
        if self._tokens is not None:
            raise RuntimeError("Token stream already created for {}".format(self.path))
        if self.closed:
            raise RuntimeError("Script {} is already closed".format(self.path))
        self._tokens = _release_after(wrap_lines(self._handle, self.width), self._handle)
        return self._tokens

    def close(self) -> None:
        """Release the token stream and the underlying file."""
        if self._tokens is not None:
            try:
                self._tokens.close()
            except ValueError:
                # The display thread is inside next() right now; closing
                # the file below ends its stream on the following read.
                logger.debug("Token stream for %s busy; closing file only", self.path)
        if not self._handle.closed:
            self._handle.close()
            logger.debug("Closed script %s", self.path)

    def __enter__(self) -> "ScriptSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
