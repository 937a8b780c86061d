"""Playback session: the display loop and the input loop, raced on threads.

WHY: Words must keep scrolling while the reader presses keys, and a key
read blocks until a key arrives. Running each loop on its own thread keeps
them independent; the shared PlaybackState is their only link.

HOW: run_display() pulls tokens and writes them, pausing after every word
for the current delay. run_input() blocks on one key at a time and applies
it to the state. TeleprompterSession starts both on daemon threads, each
wrapped so that its completion (normal return or exception) records a
SessionResult and sets a "first done" event. run() waits for that event and
returns; the other thread is left running in place and is reclaimed when
the process exits.

RULES:
- Tokens are written strictly in production order from one thread
- The display loop calls set_finished() once when the tokens run out
- The input loop checks is_finished() only after handling a key, so it
  stays blocked in read_key() if the display finishes first
- The losing loop is never joined or cancelled
- An exception in either loop ends the session and is reported in the
  result instead of deadlocking it
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from teleprompter.config import QUIT_KEYS, SLOW_DOWN_KEY, SPEED_STEP_MS, SPEED_UP_KEY
from teleprompter.core.state import PlaybackState

logger = logging.getLogger(__name__)

DISPLAY_LOOP = "display"
INPUT_LOOP = "input"


class Display(ABC):
    """Where tokens are shown. Must append without adding a newline."""

    @abstractmethod
    def write(self, token: str) -> None:
        """Append one token to the output."""


class KeySource(ABC):
    """Where keystrokes come from."""

    @abstractmethod
    def read_key(self) -> str:
        """Block until one key is pressed and return its character.

        Raises:
            EOFError: When no more keys can ever arrive.
        """


@dataclass
class SessionResult:
    """How a session ended.

    Attributes:
        ended_by: Name of the loop that finished first ("display" or "input").
        error: The exception that loop raised, or None if it ended normally.
        delay_ms: The delay in effect when the session ended.
    """

    ended_by: str
    error: Optional[BaseException] = None
    delay_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def handle_key(state: PlaybackState, key: str) -> bool:
    """Apply one keystroke to the playback state.

    Returns:
        True if the key is a command, False if it was ignored.
    """
    if key == SPEED_UP_KEY:
        state.update_delay(-SPEED_STEP_MS)
    elif key == SLOW_DOWN_KEY:
        state.update_delay(SPEED_STEP_MS)
    elif key in QUIT_KEYS:
        state.set_finished()
    else:
        return False
    return True


def run_display(tokens: Iterable[str], state: PlaybackState, display: Display) -> None:
    """Write tokens to the display at the pace set in ``state``.

    HOW: The loop checks the finished flag before pulling a token and again
    before writing it, so a forced stop from the input loop takes effect at
    the next word even if producing that token was slow. Word tokens are
    followed by a pause of ``state.current_delay()`` milliseconds; the pause
    ends early if the session finishes. Blank tokens (breaks) are written
    without a pause.

    RULES:
    - When the tokens run out, set_finished() is called exactly once
    - The token iterator is closed on every exit path
    """
    iterator = iter(tokens)
    written = 0
    logger.debug("Display loop started")
    try:
        while not state.is_finished():
            try:
                token = next(iterator)
            except StopIteration:
                state.set_finished()
                break
            if state.is_finished():
                break
            display.write(token)
            if token.strip():
                written += 1
                state.wait_finished(state.current_delay() / 1000.0)
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()
        logger.debug("Display loop done after %d words", written)


def run_input(keys: KeySource, state: PlaybackState) -> None:
    """Apply keystrokes to ``state`` until the session is finished."""
    logger.debug("Input loop started")
    while True:
        key = keys.read_key()
        if handle_key(state, key):
            logger.debug("Key %r -> delay %d ms", key, state.current_delay())
        if state.is_finished():
            break
    logger.debug("Input loop done")


class TeleprompterSession:
    """One run of the teleprompter, from first word to termination.

    WHY: The session is over as soon as either loop is: the text ran out, or
    the reader pressed 'x'. The other loop may be blocked (a key read, a
    pause) and there is no portable way to interrupt a blocked key read, so
    the session returns without waiting for it.

    HOW: Each loop runs in a daemon thread through _run_loop(), which
    records the first finisher under _lock and sets _done. run() waits on
    _done and returns the recorded SessionResult.

    RULES:
    - run() may be called once per session
    - keys=None runs the display loop alone (no keyboard attached)
    - A KeyboardInterrupt while waiting marks the state finished and
      propagates to the caller
    """

    def __init__(
        self,
        state: PlaybackState,
        tokens: Iterable[str],
        display: Display,
        keys: Optional[KeySource] = None,
    ) -> None:
        self.state = state
        self._tokens = tokens
        self._display = display
        self._keys = keys
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._result: Optional[SessionResult] = None
        self._started = False
        self.threads: Dict[str, threading.Thread] = {}

    def run(self) -> SessionResult:
        """Start both loops and return when the first one finishes."""
        if self._started:
            raise RuntimeError("A TeleprompterSession can only be run once")
        self._started = True

        self._start(DISPLAY_LOOP, run_display, self._tokens, self.state, self._display)
        if self._keys is not None:
            self._start(INPUT_LOOP, run_input, self._keys, self.state)

        try:
            self._done.wait()
        except KeyboardInterrupt:
            self.state.set_finished()
            raise

        if self._result is None:
            raise RuntimeError("Session ended without a result")
        logger.info(
            "Session ended by %s loop (delay %d ms)",
            self._result.ended_by,
            self._result.delay_ms,
        )
        return self._result

    def _start(self, name: str, target: Callable[..., None], *args: Any) -> None:
        thread = threading.Thread(
            target=self._run_loop,
            args=(name, target, args),
            name="teleprompter-{}".format(name),
            daemon=True,
        )
        self.threads[name] = thread
        thread.start()

    def _run_loop(self, name: str, target: Callable[..., None], args: tuple) -> None:
        error: Optional[BaseException] = None
        try:
            target(*args)
        except Exception as e:
            error = e
            if self._done.is_set():
                # The session is already over; the file or terminal this
                # loop was using may have been released under it.
                logger.debug("%s loop stopped after session end: %s", name, e)
            else:
                logger.exception("%s loop failed", name)
        finally:
            with self._lock:
                if self._result is None:
                    self._result = SessionResult(
                        ended_by=name,
                        error=error,
                        delay_ms=self.state.current_delay(),
                    )
                    self._done.set()
