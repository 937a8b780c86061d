"""Shared playback state for the display and input loops.

WHY: The display loop reads the current delay before every pause while the
input loop changes it on key presses, and either loop may end the session.
These two threads need one small, synchronized object to talk through.

HOW: PlaybackState keeps the delay behind a threading.Lock (updates are a
read-modify-write) and the finished flag in a threading.Event (one-way,
already thread-safe, and waitable). The object is created by the caller and
passed to both loops explicitly.

RULES:
- delay_ms is always within [MIN_DELAY_MS, MAX_DELAY_MS]; out-of-range
  updates are clamped, never rejected
- finished only goes False -> True; set_finished() is idempotent
- No operation blocks except wait_finished(), which is bounded by its timeout
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from teleprompter.config import DEFAULT_DELAY_MS, MAX_DELAY_MS, MIN_DELAY_MS

logger = logging.getLogger(__name__)


def clamp_delay(delay_ms: int) -> int:
    """Clamp a delay into [MIN_DELAY_MS, MAX_DELAY_MS]."""
    return max(MIN_DELAY_MS, min(delay_ms, MAX_DELAY_MS))


class PlaybackState:
    """Thread-safe delay and finished flag for one teleprompter session.

    WHY: Both loops run on their own threads. Without a lock, two quick key
    presses racing a read could lose an update or observe a half-applied
    change.

    HOW: _lock guards _delay_ms. _finished is a threading.Event, which gives
    the monotonic flag and lets the display loop sleep until either the
    delay passes or the session is finished.

    RULES:
    - Create one instance per session and pass it to both loops
    - The initial delay is clamped into bounds like any other update
    """

    def __init__(self, delay_ms: int = DEFAULT_DELAY_MS) -> None:
        self._lock = threading.Lock()
        self._delay_ms = clamp_delay(delay_ms)
        self._finished = threading.Event()

    def update_delay(self, increment_ms: int) -> int:
        """Change the delay by ``increment_ms`` and return the new value.

        A negative increment speeds playback up, a positive one slows it
        down. Results outside the bounds are clamped silently.
        """
        with self._lock:
            self._delay_ms = clamp_delay(self._delay_ms + increment_ms)
            delay_ms = self._delay_ms
        logger.debug("Delay changed by %+d ms to %d ms", increment_ms, delay_ms)
        return delay_ms

    def current_delay(self) -> int:
        with self._lock:
            return self._delay_ms

    def set_finished(self) -> None:
        if not self._finished.is_set():
            logger.debug("Playback finished")
        self._finished.set()

    def is_finished(self) -> bool:
        return self._finished.is_set()

    def wait_finished(self, timeout_s: Optional[float] = None) -> bool:
        """Block until finished or until ``timeout_s`` seconds have passed.

        Returns:
            True if the session is finished, False on timeout.
        """
        return self._finished.wait(timeout_s)

    def __repr__(self) -> str:
        return "PlaybackState(delay_ms={}, finished={})".format(
            self.current_delay(), self.is_finished()
        )
