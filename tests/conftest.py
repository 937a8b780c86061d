"""Shared test fixtures and fakes for the teleprompter test suite.

WHY: The session tests drive two real threads, so they need stand-ins for
the terminal that are deterministic: a display that records what it was
given and a key source that replays a fixed list of keys.

HOW: RecordingDisplay collects written tokens and sets an event once the
first word arrives. ScriptedKeys returns keys from a list, optionally
waiting for an event before the first one, and then either blocks (like a
real keyboard nobody touches) or raises EOFError.

RULES:
- Blocking fakes are released in fixture teardown so no test leaves a
  thread waiting forever
- Sessions in tests use the minimum delay to stay fast
"""

from __future__ import annotations

import threading
from typing import Iterable, List, Optional

import pytest

from teleprompter.config import MIN_DELAY_MS
from teleprompter.core.session import Display, KeySource
from teleprompter.core.state import PlaybackState


class RecordingDisplay(Display):
    """Display that keeps every token it is given."""

    def __init__(self) -> None:
        self.tokens: List[str] = []
        self.first_word = threading.Event()

    def write(self, token: str) -> None:
        self.tokens.append(token)
        if token.strip():
            self.first_word.set()

    @property
    def words(self) -> List[str]:
        return [t for t in self.tokens if t.strip()]


class ScriptedKeys(KeySource):
    """Key source that replays a fixed list of keys."""

    def __init__(
        self,
        keys: Iterable[str],
        wait_for: Optional[threading.Event] = None,
        block_when_drained: bool = True,
    ) -> None:
        self._keys = list(keys)
        self._wait_for = wait_for
        self._block = block_when_drained
        self.release = threading.Event()
        self.read_count = 0

    def read_key(self) -> str:
        if self._wait_for is not None:
            self._wait_for.wait(5.0)
            self._wait_for = None
        if self._keys:
            self.read_count += 1
            return self._keys.pop(0)
        if self._block:
            self.release.wait()
        raise EOFError("No more scripted keys")


class RecordingState(PlaybackState):
    """PlaybackState that records pauses instead of sleeping."""

    def __init__(self, delay_ms: int = 200) -> None:
        super().__init__(delay_ms)
        self.pauses: List[float] = []

    def wait_finished(self, timeout_s: Optional[float] = None) -> bool:
        self.pauses.append(timeout_s)
        return self.is_finished()


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def fast_state():
    """Playback state at the minimum delay."""
    return PlaybackState(MIN_DELAY_MS)


@pytest.fixture
def scripted_keys():
    """Factory for ScriptedKeys; blocked readers are released on teardown."""
    created: List[ScriptedKeys] = []

    def _make(keys, **kwargs) -> ScriptedKeys:
        fake = ScriptedKeys(keys, **kwargs)
        created.append(fake)
        return fake

    yield _make
    for fake in created:
        fake.release.set()


@pytest.fixture
def write_script(tmp_path):
    """Write lines to a UTF-8 script file and return its path."""

    def _write(*lines: str, name: str = "script.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def recording_state():
    """The RecordingState class, for tests that drive run_display() directly."""
    return RecordingState
