"""Configuration constants, key bindings, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Delay bounds, the wrap width, and the key bindings
are plain data, not buried in the loops, so both the session code and
the tests read the same numbers.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level ints, strings, and sets. Integer overrides from the
environment are parsed by _env_int(), which names the offending variable
when a value is not a number.

RULES:
- Delay is always kept within [MIN_DELAY_MS, MAX_DELAY_MS]
- One key press changes the delay by SPEED_STEP_MS
- Settings are never written back; every run starts from these defaults
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from typing import FrozenSet

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Read an integer setting from the environment.

    RULES:
    - Missing or blank variables return the default
    - Non-integer values raise ValueError naming the variable
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got '{}'".format(name, raw)
        ) from None


# ---------------------------------------------------------------------------
# Playback pacing
# ---------------------------------------------------------------------------

MIN_DELAY_MS = 20
MAX_DELAY_MS = 1000
SPEED_STEP_MS = 10

DEFAULT_DELAY_MS = _env_int("TELEPROMPTER_DELAY_MS", 200)
"""Pause after each word at session start, before any key press."""

# ---------------------------------------------------------------------------
# Text layout
# ---------------------------------------------------------------------------

WRAP_WIDTH = _env_int("TELEPROMPTER_WRAP_WIDTH", 70)
"""Running line length after which an extra line break is emitted."""

DEFAULT_SCRIPT = os.getenv("TELEPROMPTER_SCRIPT", "sampleQuotes.txt")

# ---------------------------------------------------------------------------
# Key bindings
# ---------------------------------------------------------------------------

SPEED_UP_KEY = ">"
SLOW_DOWN_KEY = "<"
QUIT_KEYS: FrozenSet[str] = frozenset({"x", "X"})

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_LEVEL = os.getenv("TELEPROMPTER_LOG_LEVEL", "WARNING").strip().upper()
"""Checked against LOG_LEVELS by the CLI, which rejects anything else."""
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
