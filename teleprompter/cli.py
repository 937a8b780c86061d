"""Command-line interface for the console teleprompter.

WHY: Users need one command that opens a script, scrolls it through the
terminal, and hands the keyboard over to the pace controls.

HOW: Uses argparse to accept the script path, the starting delay, the wrap
width, and the log level. Opens the script as a ScriptSource (so a missing
file fails before anything is shown), switches the terminal into single-key
mode, and runs a TeleprompterSession. Status messages go to stderr; the
script text goes to stdout.

RULES:
- Positional argument: script path (default: DEFAULT_SCRIPT from config)
- --delay is clamped into [MIN_DELAY_MS, MAX_DELAY_MS]
- Without a terminal on stdin, the script plays with no key controls
- Exit codes: 0 = session ended, 1 = error, 2 = bad arguments or
  TELEPROMPTER_LOG_LEVEL, 130 = interrupted (Ctrl+C)
- Logging goes to stderr at --log-level (default from config)
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import List, Optional

from teleprompter.config import (
    DEFAULT_DELAY_MS,
    DEFAULT_SCRIPT,
    LOG_FORMAT,
    LOG_LEVEL,
    LOG_LEVELS,
    MAX_DELAY_MS,
    MIN_DELAY_MS,
    SLOW_DOWN_KEY,
    SPEED_STEP_MS,
    SPEED_UP_KEY,
    WRAP_WIDTH,
)
from teleprompter.core.session import INPUT_LOOP, SessionResult, TeleprompterSession
from teleprompter.core.state import PlaybackState
from teleprompter.core.wrapper import ScriptSource
from teleprompter.terminal import ConsoleDisplay, TerminalKeyReader, is_interactive

logger = logging.getLogger(__name__)

KEY_HELP = "Keys: '{}' faster, '{}' slower ({} ms per press), 'x' to stop".format(
    SPEED_UP_KEY, SLOW_DOWN_KEY, SPEED_STEP_MS
)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not mix into the scrolling script on stdout.
    """
    print(msg, file=sys.stderr, flush=True)


def _describe(result: SessionResult) -> str:
    if result.error is not None:
        return "Stopped: {} loop failed ({})".format(result.ended_by, result.error)
    if result.ended_by == INPUT_LOOP:
        return "Stopped by user at {} ms per word.".format(result.delay_ms)
    return "End of script ({} ms per word).".format(result.delay_ms)


def run(
    script: str,
    delay_ms: int = DEFAULT_DELAY_MS,
    width: int = WRAP_WIDTH,
) -> SessionResult:
    """Play one script in the terminal and return how the session ended.

    Raises:
        FileNotFoundError: If the script does not exist (nothing is shown).
    """
    state = PlaybackState(delay_ms)
    with ExitStack() as stack:
        source = stack.enter_context(ScriptSource(script, width=width))
        keys = None
        if is_interactive():
            keys = stack.enter_context(TerminalKeyReader())
            _status(KEY_HELP)
        else:
            logger.info("stdin is not a terminal; playing without key controls")

        session = TeleprompterSession(state, source.tokens(), ConsoleDisplay(), keys)
        try:
            return session.run()
        finally:
            # The process is about to exit; stop an abandoned display loop
            # from writing once the script file and terminal are released.
            state.set_finished()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without touching the terminal.
    """
    parser = argparse.ArgumentParser(
        prog="teleprompter",
        description="Scroll a text file through the terminal word by word. "
                    "Press '>' to speed up, '<' to slow down, 'x' to stop.",
    )

    parser.add_argument(
        "script",
        nargs="?",
        default=DEFAULT_SCRIPT,
        help="Path to the text file to play (default: %(default)s).",
    )

    parser.add_argument(
        "--delay",
        type=int,
        default=DEFAULT_DELAY_MS,
        help="Starting pause after each word in milliseconds, "
             "{}-{} (default: %(default)s).".format(MIN_DELAY_MS, MAX_DELAY_MS),
    )

    parser.add_argument(
        "--width",
        type=int,
        default=WRAP_WIDTH,
        help="Line length after which an extra line break is added "
             "(default: %(default)s).",
    )

    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging level for stderr diagnostics (default: %(default)s).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # argparse does not check choices against a default taken from the
    # environment.
    if args.log_level not in LOG_LEVELS:
        parser.error(
            "TELEPROMPTER_LOG_LEVEL must be one of {}, got '{}'".format(
                ", ".join(LOG_LEVELS), args.log_level
            )
        )

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    if args.width < 1:
        parser.error("--width must be at least 1")

    try:
        result = run(args.script, delay_ms=args.delay, width=args.width)
    except FileNotFoundError as e:
        print("Error: Script not found: {}".format(e.filename), file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)

    _status("")
    _status(_describe(result))
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
