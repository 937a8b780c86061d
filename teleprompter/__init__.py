"""Console teleprompter: paced word-by-word script playback in a terminal.

WHY: Reading a script aloud from a terminal is easier when the text arrives
at a steady, adjustable pace instead of all at once. This package streams
the words of a text file to the console and lets the reader change the pace
(or stop) with single keystrokes while the text is scrolling.

HOW: Three pieces, leaves first: a word wrapper that turns text lines into
a lazy token stream, a thread-safe playback state holding the current delay
and a finished flag, and a session that runs a display loop and an input
loop on separate threads and ends as soon as either of them finishes.

RULES:
- The playback state is passed explicitly to both loops, never global
- The script file is released on every exit path, including abandonment
- Key bindings: '>' faster, '<' slower, 'x'/'X' stop
"""

__version__ = "0.1.0"
