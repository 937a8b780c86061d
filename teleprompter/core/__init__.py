"""Core playback modules: word wrapping, shared state, and the session.

WHY: The core package holds the part of the teleprompter with real design
content: the producer that turns text into display tokens, the state
shared between the two loops, and the session that races them.

HOW: wrapper.py builds the lazy token stream from text lines, state.py
defines the lock-guarded PlaybackState, session.py runs the display and
input loops on their own threads and returns when the first one ends.

RULES:
- Core modules never touch sys.stdin/sys.stdout directly; the terminal
  collaborators are injected
- PlaybackState is the only object mutated by more than one thread
"""
