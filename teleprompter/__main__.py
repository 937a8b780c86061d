"""Package entry point for ``python -m teleprompter``.

WHY: Users run the teleprompter as ``python -m teleprompter script.txt``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

if __name__ == "__main__":
    from teleprompter.cli import main
    main()
