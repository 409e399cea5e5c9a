#!/usr/bin/env python3
"""hollow - A distraction-free writing app.

Usage:
    python main.py [--width N] [--no-autosave] [filename]

Controls:
    Type to write; Escape switches to navigate mode, i switches back
    Ctrl-S: Save file
    Ctrl-Q: Quit (prompts to save if modified)
    ?: Help (navigate mode)
"""

from hollow.__main__ import main


if __name__ == "__main__":
    main()
