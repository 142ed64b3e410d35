#!/usr/bin/env python3
"""
textfish - fish that swim behind your text

Usage:
    python main.py FILE                  # Open FILE with fish swimming behind it
    python main.py FILE --behaviour sine # Pick a behaviour preset
    python main.py diag FILE --col 4     # Show how a sprite is clipped
"""

import sys

from textfish.cli import main


if __name__ == "__main__":
    sys.exit(main())
