#!/usr/bin/env python3
"""Pomogate entry point.

Run with:
    python main.py
    python -m pomogate
"""

import sys

from pomogate.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
