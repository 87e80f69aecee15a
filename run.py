#!/usr/bin/env python3
"""
run.py - Main entry point for Connect Four against the computer
"""

import sys

from connectfour.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
