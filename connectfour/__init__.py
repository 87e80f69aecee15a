"""
connectfour - Connect Four against a lookahead computer opponent

This package provides the board model, the move search for the computer side,
session tracking with JSON persistence, and a command-line interface.
"""

# Version number
__version__ = '0.1.0'
