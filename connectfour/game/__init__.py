"""
connectfour.game - Core game mechanics for Connect Four

This package contains the board representation and the session that
tracks turns and results across games.
"""

from connectfour.game.board import Board

__all__ = ['Board']
