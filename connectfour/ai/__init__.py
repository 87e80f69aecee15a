"""
connectfour/ai/__init__.py - Move selection for the computer side

This package provides the depth-limited lookahead that chooses the
computer's column.
"""

from connectfour.ai.search import (LookaheadPlayer, best_move, make_move,
                                   score_board, MAX_DEPTH, BASE_SCORE)

__all__ = ['LookaheadPlayer', 'best_move', 'make_move', 'score_board',
           'MAX_DEPTH', 'BASE_SCORE']
