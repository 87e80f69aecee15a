"""
connectfour.data - Persistence for Connect Four sessions

This package saves and restores game sessions so a game can be resumed.
"""

__all__ = []
