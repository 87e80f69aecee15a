"""
board.py - Board representation and drop physics for Connect Four

This module implements the Board class which holds one bitboard per side,
applies drops under gravity and reports the outcome of a position. The board
has no notion of turns or of the game being over; that policy belongs to its
callers.
"""

import numpy as np
from typing import Any, Dict, List, Optional, Tuple

from connectfour.debug import debug
from connectfour.utils import (ROWS, COLS, Cell, GameResult,
                               BOTTOM_BITS, COLUMN_BITS, TOP_BITS,
                               bit_for, has_four, grid_from_bits, is_strict_int,
                               find_winning_line, render_board_ascii)


class Board:
    """
    Represents a Connect Four game board.

    Row 0 is the top of the board; pieces settle at the highest free row index
    of their column. `moves_made` always equals the number of pieces on the grid.
    """

    def __init__(self):
        """Initialize an empty Connect Four board."""
        self._computer = 0
        self._player = 0
        self.moves_made = 0

    @property
    def grid(self) -> np.ndarray:
        """The board as a ROWS x COLS numpy array of Cell values (a fresh copy)."""
        return grid_from_bits(self._computer, self._player)

    def reset(self):
        """Reset the board to an empty state."""
        debug.debug("Resetting board", "board")
        self._computer = 0
        self._player = 0
        self.moves_made = 0

    def copy(self) -> 'Board':
        """
        Create an independent copy of the current board.

        Returns:
            A new Board instance with the same state
        """
        new_board = Board.__new__(Board)
        new_board._computer = self._computer
        new_board._player = self._player
        new_board.moves_made = self.moves_made
        return new_board

    def key(self) -> Tuple[int, int]:
        """Hashable identity of the position."""
        return self._computer, self._player

    def get_cell(self, row: int, col: int) -> Cell:
        """Get the contents of the cell at the given location."""
        if not (0 <= row < ROWS and 0 <= col < COLS):
            raise IndexError(f"Cell ({row}, {col}) is off the board")
        bit = bit_for(row, col)
        if self._computer & bit:
            return Cell.COMPUTER
        if self._player & bit:
            return Cell.PLAYER
        return Cell.EMPTY

    def num_moves_made(self) -> int:
        """Get the number of pieces dropped so far."""
        return self.moves_made

    def is_full(self) -> bool:
        """Check whether every column is full."""
        return self.moves_made == ROWS * COLS

    def valid_moves(self) -> List[int]:
        """
        Get a list of columns that can still take a piece.

        Returns:
            List of column indices in ascending order
        """
        occupied = self._computer | self._player
        return [col for col in range(COLS) if not occupied & TOP_BITS[col]]

    def drop(self, column: int, side: Cell) -> bool:
        """
        Drop a piece for `side` into `column`.

        Args:
            column: The column to place a piece (0-indexed)
            side: Cell.COMPUTER or Cell.PLAYER

        Returns:
            True if the piece was placed, False if the column is out of range or full
        """
        if side == Cell.EMPTY:
            raise ValueError("Only a side can be dropped, not an empty cell")

        if not (0 <= column < COLS):
            return False

        occupied = self._computer | self._player
        if occupied & TOP_BITS[column]:
            return False

        # Adding the bottom bit carries through the filled cells to the first free one
        new_bit = (occupied + BOTTOM_BITS[column]) & COLUMN_BITS[column] & ~occupied
        if side == Cell.COMPUTER:
            self._computer |= new_bit
        else:
            self._player |= new_bit
        self.moves_made += 1
        return True

    def computer_move(self, column: int) -> bool:
        """Drop a computer piece into `column`."""
        return self.drop(column, Cell.COMPUTER)

    def player_move(self, column: int) -> bool:
        """Drop a player piece into `column`."""
        return self.drop(column, Cell.PLAYER)

    def check_winner(self) -> Optional[GameResult]:
        """
        Work out the outcome of the position from scratch.

        Every cell is considered as the start of a run in all four directions,
        so any valid board can be checked regardless of how it was reached.

        Returns:
            The game result, or None if the game is still in progress
        """
        if has_four(self._computer):
            return GameResult.COMPUTER_WINS
        if has_four(self._player):
            return GameResult.PLAYER_WINS
        if self.is_full():
            return GameResult.DRAW
        return None

    def winning_line(self) -> List[Tuple[int, int]]:
        """
        Get the positions of a winning line.

        Returns:
            List of (row, col) positions forming the line, or empty list if no win
        """
        return find_winning_line(self.grid)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot the board as plain data suitable for JSON."""
        return {
            "cells": self.grid.tolist(),
            "moves_made": self.moves_made,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Board':
        """
        Rebuild a board from a snapshot produced by `to_dict`.

        Raises:
            ValueError: If the snapshot does not describe a reachable grid
        """
        try:
            raw_cells = data["cells"]
            moves_made = data["moves_made"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed board snapshot: {e}") from e

        if not is_strict_int(moves_made):
            raise ValueError(f"Board snapshot move count must be an integer, got {moves_made!r}")
        if not isinstance(raw_cells, list) or not all(isinstance(row, list) for row in raw_cells):
            raise ValueError("Board snapshot cells must be a list of rows")
        if not all(is_strict_int(value) for row in raw_cells for value in row):
            raise ValueError("Board snapshot cells must be integers")

        try:
            cells = np.array(raw_cells, dtype=np.int64)
        except ValueError as e:
            raise ValueError(f"Malformed board snapshot: {e}") from e

        if cells.shape != (ROWS, COLS):
            raise ValueError(f"Board snapshot must be {ROWS}x{COLS}, got {cells.shape}")

        allowed = [cell.value for cell in Cell]
        if not np.isin(cells, allowed).all():
            raise ValueError("Board snapshot contains unknown cell values")

        occupied = cells != Cell.EMPTY.value
        # Once a column has a piece, every row below it must be filled too
        if (occupied[:-1] & ~occupied[1:]).any():
            raise ValueError("Board snapshot has a piece above an empty cell")

        if moves_made != int(occupied.sum()):
            raise ValueError(
                f"Board snapshot claims {moves_made} moves but holds {int(occupied.sum())} pieces")

        board = cls()
        for row, col in np.argwhere(cells == Cell.COMPUTER.value):
            board._computer |= bit_for(int(row), int(col))
        for row, col in np.argwhere(cells == Cell.PLAYER.value):
            board._player |= bit_for(int(row), int(col))
        board.moves_made = moves_made
        return board

    def render(self, highlight_win: bool = False) -> str:
        """
        Render the board as a string.

        Args:
            highlight_win: Mark the winning line with '*'

        Returns:
            String representation of the board
        """
        line = self.winning_line() if highlight_win else None
        return render_board_ascii(self.grid, line)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.moves_made == other.moves_made and self.key() == other.key()

    def __str__(self) -> str:
        """String representation of the board."""
        return self.render()

    def __repr__(self) -> str:
        return f"Board(moves_made={self.moves_made})"
