"""
utils.py - Constants, enumerations and grid helpers for Connect Four

This module provides the board dimensions, the cell and outcome enumerations,
and the numpy helpers used to find four-in-a-row runs and render a grid.
"""

from enum import Enum, auto
from typing import List, Optional, Tuple
import numpy as np

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win


class Cell(Enum):
    """Enumeration representing cell contents and the two sides."""
    EMPTY = 0
    COMPUTER = 1
    PLAYER = 2

    def other(self) -> 'Cell':
        """Get the opposing side."""
        if self == Cell.COMPUTER:
            return Cell.PLAYER
        elif self == Cell.PLAYER:
            return Cell.COMPUTER
        return Cell.EMPTY

    def __str__(self):
        if self == Cell.EMPTY:
            return " "
        elif self == Cell.COMPUTER:
            return "O"
        else:
            return "X"


class GameResult(Enum):
    """Enumeration representing a decided game."""
    COMPUTER_WINS = auto()
    PLAYER_WINS = auto()
    DRAW = auto()

    @classmethod
    def win_for(cls, side: Cell) -> 'GameResult':
        """Get the result for a win by the given side."""
        if side == Cell.COMPUTER:
            return cls.COMPUTER_WINS
        if side == Cell.PLAYER:
            return cls.PLAYER_WINS
        raise ValueError(f"No result for a win by {side!r}")


class Direction(Enum):
    """Enumeration representing directions for win checking."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()  # Diagonal from bottom-left to top-right
    DIAGONAL_DOWN = auto()  # Diagonal from top-left to bottom-right


# Direction vectors (row, col) for each direction; row 0 is the top of the board
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_UP: (-1, 1),
    Direction.DIAGONAL_DOWN: (1, 1)
}


# Bitboard layout: each column owns HEIGHT bits, bottom row first. The extra
# bit on top of every column stays empty so runs never wrap between columns.
HEIGHT = ROWS + 1
BOTTOM_BITS = [1 << (col * HEIGHT) for col in range(COLS)]
TOP_BITS = [1 << (col * HEIGHT + ROWS - 1) for col in range(COLS)]
COLUMN_BITS = [((1 << ROWS) - 1) << (col * HEIGHT) for col in range(COLS)]

# Bit shifts for vertical, horizontal and both diagonal neighbours
BIT_SHIFTS = (1, HEIGHT, HEIGHT - 1, HEIGHT + 1)


def is_strict_int(value) -> bool:
    """Check for a real integer (JSON numbers like 1.5 or true do not count)."""
    return isinstance(value, int) and not isinstance(value, bool)


def bit_for(row: int, col: int) -> int:
    """
    Get the bitboard bit of a grid position.

    Args:
        row: Row index, 0 being the top row
        col: Column index

    Returns:
        Integer with only that position's bit set
    """
    return 1 << (col * HEIGHT + ROWS - 1 - row)


def has_four(bits: int) -> bool:
    """
    Check a single side's bitboard for CONNECT_N pieces in a row.

    Every position is covered in all four directions at once: pairing each
    piece with its neighbour and then pairing the pairs leaves a bit set
    exactly where four line up.
    """
    for shift in BIT_SHIFTS:
        pairs = bits & (bits >> shift)
        if pairs & (pairs >> (2 * shift)):
            return True
    return False


def grid_from_bits(computer_bits: int, player_bits: int) -> np.ndarray:
    """
    Expand two bitboards into a numpy grid of Cell values.

    Returns:
        ROWS x COLS array with row 0 at the top
    """
    grid = np.zeros((ROWS, COLS), dtype=np.int8)
    for row in range(ROWS):
        for col in range(COLS):
            bit = bit_for(row, col)
            if computer_bits & bit:
                grid[row, col] = Cell.COMPUTER.value
            elif player_bits & bit:
                grid[row, col] = Cell.PLAYER.value
    return grid


def _window_span(length: int, delta: int, offset: int) -> slice:
    """Slice covering cell `offset` of every run that fits along one axis."""
    reach = CONNECT_N - 1
    low = reach if delta < 0 else 0
    high = length - reach if delta > 0 else length
    return slice(low + offset * delta, high + offset * delta)


def _run_starts(grid: np.ndarray, dr: int, dc: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Find every run of CONNECT_N identical pieces in one direction.

    Returns:
        The first cell of each candidate run and a mask of which candidates are runs
    """
    first = grid[_window_span(ROWS, dr, 0), _window_span(COLS, dc, 0)]
    mask = first != Cell.EMPTY.value
    for offset in range(1, CONNECT_N):
        mask &= grid[_window_span(ROWS, dr, offset), _window_span(COLS, dc, offset)] == first
    return first, mask


def find_winning_line(grid: np.ndarray) -> List[Tuple[int, int]]:
    """
    Locate the first winning run on the grid.

    Args:
        grid: The board grid

    Returns:
        List of (row, col) positions of the run, or empty list if there is none
    """
    for dr, dc in DIRECTION_VECTORS.values():
        _, mask = _run_starts(grid, dr, dc)
        hits = np.argwhere(mask)
        if len(hits):
            row = int(hits[0][0]) + _window_span(ROWS, dr, 0).start
            col = int(hits[0][1]) + _window_span(COLS, dc, 0).start
            return [(row + i * dr, col + i * dc) for i in range(CONNECT_N)]
    return []


def render_board_ascii(grid: np.ndarray, highlight: Optional[List[Tuple[int, int]]] = None) -> str:
    """
    Render the board as ASCII art.

    Args:
        grid: The board grid
        highlight: Optional positions drawn with '*' (e.g. a winning line)

    Returns:
        ASCII representation of the board
    """
    marked = set(highlight or [])
    result = ["|" + "-" * (COLS * 2 - 1) + "|"]

    for row in range(ROWS):
        glyphs = []
        for col in range(COLS):
            if (row, col) in marked:
                glyphs.append("*")
            else:
                glyphs.append(str(Cell(int(grid[row, col]))))
        result.append("|" + " ".join(glyphs) + "|")

    result.append("|" + "-" * (COLS * 2 - 1) + "|")
    result.append("|" + " ".join(str(i) for i in range(COLS)) + "|")

    return "\n".join(result)
