"""
search.py - Depth-limited lookahead for the computer side of Connect Four

The computer is modelled as playing its best move, while the human is modelled
as taking any move that ends the game immediately and otherwise as an average
over all of their replies. Scores are always from the computer's point of view.
"""

import math
from typing import Optional, Tuple

from connectfour.debug import debug
from connectfour.utils import COLS, GameResult
from connectfour.game.board import Board
from connectfour.ai.transposition import TranspositionTable

# How many plies into the future are searched
MAX_DEPTH = 8

# Larger than any possible move count, so every win outscores every draw or loss
BASE_SCORE = 100


def score_board(board: Board) -> Optional[float]:
    """
    Score a decided board from the computer's point of view.

    Winning in fewer moves scores higher and losing in more moves scores
    higher, so the computer prefers quick wins and drawn-out losses.

    Args:
        board: The board to score

    Returns:
        The score, or None if the game is still in progress
    """
    result = board.check_winner()
    if result == GameResult.COMPUTER_WINS:
        return float(BASE_SCORE - board.num_moves_made())
    if result == GameResult.DRAW:
        return 0.0
    if result == GameResult.PLAYER_WINS:
        return float(board.num_moves_made() - BASE_SCORE)
    return None


class LookaheadPlayer:
    """
    Chooses computer moves by searching a fixed number of plies ahead.

    The search never touches the board it is given; every branch is explored
    on its own copy.
    Positions reached through different move orders are only searched once
    per call to `get_move`.
    """

    def __init__(self, depth: int = MAX_DEPTH):
        """
        Initialize the lookahead player.

        Args:
            depth: Number of plies to search
        """
        self.depth = depth
        self.nodes_evaluated = 0  # For performance tracking
        # Separate tables, the same position is scored differently by each side
        self.computer_table = TranspositionTable()
        self.player_table = TranspositionTable()

    def get_move(self, board: Board) -> int:
        """
        Get the best column for the computer without changing `board`.

        Args:
            board: The current game board

        Returns:
            The column index of the chosen move

        Raises:
            ValueError: If the game on `board` is already decided
        """
        result = board.check_winner()
        if result is not None:
            raise ValueError(f"Cannot choose a move, game is already decided ({result.name})")

        self.nodes_evaluated = 0
        self.computer_table.reset()
        self.player_table.reset()
        debug.start_timer("search")
        column, score = self.best_computer_move(board, self.depth)
        elapsed = debug.end_timer("search", "search")

        debug.info(f"Chose column {column} (score {score:.3f}, {self.nodes_evaluated} nodes, "
                   f"{self.computer_table.hits + self.player_table.hits} table hits, "
                   f"{elapsed or 0.0:.3f}s)", "search")
        return column

    def make_move(self, board: Board) -> bool:
        """
        Play the computer's move on `board` in place.

        Does nothing on a board whose game is already decided.

        Returns:
            True if a piece was dropped
        """
        if board.check_winner() is not None:
            debug.debug("Game already decided, not moving", "search")
            return False
        return board.computer_move(self.get_move(board))

    def best_computer_move(self, board: Board, remaining_depth: int) -> Tuple[int, float]:
        """
        Find the computer's best scoring column.

        Columns are tried left to right and only a strictly better score
        replaces the current best, so ties go to the leftmost column.

        Args:
            board: Board with the computer to move
            remaining_depth: Plies left to search

        Returns:
            Tuple of (best column, best score)
        """
        if remaining_depth <= 0:
            return 0, 0.0

        key = board.key() + (remaining_depth,)
        cached = self.computer_table.get(key)
        if cached is not None:
            return cached

        best_column = 0
        best_score = -math.inf

        for column in range(COLS):
            new_board = board.copy()
            if not new_board.computer_move(column):
                continue

            self.nodes_evaluated += 1
            score = score_board(new_board)
            if score is None:
                score = self.simulate_player_move(new_board, remaining_depth - 1)

            if score > best_score:
                best_score = score
                best_column = column

        self.computer_table.put(key, (best_column, best_score))
        return best_column, best_score

    def simulate_player_move(self, board: Board, remaining_depth: int) -> float:
        """
        Estimate the position after the human replies.

        If any reply ends the game the human is assumed to play it and its
        score is returned at once. Otherwise the result is the mean of the
        computer's best score after each reply.

        Args:
            board: Board with the human to move
            remaining_depth: Plies left to search

        Returns:
            The estimated score
        """
        key = board.key() + (remaining_depth,)
        cached = self.player_table.get(key)
        if cached is not None:
            return cached

        score_sum = 0.0
        count = 0

        for column in range(COLS):
            new_board = board.copy()
            if not new_board.player_move(column):
                continue

            self.nodes_evaluated += 1
            score = score_board(new_board)
            if score is not None:
                self.player_table.put(key, score)
                return score

            _, score = self.best_computer_move(new_board, remaining_depth - 1)
            score_sum += score
            count += 1

        if count == 0:
            # Only reachable on a full board, which callers score as a draw first
            debug.warning("No legal replies to simulate, scoring as a draw", "search")
            return 0.0

        score = score_sum / count
        self.player_table.put(key, score)
        return score


# Shared default-depth player for the module level helpers
_default_player = LookaheadPlayer()


def best_move(board: Board) -> int:
    """Get the computer's column for `board` at the default depth."""
    return _default_player.get_move(board)


def make_move(board: Board) -> bool:
    """Play the computer's move on `board` at the default depth."""
    return _default_player.make_move(board)
