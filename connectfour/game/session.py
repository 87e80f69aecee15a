"""
session.py - Turn tracking and tallies for games against the computer

A GameSession owns the board of the current game, knows whose move is
expected, alternates the starting side between games and keeps the human's
win/loss record.
"""

from enum import Enum
from typing import Any, Dict, Optional

from connectfour.debug import debug
from connectfour.utils import GameResult, is_strict_int
from connectfour.game.board import Board
from connectfour.ai.search import LookaheadPlayer


class Turn(Enum):
    """Which side the session expects to move next."""
    PLAYER = "player"
    COMPUTER = "computer"

    def other(self) -> 'Turn':
        return Turn.COMPUTER if self == Turn.PLAYER else Turn.PLAYER


class GameSession:
    """
    A sequence of games between the human and the computer.
    """

    def __init__(self):
        self.board = Board()
        self.turn = Turn.PLAYER
        self.who_starts = Turn.PLAYER
        self.wins = 0
        self.losses = 0

    def result(self) -> Optional[GameResult]:
        """Get the outcome of the current game, or None while it is running."""
        return self.board.check_winner()

    def is_over(self) -> bool:
        return self.result() is not None

    def play_column(self, column: int) -> bool:
        """
        Apply the human's move.

        Args:
            column: The column to drop into

        Returns:
            True if the move was accepted
        """
        if self.turn != Turn.PLAYER or self.is_over():
            debug.debug(f"Ignoring player move in column {column}", "session")
            return False

        if not self.board.player_move(column):
            debug.debug(f"Player move in column {column} rejected", "session")
            return False

        debug.trace(f"Player dropped into column {column}, move {self.board.num_moves_made()}", "session")
        self.turn = Turn.COMPUTER
        self._record_result()
        return True

    def apply_computer_move(self, column: int) -> bool:
        """
        Apply a column chosen for the computer.

        Returns:
            True if the move was accepted
        """
        if self.turn != Turn.COMPUTER or self.is_over():
            debug.debug(f"Ignoring computer move in column {column}", "session")
            return False

        if not self.board.computer_move(column):
            debug.warning(f"Computer move in column {column} rejected", "session")
            return False

        debug.trace(f"Computer dropped into column {column}, move {self.board.num_moves_made()}", "session")
        self.turn = Turn.PLAYER
        self._record_result()
        return True

    def computer_turn(self, player: Optional[LookaheadPlayer] = None) -> Optional[int]:
        """
        Let the computer choose and play its move.

        The search runs on a copy, so the board only changes once the column
        has been picked.

        Args:
            player: Search to use (defaults to a full-depth LookaheadPlayer)

        Returns:
            The column played, or None if it was not the computer's move
        """
        if self.turn != Turn.COMPUTER or self.is_over():
            return None

        player = player or LookaheadPlayer()
        column = player.get_move(self.board.copy())
        if not self.apply_computer_move(column):
            return None
        return column

    def reset(self):
        """Start a new game; the side that did not start last time starts now."""
        self.board.reset()
        self.who_starts = self.who_starts.other()
        self.turn = self.who_starts
        debug.info(f"New game, {self.who_starts.value} starts", "session")

    def _record_result(self):
        result = self.result()
        if result == GameResult.PLAYER_WINS:
            self.wins += 1
        elif result == GameResult.COMPUTER_WINS:
            self.losses += 1
        if result is not None:
            debug.info(f"Game over: {result.name} after {self.board.num_moves_made()} moves "
                       f"(wins {self.wins}, losses {self.losses})", "session")

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot the session as plain data suitable for JSON."""
        return {
            "board": self.board.to_dict(),
            "turn": self.turn.value,
            "who_starts": self.who_starts.value,
            "wins": self.wins,
            "losses": self.losses,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameSession':
        """
        Rebuild a session from a snapshot produced by `to_dict`.

        Raises:
            ValueError: If the snapshot is malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Session snapshot must be a mapping")

        session = cls()
        try:
            session.board = Board.from_dict(data["board"])
            session.turn = Turn(data["turn"])
            session.who_starts = Turn(data["who_starts"])
            wins = data["wins"]
            losses = data["losses"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed session snapshot: {e}") from e

        if not (is_strict_int(wins) and is_strict_int(losses)):
            raise ValueError(f"Session tallies must be integers, got {wins!r} and {losses!r}")
        session.wins = wins
        session.losses = losses
        if session.wins < 0 or session.losses < 0:
            raise ValueError("Session tallies cannot be negative")
        return session
