"""
cli.py - Command-line interface for playing Connect Four against the computer

This module provides a CLI for playing a resumable game against the lookahead
search, inspecting a saved game and benchmarking the board and the search.
"""

import argparse
import random
import sys
from typing import List, Optional

from connectfour.debug import debug, DebugLevel
from connectfour.utils import COLS, Cell, GameResult
from connectfour.game.board import Board
from connectfour.game.session import GameSession, Turn
from connectfour.ai.search import LookaheadPlayer, MAX_DEPTH
from connectfour.data.storage import load_session, save_session, state_file_path

QUIT = -1
RESTART = -2

RESULT_MESSAGES = {
    GameResult.PLAYER_WINS: "You won!!",
    GameResult.COMPUTER_WINS: "Oh no, you have lost.",
    GameResult.DRAW: "Looks like this one is a draw.",
}


class SimpleCLI:
    """Simple command-line interface for Connect Four."""

    def __init__(self, player: Optional[LookaheadPlayer] = None):
        """
        Initialize the CLI.

        Args:
            player: Search used for the computer's moves
        """
        self.player = player or LookaheadPlayer(MAX_DEPTH)
        self.session: Optional[GameSession] = None
        self.args = None

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        # Logging options are accepted after every subcommand
        logging_parser = argparse.ArgumentParser(add_help=False)
        logging_parser.add_argument('--debug-level', default='warning',
                                    choices=[level.name.lower() for level in DebugLevel],
                                    help='Logging verbosity')
        logging_parser.add_argument('--log-file', type=str, default=None,
                                    help='Also write log messages to this file')
        logging_parser.add_argument('--log-components', nargs='+', default=None,
                                    metavar='COMPONENT',
                                    help='Only log these components (board, search, session, storage, cli)')

        parser = argparse.ArgumentParser(description='Connect Four against the computer')
        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', parents=[logging_parser],
                                            help='Play a game interactively')
        play_parser.add_argument('--state', type=str, default=None,
                                 help='Session file to resume and save')
        play_parser.add_argument('--new', action='store_true',
                                 help='Start a new game instead of resuming')
        play_parser.add_argument('--debug', action='store_true', help='Enable debug mode')

        show_parser = subparsers.add_parser('show', parents=[logging_parser],
                                            help='Show the saved game')
        show_parser.add_argument('--state', type=str, default=None,
                                 help='Session file to read')

        benchmark_parser = subparsers.add_parser('benchmark', parents=[logging_parser],
                                                 help='Benchmark performance')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of iterations for benchmarking')
        benchmark_parser.add_argument('--depth', type=int, default=4,
                                      help='Search depth used for the search benchmark')

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments."""
        self.args = self.build_parser().parse_args(argv)

        log_file = getattr(self.args, 'log_file', None)
        components = getattr(self.args, 'log_components', None)
        if log_file is not None or components is not None:
            debug.configure(log_file=log_file, components=components)

        if getattr(self.args, 'debug', False):
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(getattr(self.args, 'debug_level', 'warning'))
        debug.debug(f"Parsed arguments: {vars(self.args)}", "cli")

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI based on the parsed arguments."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            return self.play_game()
        elif self.args.command == 'show':
            return self.show_state()
        elif self.args.command == 'benchmark':
            return self.benchmark()

        print("Please specify a command. Use --help for options.")
        return 1

    def play_game(self) -> int:
        """Play Connect Four interactively, saving after every move."""
        state_path = state_file_path(self.args.state)
        self.session = GameSession() if self.args.new else load_session(state_path)
        if self.args.new:
            save_session(self.session, state_path)

        print("Connect Four! You are X, the computer is O.")
        print(f"Enter a column number (0-{COLS - 1}) to drop a piece.")
        print("Other commands: 'q' to quit (the game is saved), 'r' to restart.")
        self.print_status()

        while True:
            if self.session.is_over():
                self.announce_result()
                if not self.ask_play_again():
                    return 0
                self.session.reset()
                save_session(self.session, state_path)
                self.print_status()
                continue

            if self.session.turn == Turn.COMPUTER:
                print("Computer is thinking...")
                column = self.session.computer_turn(self.player)
                print(f"Computer plays column {column}")
            else:
                move = self.get_human_move()
                if move is None:
                    continue
                if move == QUIT:
                    save_session(self.session, state_path)
                    print(f"Game saved to {state_path}.")
                    return 0
                if move == RESTART:
                    self.session.reset()
                    print("Game restarted.")
                elif not self.session.play_column(move):
                    print(f"Column {move} is full, pick another one.")
                    continue

            save_session(self.session, state_path)
            print(self.session.board.render(highlight_win=self.session.is_over()))

    def get_human_move(self) -> Optional[int]:
        """
        Get a move from human player input.

        Returns:
            Column index, a command code, or None if the input was invalid
        """
        try:
            user_input = input(f"Your move (columns 0-{COLS - 1}, q/r): ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            print()
            return QUIT

        if user_input == 'q':
            return QUIT
        elif user_input == 'r':
            return RESTART

        try:
            move = int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or command.")
            return None

        if not 0 <= move < COLS:
            print(f"Column must be between 0 and {COLS - 1}.")
            return None
        return move

    def ask_play_again(self) -> bool:
        try:
            answer = input("Play again? [y/N]: ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            print()
            return False
        return answer in ('y', 'yes')

    def announce_result(self) -> None:
        print(RESULT_MESSAGES[self.session.result()])
        print(self.format_tally())

    def format_tally(self) -> str:
        return f"Wins: {self.session.wins} Losses: {self.session.losses}"

    def print_status(self) -> None:
        print(self.session.board.render(highlight_win=self.session.is_over()))
        if not self.session.is_over():
            to_move = "Your" if self.session.turn == Turn.PLAYER else "Computer's"
            print(f"{to_move} move.")
        print(self.format_tally())

    def show_state(self) -> int:
        """Print the saved game without changing it."""
        self.session = load_session(self.args.state)
        self.print_status()
        result = self.session.result()
        if result is not None:
            print(RESULT_MESSAGES[result])
        return 0

    def benchmark(self) -> int:
        """Benchmark the board operations and one search."""
        iterations = max(1, self.args.iterations)
        print(f"Running benchmark with {iterations} iterations...")

        debug.start_timer("board_copy")
        board = Board()
        for _ in range(iterations):
            board.copy()
        copy_time = debug.end_timer("board_copy")
        print(f"Board copy: {copy_time / iterations * 1000:.6f} ms per copy")

        rng = random.Random(0)
        drops = 0
        debug.start_timer("drops")
        for _ in range(iterations):
            if board.check_winner() is not None:
                board = Board()
            if board.drop(rng.randrange(COLS), rng.choice([Cell.COMPUTER, Cell.PLAYER])):
                drops += 1
        drop_time = debug.end_timer("drops")
        print(f"Dropped {drops} pieces with outcome checks: "
              f"{drop_time / iterations * 1000:.6f} ms per iteration")

        player = LookaheadPlayer(self.args.depth)
        debug.start_timer("search_bench")
        column = player.get_move(Board())
        search_time = debug.end_timer("search_bench")
        print(f"Search at depth {self.args.depth} chose column {column}: "
              f"{player.nodes_evaluated} nodes in {search_time:.3f} seconds")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
