import math
import time
import unittest

from connectfour.utils import ROWS, COLS, Cell, GameResult
from connectfour.game.board import Board
from connectfour.ai.search import LookaheadPlayer, score_board, BASE_SCORE, MAX_DEPTH
from tests.test_board import fill_without_winner


def drops(board, side, columns):
    for col in columns:
        assert board.drop(col, side), f"drop into {col} failed"
    return board


class TestScoreBoard(unittest.TestCase):
    def test_in_progress_board_has_no_score(self):
        self.assertIsNone(score_board(Board()))
        self.assertIsNone(score_board(drops(Board(), Cell.PLAYER, [3, 3])))

    def test_faster_win_scores_higher(self):
        quick = drops(Board(), Cell.COMPUTER, [0, 0, 0, 0])
        slow = drops(Board(), Cell.PLAYER, [6, 6, 5])
        drops(slow, Cell.COMPUTER, [0, 0, 0, 0])

        self.assertEqual(quick.check_winner(), GameResult.COMPUTER_WINS)
        self.assertEqual(score_board(quick), BASE_SCORE - 4)
        self.assertEqual(score_board(slow), BASE_SCORE - 7)
        self.assertGreater(score_board(quick), score_board(slow))

    def test_win_beats_draw_beats_loss(self):
        full = Board()
        fill_without_winner(full)
        self.assertEqual(full.check_winner(), GameResult.DRAW)
        draw_score = score_board(full)
        self.assertEqual(draw_score, 0.0)

        slowest_win = Board()
        fill_without_winner(slowest_win, until=ROWS * COLS - 7)
        drops(slowest_win, Cell.COMPUTER, [6, 6, 6, 6])
        self.assertEqual(slowest_win.check_winner(), GameResult.COMPUTER_WINS)

        loss = drops(Board(), Cell.PLAYER, [2, 2, 2, 2])
        self.assertEqual(loss.check_winner(), GameResult.PLAYER_WINS)

        self.assertGreater(score_board(slowest_win), draw_score)
        self.assertGreater(draw_score, score_board(loss))

    def test_later_loss_scores_higher(self):
        early = drops(Board(), Cell.PLAYER, [2, 2, 2, 2])
        late = drops(Board(), Cell.COMPUTER, [0, 1, 5])
        drops(late, Cell.PLAYER, [2, 2, 2, 2])
        self.assertEqual(score_board(early), 4 - BASE_SCORE)
        self.assertGreater(score_board(late), score_board(early))


class TestLookaheadPlayer(unittest.TestCase):
    def setUp(self):
        self.player = LookaheadPlayer(depth=4)

    def test_default_depth(self):
        self.assertEqual(LookaheadPlayer().depth, MAX_DEPTH)
        self.assertEqual(MAX_DEPTH, 8)

    def test_takes_immediate_win(self):
        board = drops(Board(), Cell.COMPUTER, [0, 1, 2])
        drops(board, Cell.PLAYER, [6, 6, 5])
        self.assertEqual(self.player.get_move(board), 3)

    def test_blocks_immediate_loss(self):
        board = drops(Board(), Cell.PLAYER, [0, 1, 2])
        drops(board, Cell.COMPUTER, [0, 1])
        self.assertEqual(LookaheadPlayer(depth=2).get_move(board), 3)

    def test_search_is_deterministic(self):
        board = drops(Board(), Cell.PLAYER, [3])
        first = self.player.get_move(board)
        self.assertEqual(self.player.get_move(board), first)
        self.assertEqual(LookaheadPlayer(depth=4).get_move(board), first)

    def test_get_move_leaves_board_untouched(self):
        board = drops(Board(), Cell.PLAYER, [3, 4])
        before = board.copy()
        self.player.get_move(board)
        self.assertEqual(board, before)
        self.assertGreater(self.player.nodes_evaluated, 0)

    def test_get_move_rejects_decided_board(self):
        board = drops(Board(), Cell.PLAYER, [1, 1, 1, 1])
        with self.assertRaises(ValueError):
            self.player.get_move(board)

    def test_make_move_drops_one_computer_piece(self):
        board = drops(Board(), Cell.COMPUTER, [0, 1, 2])
        drops(board, Cell.PLAYER, [6, 6, 5])
        self.assertTrue(self.player.make_move(board))
        self.assertEqual(board.num_moves_made(), 7)
        self.assertEqual(board.get_cell(ROWS - 1, 3), Cell.COMPUTER)
        self.assertEqual(board.check_winner(), GameResult.COMPUTER_WINS)

    def test_make_move_does_nothing_on_decided_board(self):
        board = drops(Board(), Cell.PLAYER, [1, 1, 1, 1])
        before = board.copy()
        self.assertFalse(self.player.make_move(board))
        self.assertEqual(board, before)

    def test_exhausted_depth_is_neutral(self):
        board = drops(Board(), Cell.PLAYER, [3])
        self.assertEqual(self.player.best_computer_move(board, 0), (0, 0.0))
        self.assertEqual(self.player.best_computer_move(board, -1), (0, 0.0))

    def test_full_board_has_no_computer_move(self):
        board = Board()
        fill_without_winner(board)
        column, score = self.player.best_computer_move(board, 3)
        self.assertEqual(column, 0)
        self.assertEqual(score, -math.inf)

    def test_no_player_replies_scores_as_draw(self):
        board = Board()
        fill_without_winner(board)
        self.assertEqual(self.player.simulate_player_move(board, 3), 0.0)

    def test_player_takes_winning_reply(self):
        board = drops(Board(), Cell.PLAYER, [0, 1, 2])
        drops(board, Cell.COMPUTER, [6, 6])
        # Column 3 wins for the player on the sixth move
        self.assertEqual(self.player.simulate_player_move(board, 4), 6 - BASE_SCORE)

    def test_non_winning_replies_are_averaged(self):
        board = drops(Board(), Cell.COMPUTER, [0, 0, 0])
        drops(board, Cell.PLAYER, [1, 2, 6])
        # Blocking in column 0 leaves nothing to gain; every other reply
        # lets the computer finish the column on the eighth move
        expected = (0.0 + 6 * (BASE_SCORE - 8)) / 7
        self.assertAlmostEqual(self.player.simulate_player_move(board, 2), expected)

    def test_repeated_positions_come_from_table(self):
        board = drops(Board(), Cell.PLAYER, [3])
        self.player.get_move(board)
        self.assertGreater(self.player.computer_table.hits + self.player.player_table.hits, 0)
        self.assertGreater(len(self.player.player_table), 0)

        # Tables only live for one search
        self.player.get_move(drops(Board(), Cell.PLAYER, [0]))
        self.assertNotIn(board.key() + (self.player.depth,), self.player.computer_table.table)

    def test_warm_tables_give_the_same_scores(self):
        board = drops(Board(), Cell.PLAYER, [3, 2])
        drops(board, Cell.COMPUTER, [3])
        cold = LookaheadPlayer(depth=4).best_computer_move(board, 4)

        warm = LookaheadPlayer(depth=4)
        warm.simulate_player_move(drops(board.copy(), Cell.COMPUTER, [4]), 3)
        self.assertEqual(warm.best_computer_move(board, 4), cold)

    def test_first_column_wins_ties(self):
        board = drops(Board(), Cell.PLAYER, [3])
        # Depth one sees no outcome after any move, so every column scores zero
        self.assertEqual(LookaheadPlayer(depth=1).get_move(board), 0)


class TestFullDepthSearch(unittest.TestCase):
    """Searches at the depth the game itself uses."""

    def test_sparse_board_finishes_quickly(self):
        board = drops(Board(), Cell.PLAYER, [3])
        before = board.copy()
        player = LookaheadPlayer()
        self.assertEqual(player.depth, MAX_DEPTH)

        start = time.perf_counter()
        column = player.get_move(board)
        elapsed = time.perf_counter() - start

        self.assertIn(column, range(COLS))
        self.assertEqual(board, before)
        self.assertLess(elapsed, 30.0)


if __name__ == '__main__':
    unittest.main()
