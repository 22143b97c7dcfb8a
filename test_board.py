"""
Tests for the Reversi board engine: legality, flips, turn resolution and scoring.
"""
import logging

import numpy as np
import pytest

from src.game.board import Board, IllegalMoveError, InvariantViolationError
from src.game.notation import parse_transcript

# Nine-move perfect game: Black wins 13-0 and neither side can move.
SHUTOUT = "e6 f4 e3 f6 g5 d6 e7 f5 c5"

FORCED_PASS_POSITION = """
B W . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. W B B B B B B
"""

WHITE_MAJORITY_POSITION = """
. W B W W W W W
W W W W W W W W
W W W W W W W W
W W W W W W W W
W W W W W W W W
W W W W W W W W
W W W W W W W W
W W W W W W W W
"""

TIE_POSITION = """
. W B B B B B B
W W W W W W W W
W W W W W W W W
W W W W W W W W
W B B B W B B B
W B B B B W B B
W B B B B B W B
W B B B B B B W
"""


def positions_along(transcript):
    """Yield (board, move) for every move of a transcript, board taken before the move."""
    board = Board()
    for row, col in parse_transcript(transcript):
        yield board.copy(), (row, col)
        board.apply_move(row, col, board.turn)


def test_initial_board():
    """Reset seeds the canonical diagonal and hands the first move to Black."""
    board = Board()
    state = board.get_board_state()

    assert state.shape == (8, 8), "Board should be 8x8"
    assert np.sum(state == Board.EMPTY) == 60, "Should have 60 empty squares initially"
    assert board.get_score() == (2, 2)
    assert board.get_cell(3, 3) == Board.WHITE
    assert board.get_cell(4, 4) == Board.WHITE
    assert board.get_cell(3, 4) == Board.BLACK
    assert board.get_cell(4, 3) == Board.BLACK
    assert board.turn == Board.BLACK, "Black always opens"
    assert not board.terminal
    assert board.outcome is None


def test_reset_restores_opening_after_play():
    board = Board()
    board.apply_move(2, 3, Board.BLACK)
    board.reset()

    assert np.array_equal(board.get_board_state(), Board().get_board_state())
    assert board.turn == Board.BLACK


def test_is_inside():
    board = Board()
    assert board.is_inside(0, 0)
    assert board.is_inside(7, 7)
    assert not board.is_inside(-1, 0)
    assert not board.is_inside(0, 8)
    assert not board.is_inside(8, 3)


def test_unsupported_size():
    with pytest.raises(ValueError):
        Board(10)


def test_initial_legal_destinations():
    board = Board()
    assert board.legal_destinations_for(Board.BLACK) == {(2, 3), (3, 2), (4, 5), (5, 4)}
    assert board.legal_destinations_for(Board.WHITE) == {(2, 4), (3, 5), (4, 2), (5, 3)}
    assert board.has_any_legal_move(Board.BLACK)
    assert board.get_valid_moves() == [(2, 3), (3, 2), (4, 5), (5, 4)]


def test_opening_move():
    """Black d3 captures d4; the e4 centre piece stays black."""
    board = Board()
    result = board.apply_move(2, 3, Board.BLACK)

    assert result.placed == (2, 3)
    assert result.flipped == ((3, 3),)
    assert board.get_cell(2, 3) == Board.BLACK
    assert board.get_cell(3, 3) == Board.BLACK
    assert board.get_cell(3, 4) == Board.BLACK
    assert board.get_score() == (4, 1), "White should drop from 2 pieces to 1"
    assert board.turn == Board.WHITE, "Should be white's turn"
    assert not result.forced_pass
    assert not result.game_over


def test_flip_order_follows_directions():
    """Flips are reported up first, then clockwise, each run outward from the move."""
    board = Board()
    for row, col in parse_transcript(SHUTOUT)[:-1]:
        board.apply_move(row, col, board.turn)

    assert board.turn == Board.BLACK
    assert board.cells_to_flip(4, 2, Board.BLACK) == [(3, 3), (4, 3), (4, 4), (4, 5), (5, 3)]

    result = board.apply_move(4, 2, Board.BLACK)
    assert result.flips_by_distance() == [(4, 3), (3, 3), (5, 3), (4, 4), (4, 5)]


def test_cells_to_flip_rejects_occupied_and_outside():
    board = Board()
    assert board.cells_to_flip(3, 3, Board.BLACK) == []
    assert board.cells_to_flip(0, 0, Board.BLACK) == []
    assert board.cells_to_flip(-1, 4, Board.BLACK) == []
    assert board.cells_to_flip(2, 8, Board.BLACK) == []


def test_run_ending_on_empty_or_edge_flips_nothing():
    board = Board.from_string("""
        . W W . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        W W W . . . . B
    """)
    # Row 0: run of white ends on an empty cell; row 7: run ends at the edge
    assert board.terminal, "Neither side can move"
    assert board.cells_to_flip(0, 0, Board.BLACK) == []
    assert board.cells_to_flip(7, 3, Board.BLACK) == []
    assert board.legal_destinations_for(Board.BLACK) == set()


def test_flips_agree_with_legal_destinations():
    """cells_to_flip is non-empty exactly for the legal destinations, for both colors."""
    for board, _ in positions_along(SHUTOUT):
        for player in (Board.BLACK, Board.WHITE):
            legal = board.legal_destinations_for(player)
            for row in range(8):
                for col in range(8):
                    has_flips = bool(board.cells_to_flip(row, col, player))
                    assert has_flips == ((row, col) in legal), \
                        f"Mismatch at ({row}, {col}) for player {player}"


def test_move_changes_only_target_and_flips():
    """A move adds exactly one piece and recolors only the reported cells."""
    for before, (row, col) in positions_along(SHUTOUT):
        board = before.copy()
        player = board.turn
        result = board.apply_move(row, col, player)

        old, new = before.get_board_state(), board.get_board_state()
        assert np.sum(new != Board.EMPTY) == np.sum(old != Board.EMPTY) + 1

        changed = {(int(r), int(c)) for r, c in zip(*np.nonzero(old != new))}
        assert changed == {result.placed, *result.flipped}
        assert all(board.get_cell(r, c) == player for r, c in changed)


def test_turn_alternates_during_normal_play():
    for before, (row, col) in positions_along(SHUTOUT):
        board = before.copy()
        mover = board.turn
        result = board.apply_move(row, col, mover)
        if not result.game_over:
            assert board.turn == Board.opponent(mover)
            assert not result.forced_pass


def test_queries_do_not_mutate():
    board = Board()
    board.apply_move(2, 3, Board.BLACK)
    snapshot = board.get_board_state()

    for _ in range(3):
        board.legal_destinations_for(Board.WHITE)
        board.legal_destinations_for(Board.BLACK)
        board.cells_to_flip(2, 2, Board.WHITE)
        board.has_any_legal_move(Board.BLACK)

    assert np.array_equal(board.get_board_state(), snapshot)
    assert board.turn == Board.WHITE


@pytest.mark.parametrize("row, col", [(3, 3), (0, 0), (-1, 0), (8, 8), (2, 2)])
def test_illegal_moves_leave_board_unchanged(row, col):
    board = Board()
    snapshot = board.get_board_state()

    with pytest.raises(IllegalMoveError):
        board.apply_move(row, col, Board.BLACK)

    assert np.array_equal(board.get_board_state(), snapshot)
    assert board.turn == Board.BLACK


def test_move_out_of_turn_is_an_invariant_violation():
    board = Board()
    snapshot = board.get_board_state()

    with pytest.raises(InvariantViolationError):
        board.apply_move(2, 4, Board.WHITE)
    assert np.array_equal(board.get_board_state(), snapshot)


def test_move_after_game_over_is_an_invariant_violation():
    board = Board.from_string(WHITE_MAJORITY_POSITION)
    board.apply_move(0, 0, Board.BLACK)
    assert board.terminal

    with pytest.raises(InvariantViolationError):
        board.apply_move(0, 0, board.turn)


def test_forced_pass_keeps_turn():
    """White is left without a move, so Black plays again."""
    board = Board.from_string(FORCED_PASS_POSITION)
    result = board.apply_move(0, 2, Board.BLACK)

    assert result.flipped == ((0, 1),)
    assert result.forced_pass
    assert not result.game_over
    assert board.turn == Board.BLACK, "White has no moves, turn should stay with Black"
    assert not board.has_any_legal_move(Board.WHITE)
    assert board.legal_destinations_for(Board.BLACK) == {(7, 0)}


def test_game_ends_when_neither_side_can_move():
    board = Board.from_string(FORCED_PASS_POSITION)
    board.apply_move(0, 2, Board.BLACK)
    result = board.apply_move(7, 0, Board.BLACK)

    assert result.game_over
    assert not result.forced_pass
    assert board.terminal
    assert board.outcome.winner == Board.BLACK
    assert (board.outcome.black_count, board.outcome.white_count) == (11, 0)
    assert board.empty_count() == 53, "Game ends before the board is full"


def test_full_board_majority_wins():
    board = Board.from_string(WHITE_MAJORITY_POSITION)
    result = board.apply_move(0, 0, Board.BLACK)

    assert result.game_over
    assert board.is_full()
    assert board.terminal
    assert board.outcome.winner == Board.WHITE
    assert board.get_score() == (3, 61)
    assert board.outcome.describe() == "White wins 61-3"


def test_full_board_tie():
    board = Board.from_string(TIE_POSITION)
    board.apply_move(0, 0, Board.BLACK)

    assert board.terminal
    assert board.outcome.is_tie
    assert board.winner == Board.DRAW
    assert board.get_score() == (32, 32)
    assert board.outcome.describe() == "Tie game 32-32"


def test_shutout_transcript():
    board = Board()
    for row, col in parse_transcript(SHUTOUT):
        board.apply_move(row, col, board.turn)

    assert board.terminal
    assert board.get_score() == (13, 0)
    assert board.outcome.winner == Board.BLACK
    assert "Game over! Black wins 13-0!" in str(board)


def test_game_over_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="src.game.board")
    board = Board.from_string(WHITE_MAJORITY_POSITION)
    board.apply_move(0, 0, Board.BLACK)

    assert "White wins 61-3" in caplog.text


def test_from_string_rejects_bad_diagrams():
    with pytest.raises(ValueError):
        Board.from_string("B W\nW B")
    with pytest.raises(ValueError):
        Board.from_string(FORCED_PASS_POSITION.replace("W", "X"))
    with pytest.raises(ValueError):
        Board.from_string(FORCED_PASS_POSITION, turn=Board.EMPTY)


def test_copy_is_independent():
    board = Board()
    clone = board.copy()
    clone.apply_move(2, 3, Board.BLACK)

    assert board.get_cell(2, 3) == Board.EMPTY
    assert board.turn == Board.BLACK
    assert clone.turn == Board.WHITE


def test_get_cell_outside_board():
    """Reading outside the board is an illegal-move error, not a crash."""
    board = Board()
    with pytest.raises(IllegalMoveError):
        board.get_cell(8, 0)
    with pytest.raises(IllegalMoveError):
        board.get_cell(0, -1)


def test_from_string_passes_turn_when_side_to_move_is_stuck():
    """Black has no move but White does, so White is to move."""
    board = Board.from_string("""
        B B B . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        W B B B B B B .
    """)

    assert not board.terminal
    assert board.turn == Board.WHITE
    assert board.legal_destinations_for(Board.BLACK) == set()
    assert board.has_any_legal_move(board.turn)


def test_from_string_without_moves_is_terminal():
    board = Board.from_string("""
        W . B . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
    """)

    assert board.terminal
    assert board.outcome.is_tie
    assert board.get_score() == (1, 1)
    with pytest.raises(InvariantViolationError):
        board.apply_move(0, 2, board.turn)


def test_from_string_full_board_is_terminal():
    board = Board.from_string("\n".join(["BBBBBBBB"] * 4 + ["WWWWWWWW"] * 4))

    assert board.terminal
    assert board.outcome.is_tie
    assert board.get_score() == (32, 32)


def test_from_string_settles_turn():
    board = Board.from_string(FORCED_PASS_POSITION, turn=Board.WHITE)

    assert board.turn == Board.BLACK, "White has no moves, so Black is to move"
    board = Board.from_string(TIE_POSITION)
    assert board.turn == Board.BLACK
    assert not board.terminal


if __name__ == "__main__":
    import sys
    sys.exit(pytest.main([__file__, "-v"]))
