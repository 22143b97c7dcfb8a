"""
Reversi game module.
Handles game flow and state management for a presentation layer.
"""
from typing import List, Tuple, Optional
import logging
import numpy as np

from .board import Board, IllegalMoveError, MoveResult, Outcome
from .notation import parse_transcript, coords_to_notation

logger = logging.getLogger(__name__)


class ReversiGame:
    """
    Main game class for Reversi that manages the game state and flow.

    Input is treated the way a click is: an illegal move is ignored and the
    board stays as it was.
    """

    def __init__(self, size: int = 8):
        """
        Initialize a new Reversi game.

        Args:
            size: Size of the board (only 8 is supported)
        """
        self.size = size
        self.board = Board(size)
        self.last_result: Optional[MoveResult] = None

    def reset(self) -> None:
        """Reset the game to its initial state."""
        self.board.reset()
        self.last_result = None
        logger.debug("New game started")

    def restart(self) -> None:
        """Start over, from any state including game over."""
        self.reset()

    def make_move(self, row: int, col: int) -> Optional[MoveResult]:
        """
        Make a move on the board for the player to move.

        Args:
            row: Row of the move (0-based)
            col: Column of the move (0-based)

        Returns:
            The MoveResult, or None if the move was illegal or the game is over
        """
        if self.board.game_over:
            return None

        try:
            result = self.board.apply_move(row, col, self.board.current_player)
        except IllegalMoveError as e:
            logger.debug("Ignoring move: %s", e)
            return None

        self.last_result = result
        return result

    def play_transcript(self, transcript: str) -> List[MoveResult]:
        """
        Replay a sequence of moves in standard notation from the current position.

        Raises:
            IllegalMoveError: On the first move that is not legal for the player to move
        """
        results = []
        for index, (row, col) in enumerate(parse_transcript(transcript), start=1):
            if self.board.game_over:
                raise IllegalMoveError(
                    f"Move {index} ({coords_to_notation(row, col)}) played after the game ended"
                )
            result = self.make_move(row, col)
            if result is None:
                raise IllegalMoveError(
                    f"Move {index} ({coords_to_notation(row, col)}) is not legal for "
                    f"{'Black' if self.current_player == Board.BLACK else 'White'}"
                )
            results.append(result)
        return results

    @property
    def current_player(self) -> int:
        return self.board.current_player

    def get_current_player(self) -> int:
        """
        Get the current player.

        Returns:
            int: Board.BLACK or Board.WHITE
        """
        return self.board.current_player

    def get_valid_moves(self) -> List[Tuple[int, int]]:
        """
        Get all valid moves for the current player.

        Returns:
            List of (row, col) tuples representing valid moves
        """
        if self.board.game_over:
            return []
        return self.board.get_valid_moves(self.board.current_player)

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self.board.game_over

    def get_outcome(self) -> Optional[Outcome]:
        return self.board.outcome

    def get_winner(self) -> Optional[int]:
        """
        Get the winner of the game.

        Returns:
            int: Board.BLACK, Board.WHITE, or 0 for draw, None if game not over
        """
        return self.board.winner

    def get_score(self) -> Tuple[int, int]:
        """
        Get the current score (black, white).

        Returns:
            Tuple of (black_score, white_score)
        """
        return self.board.get_score()

    def get_board_state(self) -> np.ndarray:
        """
        Get the current board state as a numpy array.

        Returns:
            2D numpy array representing the board state
        """
        return self.board.get_board_state()

    def status_text(self) -> str:
        """The one-line status shown to players (two lines once the game is over)."""
        if self.board.game_over:
            return f"Game Over! {self.board.outcome.describe()}\nPress 'R' to restart"

        current_turn = 'Black' if self.current_player == Board.BLACK else 'White'
        if self.last_result is not None and self.last_result.forced_pass:
            return f"{current_turn}'s Turn (Opponent has no valid moves)"
        return f"{current_turn}'s Turn"

    def __str__(self) -> str:
        """String representation of the game state."""
        return f"{self.board}\n{self.status_text()}"
