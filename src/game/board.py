"""
Board module for Reversi.
Handles the game board state, move validation, flip resolution and scoring.
Uses a numpy grid as the single source of truth for cell contents.
"""
from dataclasses import dataclass
from typing import List, Tuple, Optional, Set
import logging
import math
import numpy as np

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class IllegalMoveError(ValueError):
    """Raised when a move is out of bounds, lands on an occupied cell or flips nothing."""


class InvariantViolationError(RuntimeError):
    """Raised when the engine is driven out of turn or after the game has ended."""


@dataclass(frozen=True)
class Outcome:
    """Final result of a game."""
    winner: int  # Board.BLACK, Board.WHITE or Board.DRAW
    black_count: int
    white_count: int

    @property
    def is_tie(self) -> bool:
        return self.winner == Board.DRAW

    def describe(self) -> str:
        """Human readable summary, winner's count first."""
        if self.winner == Board.BLACK:
            return f"Black wins {self.black_count}-{self.white_count}"
        if self.winner == Board.WHITE:
            return f"White wins {self.white_count}-{self.black_count}"
        return f"Tie game {self.black_count}-{self.white_count}"


@dataclass(frozen=True)
class MoveResult:
    """
    Everything a presentation layer needs to render a move.

    The grid already holds the post-move state when this is returned, so
    callers that animate must work from `placed` and `flipped` only.
    """
    player: int
    placed: Position
    flipped: Tuple[Position, ...]
    forced_pass: bool = False
    game_over: bool = False

    def flips_by_distance(self) -> List[Position]:
        """Flipped cells ordered by distance from the placed piece (domino order)."""
        row, col = self.placed
        return sorted(self.flipped, key=lambda pos: math.hypot(pos[0] - row, pos[1] - col))


class Board:
    """
    Represents the Reversi game board.

    The board is created once per game with `reset()` and mutated only by
    `apply_move()`. Every query is pure.
    """

    # Board dimensions
    SIZE = 8
    BOARD_SIZE = SIZE * SIZE

    # Player constants
    EMPTY = 0
    BLACK = 1  # Player 1, always opens
    WHITE = 2  # Player 2
    DRAW = 0   # Winner value for a tie

    # Up, then clockwise. Order is significant for flip sequencing.
    DIRECTIONS = (
        (-1, 0),   # Up
        (-1, 1),   # Up-Right
        (0, 1),    # Right
        (1, 1),    # Down-Right
        (1, 0),    # Down
        (1, -1),   # Down-Left
        (0, -1),   # Left
        (-1, -1),  # Up-Left
    )

    SYMBOLS = {EMPTY: '.', BLACK: 'B', WHITE: 'W'}

    def __init__(self, size: int = 8):
        """Initialize a new Reversi board in the canonical opening position."""
        if size != 8:
            raise ValueError("Only 8x8 board is supported")

        self.size = size
        self._board = np.zeros((size, size), dtype=np.int8)
        self.current_player = self.BLACK
        self.game_over = False
        self.outcome: Optional[Outcome] = None
        self.reset()

    def reset(self) -> 'Board':
        """Clear the board and place the four starting pieces. Black moves first."""
        self._board.fill(self.EMPTY)
        mid = self.size // 2
        self._board[mid - 1, mid - 1] = self.WHITE  # d4
        self._board[mid, mid] = self.WHITE          # e5
        self._board[mid - 1, mid] = self.BLACK      # e4
        self._board[mid, mid - 1] = self.BLACK      # d5

        self.current_player = self.BLACK
        self.game_over = False
        self.outcome = None
        return self

    @classmethod
    def from_string(cls, text: str, turn: int = BLACK) -> 'Board':
        """
        Build a board from an ASCII diagram.

        Args:
            text: Eight non-blank lines of eight cells each, using 'B', 'W'
                and '.' (whitespace between cells is ignored)
            turn: The player to move

        Returns:
            A new board with the turn settled: if `turn` cannot move the
            opponent is to move, and a full board or one where neither side
            can move is already terminal
        """
        lookup = {'.': cls.EMPTY, 'B': cls.BLACK, 'W': cls.WHITE}
        rows = [line.split() if ' ' in line.strip() else list(line.strip())
                for line in text.strip().splitlines() if line.strip()]
        if len(rows) != cls.SIZE or any(len(row) != cls.SIZE for row in rows):
            raise ValueError(f"Board diagram must be {cls.SIZE}x{cls.SIZE}")
        if turn not in (cls.BLACK, cls.WHITE):
            raise ValueError(f"Invalid player to move: {turn}")

        board = cls()
        for i, row in enumerate(rows):
            for j, symbol in enumerate(row):
                if symbol.upper() not in lookup:
                    raise ValueError(f"Unknown cell symbol {symbol!r} at ({i}, {j})")
                board._board[i, j] = lookup[symbol.upper()]
        board.current_player = turn
        board._settle_position()
        return board

    def _settle_position(self) -> None:
        """Apply the pass and game-end rules to a position that was set up directly."""
        if self.is_full() or not (self.has_any_legal_move(self.BLACK)
                                  or self.has_any_legal_move(self.WHITE)):
            self._end_game()
        elif not self.has_any_legal_move(self.current_player):
            self.current_player = self.opponent(self.current_player)

    # Read accessors

    @property
    def turn(self) -> int:
        return self.current_player

    @property
    def terminal(self) -> bool:
        return self.game_over

    @property
    def winner(self) -> Optional[int]:
        return self.outcome.winner if self.outcome is not None else None

    def get_cell(self, row: int, col: int) -> int:
        """Return the contents of a cell (EMPTY, BLACK or WHITE)."""
        if not self.is_inside(row, col):
            raise IllegalMoveError(f"Cell ({row}, {col}) is outside the board")
        return int(self._board[row, col])

    def get_board_state(self) -> np.ndarray:
        """
        Get the current board state as a numpy array.

        Returns:
            2D numpy array representing the board state
        """
        return self._board.copy()

    def get_score(self) -> Tuple[int, int]:
        """
        Get the current score (black, white).

        Returns:
            Tuple of (black_score, white_score)
        """
        black_count = int(np.count_nonzero(self._board == self.BLACK))
        white_count = int(np.count_nonzero(self._board == self.WHITE))
        return (black_count, white_count)

    def empty_count(self) -> int:
        return int(np.count_nonzero(self._board == self.EMPTY))

    def is_full(self) -> bool:
        return self.empty_count() == 0

    def copy(self) -> 'Board':
        """Create a deep copy of the board."""
        new_board = Board(self.size)
        new_board._board = self._board.copy()
        new_board.current_player = self.current_player
        new_board.game_over = self.game_over
        new_board.outcome = self.outcome
        return new_board

    # Rules

    @staticmethod
    def opponent(player: int) -> int:
        """Toggle between BLACK (1) and WHITE (2)."""
        return 3 - player

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def _scan_direction(self, row: int, col: int, dr: int, dc: int, player: int) -> List[Position]:
        """
        Walk from (row, col) in direction (dr, dc) collecting opponent cells.

        Returns:
            The run of opponent cells if it is closed by one of the player's
            own pieces, otherwise an empty list (run ended on an empty cell,
            at the edge, or there was no run at all)
        """
        opponent = self.opponent(player)
        run = []
        r, c = row + dr, col + dc
        while self.is_inside(r, c) and self._board[r, c] == opponent:
            run.append((r, c))
            r += dr
            c += dc

        if run and self.is_inside(r, c) and self._board[r, c] == player:
            return run
        return []

    def cells_to_flip(self, row: int, col: int, player: int) -> List[Position]:
        """
        Get the list of pieces that would be flipped by a move.

        Args:
            row: Row of the move (0-based)
            col: Column of the move (0-based)
            player: The player making the move (BLACK or WHITE)

        Returns:
            Flipped positions in direction order (up, then clockwise), each
            direction's run ordered outwards from the move. Empty when the
            move is illegal.
        """
        if not self.is_inside(row, col) or self._board[row, col] != self.EMPTY:
            return []

        flipped = []
        for dr, dc in self.DIRECTIONS:
            flipped.extend(self._scan_direction(row, col, dr, dc, player))
        return flipped

    def is_valid_move(self, row: int, col: int, player: Optional[int] = None) -> bool:
        """Check if a move is valid."""
        if player is None:
            player = self.current_player
        if not self.is_inside(row, col) or self._board[row, col] != self.EMPTY:
            return False
        return any(self._scan_direction(row, col, dr, dc, player) for dr, dc in self.DIRECTIONS)

    def legal_destinations_for(self, player: int) -> Set[Position]:
        """
        Get all empty cells where the player could move.

        Args:
            player: BLACK or WHITE

        Returns:
            Set of (row, col) tuples
        """
        empty_rows, empty_cols = np.nonzero(self._board == self.EMPTY)
        return {
            (int(r), int(c))
            for r, c in zip(empty_rows, empty_cols)
            if self.is_valid_move(int(r), int(c), player)
        }

    def get_valid_moves(self, player: Optional[int] = None) -> List[Position]:
        """Legal destinations in row-major order. Defaults to the player to move."""
        if player is None:
            player = self.current_player
        return sorted(self.legal_destinations_for(player))

    def has_any_legal_move(self, player: Optional[int] = None) -> bool:
        """Check if the player has any valid moves."""
        if player is None:
            player = self.current_player
        return bool(self.legal_destinations_for(player))

    def apply_move(self, row: int, col: int, player: int) -> MoveResult:
        """
        Place a piece, flip the captured runs and resolve the next turn.

        Args:
            row: Row of the move (0-based)
            col: Column of the move (0-based)
            player: The player making the move, must be the player to move

        Returns:
            MoveResult describing the placement, flips and resulting turn state

        Raises:
            InvariantViolationError: If the game is over or it is not `player`'s turn
            IllegalMoveError: If the move is out of bounds, occupied or flips nothing
        """
        if self.game_over:
            raise InvariantViolationError("apply_move called after the game has ended")
        if player != self.current_player:
            raise InvariantViolationError(
                f"apply_move called for {self._name(player)} on {self._name(self.current_player)}'s turn"
            )
        if not self.is_inside(row, col):
            raise IllegalMoveError(f"({row}, {col}) is outside the board")

        flipped = self.cells_to_flip(row, col, player)
        if not flipped:
            raise IllegalMoveError(f"({row}, {col}) is not a legal move for {self._name(player)}")

        self._board[row, col] = player
        for r, c in flipped:
            self._board[r, c] = player

        forced_pass = self._resolve_turn(player)
        if not self.game_over and self.is_full():
            self._end_game()

        logger.debug("%s played (%d, %d) flipping %d", self._name(player), row, col, len(flipped))
        return MoveResult(
            player=player,
            placed=(row, col),
            flipped=tuple(flipped),
            forced_pass=forced_pass and not self.game_over,
            game_over=self.game_over,
        )

    def _resolve_turn(self, mover: int) -> bool:
        """Hand the turn to the opponent, or back to the mover, or end the game.

        Returns True when the opponent had to pass.
        """
        next_player = self.opponent(mover)
        if self.has_any_legal_move(next_player):
            self.current_player = next_player
            return False

        if self.has_any_legal_move(mover):
            logger.debug("%s has no valid moves and passes", self._name(next_player))
            self.current_player = mover
            return True

        self._end_game()
        return False

    def _end_game(self) -> None:
        self.game_over = True
        self.outcome = self._determine_outcome()
        logger.debug("Game over! %s", self.outcome.describe())

    def _determine_outcome(self) -> Outcome:
        """Determine the winner based on piece counts."""
        black_count, white_count = self.get_score()

        if black_count > white_count:
            winner = self.BLACK
        elif white_count > black_count:
            winner = self.WHITE
        else:
            winner = self.DRAW
        return Outcome(winner=winner, black_count=black_count, white_count=white_count)

    @classmethod
    def _name(cls, player: int) -> str:
        return 'Black' if player == cls.BLACK else 'White'

    def render(self, symbols: Optional[dict] = None, hints: Optional[Set[Position]] = None,
               hint_symbol: str = '*') -> str:
        """Render the grid with column letters and row numbers."""
        symbols = symbols or self.SYMBOLS
        hints = hints or set()
        rows = ["  " + " ".join(chr(97 + j) for j in range(self.size))]
        for i in range(self.size):
            cells = [
                hint_symbol if (i, j) in hints else symbols[int(self._board[i, j])]
                for j in range(self.size)
            ]
            rows.append(f"{i + 1} " + " ".join(cells))
        return "\n".join(rows)

    def __str__(self) -> str:
        """Return a string representation of the board."""
        status = [self.render()]
        status.append(f"Current player: {self._name(self.current_player)}")

        black_count, white_count = self.get_score()
        status.append(f"Score - Black: {black_count}, White: {white_count}")

        if self.game_over:
            status.append(f"Game over! {self.outcome.describe()}!")

        return "\n".join(status)
