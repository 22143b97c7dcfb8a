"""
Standard Othello move notation.

Columns are labeled a-h from left to right and rows 1-8 from top to bottom,
so the opening black pieces sit on e4 and d5.
"""
import re
from typing import Iterable, List, Tuple

from .board import Board

_MOVE_RE = re.compile(r'([a-hA-H])([1-8])')


def coords_to_notation(row: int, col: int) -> str:
    """
    Convert board coordinates to standard notation.

    Args:
        row: Row index (0-7)
        col: Column index (0-7)

    Returns:
        Position in standard notation (e.g., 'e4' for row=3, col=4)
    """
    if not (0 <= row < Board.SIZE and 0 <= col < Board.SIZE):
        raise ValueError(f"Coordinates ({row}, {col}) are outside the board")
    return chr(97 + col) + str(row + 1)


def notation_to_coords(notation: str) -> Tuple[int, int]:
    """
    Convert standard notation to board coordinates.

    Args:
        notation: Position in standard notation (e.g., 'e4')

    Returns:
        (row, col) coordinates (e.g., (3, 4) for 'e4')

    Raises:
        ValueError: If the notation is not a letter a-h followed by a digit 1-8
    """
    text = notation.strip()
    if len(text) != 2 or not text[0].isalpha() or not text[1].isdigit():
        raise ValueError(f"Invalid move notation: '{notation}'. "
                         f"Expected a letter (a-h) followed by a number (1-8).")

    col = ord(text[0].lower()) - 97
    row = int(text[1]) - 1
    if not (0 <= col < Board.SIZE and 0 <= row < Board.SIZE):
        raise ValueError(f"Invalid move notation: '{notation}'. Coordinates out of bounds.")
    return row, col


def parse_transcript(text: str) -> List[Tuple[int, int]]:
    """Parse a game transcript such as 'f5d6c3' or 'f5 d6, c3'."""
    compact = re.sub(r'[\s,;]+', '', text)
    moves = []
    pos = 0
    while pos < len(compact):
        match = _MOVE_RE.match(compact, pos)
        if match is None:
            raise ValueError(f"Invalid transcript near '{compact[pos:pos + 2]}' (offset {pos})")
        moves.append(notation_to_coords(match.group(0)))
        pos = match.end()
    return moves


def format_transcript(moves: Iterable[Tuple[int, int]]) -> str:
    return ' '.join(coords_to_notation(row, col) for row, col in moves)
