"""
Reversi game module.
This package contains the core game logic for Reversi.
"""

from .board import Board, MoveResult, Outcome, IllegalMoveError, InvariantViolationError
from .game import ReversiGame
from .notation import coords_to_notation, notation_to_coords, parse_transcript, format_transcript

__all__ = [
    'Board', 'MoveResult', 'Outcome', 'IllegalMoveError', 'InvariantViolationError',
    'ReversiGame',
    'coords_to_notation', 'notation_to_coords', 'parse_transcript', 'format_transcript',
]
