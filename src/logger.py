"""
Logging utilities for the Othello engine.
"""
import os
import json
import logging
from datetime import datetime
from typing import Optional

from .config import Config
from .game.board import Board, MoveResult, Outcome
from .game.notation import coords_to_notation

# Parent of every engine logger (src.game.board, src.game.game, ...)
PACKAGE_LOGGER = 'src'


class GameLogger:
    """Logger for game events."""

    def __init__(self, config: Config, log_dir: Optional[str] = None):
        """
        Initialize the logger.

        Args:
            config: Configuration object
            log_dir: Directory to save logs (default: config.logging.log_dir)
        """
        self.handlers = []
        self.config = config
        self.log_dir = log_dir or config.logging.log_dir
        self.run_name = f"{config.project_name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.run_dir = None

        level = getattr(logging, config.logging.log_level.upper(), logging.INFO)
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

        self.logger = logging.getLogger(PACKAGE_LOGGER)
        self.logger.setLevel(level)

        # Set up console logging
        if config.logging.verbose:
            console = logging.StreamHandler()
            console.setLevel(level)
            console.setFormatter(formatter)
            self.handlers.append(console)

        # Set up file logging
        if config.logging.log_to_file:
            self.run_dir = os.path.join(self.log_dir, self.run_name)
            os.makedirs(self.run_dir, exist_ok=True)
            file_handler = logging.FileHandler(os.path.join(self.run_dir, 'game.log'))
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self.handlers.append(file_handler)
            self.save_config()

        for handler in self.handlers:
            self.logger.addHandler(handler)

    def save_config(self):
        """Save the configuration next to the log file."""
        if self.run_dir is None:
            return
        config_path = os.path.join(self.run_dir, 'config.json')
        with open(config_path, 'w') as f:
            json.dump(self.config.to_dict(), f, indent=2)

    def log_move(self, result: MoveResult):
        """Log a played move with its flips."""
        player = 'Black' if result.player == Board.BLACK else 'White'
        flipped = ' '.join(coords_to_notation(r, c) for r, c in result.flipped)
        self.logger.info(f"{player} {coords_to_notation(*result.placed)} flips [{flipped}]")
        if result.forced_pass:
            opponent = 'White' if result.player == Board.BLACK else 'Black'
            self.logger.info(f"{opponent} has no valid moves and passes")

    def log_outcome(self, outcome: Outcome):
        self.logger.info(f"Game over: {outcome.describe()}")

    def close(self):
        """Remove the handlers this logger installed and flush them."""
        for handler in self.handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self.handlers = []

    def __del__(self):
        """Ensure resources are properly released."""
        self.close()


def setup_logger(config: Config) -> GameLogger:
    """
    Set up and return a logger instance.

    Args:
        config: Configuration object

    Returns:
        GameLogger instance
    """
    return GameLogger(config)
