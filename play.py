"""
Console driver for the Othello engine: play in the terminal or replay a transcript.
"""
import os
import sys
import argparse
from pathlib import Path

# Add src directory to path
sys.path.append(str(Path(__file__).parent.absolute()))

from src.config import Config, get_default_config
from src.logger import setup_logger
from src.game import (
    Board, ReversiGame, coords_to_notation, notation_to_coords, parse_transcript
)


def render(game: ReversiGame, config: Config) -> str:
    """Board diagram using the configured symbols, followed by score and status."""
    display = config.display
    symbols = {
        Board.EMPTY: display.empty_symbol,
        Board.BLACK: display.black_symbol,
        Board.WHITE: display.white_symbol,
    }
    hints = set(game.get_valid_moves()) if display.show_legal_moves else set()
    black, white = game.get_score()
    return (f"{game.board.render(symbols, hints, display.hint_symbol)}\n"
            f"Score - Black: {black}, White: {white}\n"
            f"{game.status_text()}")


def replay(game: ReversiGame, transcript: str, game_logger) -> int:
    """Play a transcript move by move, logging each applied move.

    On the first illegal move the moves before it stay applied and 1 is returned.
    """
    try:
        moves = parse_transcript(transcript)
    except ValueError as e:
        print(f"Transcript rejected: {e}")
        return 1

    for index, (row, col) in enumerate(moves, start=1):
        result = game.make_move(row, col)
        if result is None:
            print(f"Transcript rejected at move {index} ({coords_to_notation(row, col)}): "
                  f"not a legal move. Moves applied before it: {index - 1}")
            return 1
        game_logger.log_move(result)

    if game.is_game_over():
        game_logger.log_outcome(game.get_outcome())
    return 0


def interactive(game: ReversiGame, config: Config, game_logger) -> None:
    print("Enter moves like 'd3'. 'r' restarts, 'q' quits.\n")
    print(render(game, config))
    while True:
        try:
            command = input("> ").strip().lower()
        except EOFError:
            break

        if command in ('q', 'quit', 'exit'):
            break
        if command in ('r', 'restart'):
            game.restart()
            print(render(game, config))
            continue
        if game.is_game_over():
            print("The game is over. Press 'r' to restart or 'q' to quit.")
            continue

        try:
            row, col = notation_to_coords(command)
        except ValueError as e:
            print(e)
            continue

        result = game.make_move(row, col)
        if result is None:
            print(f"{command} is not a valid move.")
            continue

        game_logger.log_move(result)
        if result.game_over:
            game_logger.log_outcome(game.get_outcome())
        print(render(game, config))


def main():
    """Play Othello in the terminal, or replay a transcript and print the final position."""
    parser = argparse.ArgumentParser(description='Play Othello in the terminal')
    parser.add_argument('--config', type=str, default='configs/default_config.json',
                        help='Path to config file')
    parser.add_argument('--transcript', type=str, default=None,
                        help="Moves to replay, e.g. 'f5d6c3d3c4'")
    args = parser.parse_args()

    # Load configuration
    if os.path.exists(args.config):
        config = Config.load(args.config)
    else:
        print(f"Config file {args.config} not found, using default configuration")
        config = get_default_config()

    game_logger = setup_logger(config)
    game = ReversiGame()
    try:
        if args.transcript:
            status = replay(game, args.transcript, game_logger)
            print(render(game, config))
            return status
        interactive(game, config, game_logger)
        return 0
    finally:
        game_logger.close()


if __name__ == "__main__":
    sys.exit(main())
