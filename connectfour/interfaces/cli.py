"""
cli.py - Command-line interface for Connect Four

This module provides the console collaborators used by the turn controller
(keyboard input and coloured board rendering) and a small argparse front
end with commands to play a match, analyze a position and benchmark the
engine.
"""

import argparse
import random
import sys
from typing import Dict, List, Optional

import numpy as np

from connectfour.debug import debug
from connectfour.game.board import Board, ColumnFullError
from connectfour.game.rules import Player, TurnController, find_winning_line
from connectfour.utils import (ROWS, COLS, DEFAULT_TOKEN_COLORS, TOKEN_COLOR_NAMES,
                               WIN_COLOR, Token, colorize, render_board_ascii)


class QuitRequested(Exception):
    """The player asked to leave the match."""


class ConsoleInput:
    """Reads column choices from the keyboard."""

    def __init__(self, cols: int = COLS):
        self.cols = cols

    def request_column(self, player_name: str) -> int:
        """
        Prompt until the player enters a column on the board.

        Returns:
            A column index in range 0..cols-1

        Raises:
            QuitRequested: If the player enters 'q'
        """
        while True:
            raw = input(f"\n{player_name}'s turn, enter column (0-{self.cols - 1}): ").strip()

            if raw.lower() == 'q':
                raise QuitRequested(player_name)

            try:
                column = int(raw)
            except ValueError:
                print(f"Invalid input '{raw}'. Please enter a number.")
                continue

            if 0 <= column < self.cols:
                return column
            print(f"Invalid column. Please enter a number between 0 and {self.cols - 1}.")

    def column_rejected(self, player_name: str, error: ColumnFullError) -> None:
        """Tell the player the chosen column is full."""
        print(f"Column {error.column} is full. Please choose another.")


class ConsoleRenderer:
    """Prints the board, highlighting the winning line."""

    def __init__(self, use_color: bool = True):
        self.use_color = use_color

    def format(self, board: Board, colors: Dict[Token, str]) -> str:
        """
        Build the text for a board.

        Args:
            board: The board to show
            colors: Token to ANSI colour map, ignored when colour is off

        Returns:
            The board as printable text
        """
        return render_board_ascii(board.get_state(), board.win_mask.copy(),
                                  colors if self.use_color else None)

    def render(self, board: Board, colors: Dict[Token, str]) -> None:
        """Print the board."""
        print("\n" + self.format(board, colors))


class SimpleCLI:
    """Command-line interface for Connect Four."""

    def __init__(self):
        self.args = None

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments and apply the logging options."""
        parser = argparse.ArgumentParser(description='Connect Four')
        parser.add_argument('--debug-level', default='warning',
                            choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                            help='Logging verbosity')
        parser.add_argument('--log-file', help='Also write log messages to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a two-player match')
        play_parser.add_argument('--player1', help='Name of the first player (X, red)')
        play_parser.add_argument('--player2', help='Name of the second player (O, yellow)')
        play_parser.add_argument('--no-color', action='store_true', help='Disable ANSI colours')

        analyze_parser = subparsers.add_parser('analyze', help='Analyze a board position')
        analyze_parser.add_argument('--position', required=True,
                                    help=f'{ROWS * COLS} comma-separated values, 0=empty 1=X 2=O, '
                                         'top row first')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark the engine')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of iterations for benchmarking')

        self.args = parser.parse_args(argv)

        debug.set_from_string(self.args.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

        return self.args

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the command named on the command line."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            return self.play_game()
        elif self.args.command == 'analyze':
            return self.analyze_position()
        elif self.args.command == 'benchmark':
            return self.benchmark()

        print("Please specify a command. Use --help for options.")
        return 1

    @staticmethod
    def _ask_name(prompt: str, default: str) -> str:
        """Prompt for a player name, falling back to a default when blank."""
        name = input(prompt).strip()
        return name or default

    def play_game(self) -> int:
        """Play a match between two people at the same keyboard."""
        print("\n--- Welcome to Connect 4 ---")

        try:
            p1_name = self.args.player1 or self._ask_name("Enter Player 1 Name: ", "Player 1")
            p2_name = self.args.player2 or self._ask_name("Enter Player 2 Name: ", "Player 2")
            players = [Player(p1_name, Token.ONE), Player(p2_name, Token.TWO)]

            print(f"\nMatch Started: {p1_name} ({TOKEN_COLOR_NAMES[Token.ONE]}) vs "
                  f"{p2_name} ({TOKEN_COLOR_NAMES[Token.TWO]})")

            renderer = ConsoleRenderer(use_color=not self.args.no_color)
            controller = TurnController(players, ConsoleInput(), renderer, colors=DEFAULT_TOKEN_COLORS)
            renderer.render(controller.board, controller.colors)

            result = controller.play()
        except (QuitRequested, EOFError, KeyboardInterrupt):
            print("\nQuitting game.")
            return 0

        win_color = WIN_COLOR if renderer.use_color else None
        if result.is_draw:
            print("\n" + colorize("GAME OVER: Draw!", win_color))
        else:
            print("\n" + colorize(f"GAME OVER: {result.winner.name} Wins!", win_color))
            if not renderer.use_color:
                print(f"Winning line: {result.winning_line}")
        return 0

    def analyze_position(self) -> int:
        """Load a position and report wins, valid columns and free cells."""
        try:
            values = [int(v) for v in self.args.position.split(',')]
            if len(values) != ROWS * COLS:
                raise ValueError(f"Position string must have {ROWS * COLS} values, got {len(values)}")
            board = Board.from_grid(np.array(values).reshape(ROWS, COLS))
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return 1

        print("Loaded position:")
        print(board.render())

        line = find_winning_line(board.grid)
        if line is None:
            print("\nNo win detected for any player")
        else:
            row, col = line[0]
            print(f"\nWin for {board.cell_at(row, col)} detected: {line}")

        if board.is_full():
            print("Board is full")
        else:
            print(f"Empty spaces: {board.count(Token.EMPTY)}")
        print(f"Column heights: {[board.column_height(c) for c in range(board.cols)]}")
        print(f"Valid moves: {board.valid_columns()}")
        return 0

    def benchmark(self) -> int:
        """Benchmark board creation, placement, win scans and full matches."""
        iterations = max(1, self.args.iterations)
        print(f"Running benchmark with {iterations} iterations...")

        debug.start_timer("board_init")
        for _ in range(iterations):
            Board()
        board_init_time = debug.end_timer("board_init", "cli")
        print(f"Board initialization: {board_init_time:.6f} seconds total, "
              f"{board_init_time / iterations * 1000:.6f} ms per board")

        board = Board()
        token = Token.ONE
        moves_made = 0
        debug.start_timer("moves")
        for _ in range(iterations):
            columns = board.valid_columns()
            if not columns:
                board = Board()
                continue
            board.place(random.choice(columns), token)
            token = token.other()
            moves_made += 1
        moves_time = debug.end_timer("moves", "cli")
        print(f"Making {moves_made} moves: {moves_time:.6f} seconds total, "
              f"{moves_time / max(1, moves_made) * 1000:.6f} ms per move")

        games = max(1, iterations // 10)
        total_moves = 0
        wins = 0
        players = [Player("A", Token.ONE), Player("B", Token.TWO)]
        debug.start_timer("game_simulation")
        for _ in range(games):
            controller = TurnController(players)
            while not controller.is_game_over():
                controller.submit(random.choice(controller.board.valid_columns()))
            result = controller.result()
            total_moves += result.moves
            wins += 0 if result.is_draw else 1
        simulation_time = debug.end_timer("game_simulation", "cli")
        print(f"Played {games} games ({wins} won, {games - wins} drawn) with {total_moves} moves: "
              f"{simulation_time:.6f} seconds total, "
              f"{simulation_time / games * 1000:.6f} ms per game")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
