"""
utils.py - Constants, enumerations and helpers shared across the game

This module holds the board dimensions, the token and result enumerations,
the ordered win-scan table and the ASCII board renderer.
"""

from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

import numpy as np

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win

# ANSI colour codes for terminal output
ANSI_RESET = "\033[0m"
ANSI_RED = "\033[31m"
ANSI_YELLOW = "\033[33m"
ANSI_PURPLE = "\033[35m"

WIN_COLOR = ANSI_PURPLE

Coord = Tuple[int, int]
WinningLine = List[Coord]


class Token(Enum):
    """Enumeration of cell contents: empty or one of the two player tokens."""
    EMPTY = 0
    ONE = 1    # First player
    TWO = 2    # Second player

    def other(self) -> 'Token':
        """Get the opposing token."""
        if self == Token.ONE:
            return Token.TWO
        elif self == Token.TWO:
            return Token.ONE
        return Token.EMPTY

    def __str__(self):
        return TOKEN_SYMBOLS[self]


TOKEN_SYMBOLS = {
    Token.EMPTY: ".",
    Token.ONE: "X",
    Token.TWO: "O",
}

TOKEN_COLOR_NAMES = {
    Token.ONE: "Red",
    Token.TWO: "Yellow",
}

DEFAULT_TOKEN_COLORS: Dict[Token, str] = {
    Token.ONE: ANSI_RED,
    Token.TWO: ANSI_YELLOW,
}


class GameResult(Enum):
    """Enumeration of match states."""
    IN_PROGRESS = auto()
    WON = auto()
    DRAW = auto()

    def is_game_over(self) -> bool:
        """Check if the match has reached a terminal state."""
        return self != GameResult.IN_PROGRESS


class Direction(Enum):
    """Line orientations checked by the win scan, in scan order."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_DOWN = auto()  # top-left to bottom-right
    DIAGONAL_UP = auto()    # bottom-left to top-right


# Direction vectors (row, col) for each direction
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_DOWN: (1, 1),
    Direction.DIAGONAL_UP: (-1, 1),
}


def scan_ranges(direction: Direction, rows: int = ROWS, cols: int = COLS) -> Tuple[range, range]:
    """
    Get the start row and start column ranges for a scan direction.

    The ranges keep every run of CONNECT_N cells inside the grid, so the
    run check itself never needs a bounds test.
    """
    span = CONNECT_N - 1
    if direction == Direction.HORIZONTAL:
        return range(rows), range(cols - span)
    if direction == Direction.VERTICAL:
        return range(rows - span), range(cols)
    if direction == Direction.DIAGONAL_DOWN:
        return range(rows - span), range(cols - span)
    return range(span, rows), range(cols - span)


def is_valid_position(row: int, col: int, rows: int = ROWS, cols: int = COLS) -> bool:
    """Check if a position is within the board boundaries."""
    return 0 <= row < rows and 0 <= col < cols


def colorize(text: str, code: Optional[str]) -> str:
    """Wrap text in an ANSI colour code, or return it unchanged."""
    if not code:
        return text
    return f"{code}{text}{ANSI_RESET}"


def render_board_ascii(grid: np.ndarray,
                       win_mask: Optional[np.ndarray] = None,
                       colors: Optional[Dict[Token, str]] = None,
                       win_color: Optional[str] = WIN_COLOR) -> str:
    """
    Render a board grid as text.

    Args:
        grid: The board grid of token values
        win_mask: Optional boolean grid of winning cells
        colors: Token to ANSI colour map; None renders without colour
        win_color: Colour for winning cells when colours are enabled

    Returns:
        Multi-line string with a column header and bordered rows
    """
    rows, cols = grid.shape
    border = " " + "-" * (cols * 2 + 1) + " "

    result = ["  " + " ".join(str(c) for c in range(cols)), border]
    for row in range(rows):
        cells = []
        for col in range(cols):
            token = Token(int(grid[row, col]))
            symbol = str(token)
            if colors is not None:
                if win_mask is not None and win_mask[row, col]:
                    symbol = colorize(symbol, win_color)
                else:
                    symbol = colorize(symbol, colors.get(token))
            cells.append(symbol)
        result.append("| " + " ".join(cells) + " |")
    result.append(border)

    return "\n".join(result)
