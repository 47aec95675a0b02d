"""
board.py - Board representation and gravity placement for Connect Four

This module implements the Board class, which owns the token grid and the
win-highlight mask, applies moves under gravity and answers read queries.
"""

from typing import Iterable, List

import numpy as np

from connectfour.debug import debug
from connectfour.utils import (ROWS, COLS, Coord, Token, is_valid_position,
                               render_board_ascii)


class PlacementError(ValueError):
    """Base class for rejected placements."""

    def __init__(self, column, message: str):
        super().__init__(message)
        self.column = column


class ColumnFullError(PlacementError):
    """The target column has no empty cell left."""

    def __init__(self, column: int):
        super().__init__(column, f"Column {column} is full.")


class InvalidColumnError(PlacementError):
    """The target column is not an index on the board."""

    def __init__(self, column, cols: int = COLS):
        super().__init__(column, f"Column {column!r} is out of range 0-{cols - 1}.")


class Board:
    """
    Represents a Connect Four game board.

    Row 0 is the top of the board and row ``rows - 1`` the bottom. Tokens
    always settle in the lowest empty cell of a column, so the empty cells
    of every column stay contiguous at the top.
    """

    def __init__(self, rows: int = ROWS, cols: int = COLS):
        """Initialize an empty board."""
        debug.debug(f"Initializing new {rows}x{cols} Board", "board")
        self.rows = rows
        self.cols = cols
        self.grid = np.full((rows, cols), Token.EMPTY.value, dtype=int)
        self.win_mask = np.zeros((rows, cols), dtype=bool)

    @classmethod
    def from_grid(cls, grid) -> 'Board':
        """
        Build a board from an existing grid of token values.

        Args:
            grid: 2D array-like of 0 (empty), 1 or 2

        Returns:
            A new Board holding a copy of the grid

        Raises:
            ValueError: If the grid holds unknown values or floating tokens
        """
        values = np.array(grid, dtype=int)
        if values.ndim != 2:
            raise ValueError(f"Grid must be two-dimensional, got shape {values.shape}")

        known = {token.value for token in Token}
        if not np.isin(values, list(known)).all():
            raise ValueError("Grid contains values other than 0, 1 and 2")

        board = cls(*values.shape)
        board.grid = values
        for col in range(board.cols):
            filled = values[:, col] != Token.EMPTY.value
            # once a column has a token, everything below it must be filled
            if filled.any() and not filled[int(np.argmax(filled)):].all():
                raise ValueError(f"Column {col} has a token above an empty cell")
        return board

    def _check_column(self, column) -> int:
        """
        Validate a column index.

        Returns:
            The column as a plain int

        Raises:
            InvalidColumnError: If the column is not an integer on the board
        """
        if isinstance(column, (bool, np.bool_)) or not isinstance(column, (int, np.integer)):
            raise InvalidColumnError(column, self.cols)
        if not (0 <= column < self.cols):
            raise InvalidColumnError(column, self.cols)
        return int(column)

    def is_column_full(self, column: int) -> bool:
        """
        Check whether a column has no empty cell left.

        Args:
            column: The column to check (0-indexed)

        Raises:
            InvalidColumnError: If the column is not on the board
        """
        column = self._check_column(column)
        return bool(self.grid[0, column] != Token.EMPTY.value)

    def is_full(self) -> bool:
        """Check whether every column is full."""
        return not self.valid_columns()

    def valid_columns(self) -> List[int]:
        """Get the columns that can still take a token."""
        return [col for col in range(self.cols) if not self.is_column_full(col)]

    def column_height(self, column: int) -> int:
        """
        Get the number of tokens in a column.

        Args:
            column: The column to count (0-indexed)

        Returns:
            How many cells of the column are filled, from 0 to rows
        """
        column = self._check_column(column)
        return int(np.count_nonzero(self.grid[:, column] != Token.EMPTY.value))

    def place(self, column: int, token: Token) -> int:
        """
        Drop a token into a column.

        Args:
            column: The column to drop into (0-indexed)
            token: The player token to place

        Returns:
            The row index where the token landed

        Raises:
            InvalidColumnError: If the column is not on the board
            ColumnFullError: If the column has no empty cell
        """
        column = self._check_column(column)
        if not isinstance(token, Token) or token == Token.EMPTY:
            raise ValueError(f"Cannot place {token!r}, a player token is required")

        debug.debug(f"Placing {token} in column {column}", "board")

        # Scan from the bottom row upwards for the lowest empty cell
        for row in range(self.rows - 1, -1, -1):
            if self.grid[row, column] == Token.EMPTY.value:
                self.grid[row, column] = token.value
                debug.trace(f"Token {token} landed at ({row}, {column})", "board")
                return row

        debug.debug(f"Column {column} is full", "board")
        raise ColumnFullError(column)

    def cell_at(self, row: int, col: int) -> Token:
        """Get the token in a cell."""
        if not is_valid_position(row, col, self.rows, self.cols):
            raise IndexError(f"Cell ({row}, {col}) is outside the board")
        return Token(int(self.grid[row, col]))

    def is_winning_cell(self, row: int, col: int) -> bool:
        """Check whether a cell belongs to the confirmed winning line."""
        if not is_valid_position(row, col, self.rows, self.cols):
            raise IndexError(f"Cell ({row}, {col}) is outside the board")
        return bool(self.win_mask[row, col])

    def mark_winning_line(self, line: Iterable[Coord]) -> None:
        """Flag the given cells in the win mask."""
        for row, col in line:
            self.win_mask[row, col] = True

    def get_state(self) -> np.ndarray:
        """Get a copy of the grid."""
        return self.grid.copy()

    def render(self) -> str:
        """Render the board as plain text."""
        return render_board_ascii(self.grid, self.win_mask)

    def count(self, token: Token) -> int:
        """Get the number of cells holding a token."""
        return int(np.count_nonzero(self.grid == token.value))

    def __str__(self) -> str:
        """String representation of the board."""
        return self.render()
