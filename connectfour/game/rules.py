"""
rules.py - Win detection and turn control for Connect Four

This module provides:
1. The win scan, which finds the first line of four tokens in a fixed order
2. The TurnController, which alternates two players over one Board and
   decides when the match is won or drawn
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence

import numpy as np

from connectfour.debug import debug
from connectfour.game.board import Board, ColumnFullError
from connectfour.utils import (CONNECT_N, DEFAULT_TOKEN_COLORS, DIRECTION_VECTORS,
                               Direction, GameResult, Token, WinningLine, scan_ranges)


# Scan order: every horizontal run, then vertical, then both diagonals
SCAN_ORDER = (
    Direction.HORIZONTAL,
    Direction.VERTICAL,
    Direction.DIAGONAL_DOWN,
    Direction.DIAGONAL_UP,
)


def find_winning_line(grid: np.ndarray) -> Optional[WinningLine]:
    """
    Find the first run of CONNECT_N identical tokens on a grid.

    Runs are tried horizontally, vertically, down-right and up-right, each
    category row by row from the top and left to right. The first run found
    is returned; no search is made for a longer or later one.

    Args:
        grid: 2D array of token values

    Returns:
        The run's (row, col) coordinates from its start cell, or None
    """
    rows, cols = grid.shape
    empty = Token.EMPTY.value

    for direction in SCAN_ORDER:
        dr, dc = DIRECTION_VECTORS[direction]
        row_range, col_range = scan_ranges(direction, rows, cols)
        for r in row_range:
            for c in col_range:
                token = grid[r, c]
                if token == empty:
                    continue
                if all(grid[r + i * dr, c + i * dc] == token for i in range(1, CONNECT_N)):
                    line = [(r + i * dr, c + i * dc) for i in range(CONNECT_N)]
                    debug.trace(f"{direction.name} run of {Token(int(token))} at {line}", "rules")
                    return line

    return None


def scan_for_win(board: Board) -> Optional[WinningLine]:
    """
    Scan a board for a winning line and mark it in the board's win mask.

    Returns:
        The four winning coordinates in scan order, or None if nobody has won
    """
    line = find_winning_line(board.grid)
    if line is None:
        return None

    board.mark_winning_line(line)
    debug.info(f"Winning line found: {line}", "rules")
    return line


class GameOverError(RuntimeError):
    """A move was submitted after the match ended."""


@dataclass(frozen=True)
class Player:
    """A participant in a match: a display name and the token they drop."""
    name: str
    token: Token


@dataclass(frozen=True)
class MatchState:
    """
    Where the match stands.

    ``IN_PROGRESS`` waits on ``player_index``, ``WON`` records the winner's
    index and ``DRAW`` carries no player.
    """
    status: GameResult
    player_index: Optional[int] = None

    @classmethod
    def awaiting(cls, index: int) -> 'MatchState':
        """State waiting on the player at ``index`` to choose a column."""
        return cls(GameResult.IN_PROGRESS, index)

    @classmethod
    def won(cls, index: int) -> 'MatchState':
        """Terminal state won by the player at ``index``."""
        return cls(GameResult.WON, index)

    @classmethod
    def draw(cls) -> 'MatchState':
        """Terminal state for a full board with no winner."""
        return cls(GameResult.DRAW)

    def is_game_over(self) -> bool:
        """Check if this is a terminal state."""
        return self.status.is_game_over()


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of a finished match.

    ``moves`` counts every token on the final board, including any that
    were already there when the controller was handed the board.
    """
    winner: Optional[Player]
    winning_line: Optional[WinningLine]
    moves: int

    @property
    def is_draw(self) -> bool:
        """True when the match ended with no winner."""
        return self.winner is None


class InputSource(Protocol):
    """Supplies column choices for the player whose turn it is."""

    def request_column(self, player_name: str) -> int:
        """Return a column in range 0..cols-1 for the named player."""
        ...

    def column_rejected(self, player_name: str, error: ColumnFullError) -> None:
        """Tell the named player their column was full."""
        ...


class Renderer(Protocol):
    """Displays the board. Must not change it."""

    def render(self, board: Board, colors: Dict[Token, str]) -> None:
        ...


class TurnController:
    """
    Runs one match between two players on a single board.

    The controller is the only writer of its board. Each successful
    placement is rendered and followed by a win scan; a full board with no
    winner ends the match as a draw.

    A board passed in is taken as a position reached by alternating play
    from the first player: the controller works out whose turn it is, or
    that the match is already won or drawn, before any move is made.
    """

    def __init__(self, players: Sequence[Player],
                 input_source: Optional[InputSource] = None,
                 renderer: Optional[Renderer] = None,
                 board: Optional[Board] = None,
                 colors: Optional[Dict[Token, str]] = None):
        """
        Set up a match.

        Args:
            players: The two players, first mover first
            input_source: Supplies columns for play()
            renderer: Observer shown the board after each placement
            board: Position to continue from; a new empty board by default
            colors: Token to ANSI colour map handed to the renderer

        Raises:
            ValueError: If the players or the starting position are invalid
        """
        players = list(players)
        if len(players) != 2:
            raise ValueError(f"A match needs exactly two players, got {len(players)}")
        tokens = {player.token for player in players}
        if len(tokens) != 2 or Token.EMPTY in tokens:
            raise ValueError("Players must hold two distinct, non-empty tokens")

        debug.debug(f"Initializing match: {players[0].name} vs {players[1].name}", "game")
        self.players: List[Player] = players
        self.input_source = input_source
        self.renderer = renderer
        self.board = board if board is not None else Board()
        self.colors = dict(DEFAULT_TOKEN_COLORS if colors is None else colors)
        self.winning_line: Optional[WinningLine] = None
        self.state = self._starting_state()

    def _starting_state(self) -> MatchState:
        """
        Work out the state of the match from the board it starts on.

        Returns:
            WON if a line of four is already on the board, DRAW if the board
            is full, otherwise the player whose turn it is

        Raises:
            ValueError: If the token counts cannot come from alternating play
        """
        first, second = (self.board.count(player.token) for player in self.players)
        self.moves = first + second
        if first - second not in (0, 1):
            raise ValueError(f"Board cannot be reached by alternating play: "
                             f"{self.players[0].name} has {first} tokens, "
                             f"{self.players[1].name} has {second}")

        line = scan_for_win(self.board)
        if line is not None:
            row, col = line[0]
            owner = self.board.cell_at(row, col)
            index = 0 if self.players[0].token == owner else 1
            self.winning_line = line
            debug.info(f"Board already won by {self.players[index].name}", "game")
            return MatchState.won(index)

        if self.board.is_full():
            debug.info("Board already full, match drawn", "game")
            return MatchState.draw()

        return MatchState.awaiting(0 if first == second else 1)

    @property
    def current_player(self) -> Player:
        """
        The player to move, or the winner once the match is won.

        Raises:
            GameOverError: If the match ended in a draw
        """
        if self.state.player_index is None:
            raise GameOverError("The match ended in a draw")
        return self.players[self.state.player_index]

    def is_game_over(self) -> bool:
        """Check whether the match has been won or drawn."""
        return self.state.is_game_over()

    def _render(self) -> None:
        if self.renderer is not None:
            self.renderer.render(self.board, self.colors)

    def _advance(self, index: int) -> Optional[WinningLine]:
        """Scan for a win after a placement and move to the next state."""
        player = self.players[index]

        debug.start_timer("win_check")
        line = scan_for_win(self.board)
        debug.end_timer("win_check", "rules")

        if line is not None:
            self.winning_line = line
            self.state = MatchState.won(index)
            debug.info(f"{player.name} ({player.token}) wins after {self.moves} moves", "game")
        elif self.board.is_full():
            self.state = MatchState.draw()
            debug.info(f"Board full after {self.moves} moves, match drawn", "game")
        else:
            self.state = MatchState.awaiting(1 - index)
            debug.debug(f"Switching to {self.players[1 - index].name}", "game")
        return line

    def submit(self, column: int) -> int:
        """
        Drop the current player's token into a column.

        Args:
            column: The chosen column (0-indexed)

        Returns:
            The row where the token landed

        Raises:
            GameOverError: If the match has already ended
            ColumnFullError: If the column is full; the turn does not advance
            InvalidColumnError: If the column is not on the board
        """
        if self.state.is_game_over():
            raise GameOverError(f"Match is over ({self.state.status.name})")

        index = self.state.player_index
        row = self.board.place(column, self.players[index].token)
        self.moves += 1

        # the state must follow the board even when the renderer fails
        try:
            self._render()
        finally:
            line = self._advance(index)

        if line is not None:
            self._render()
        return row

    def play(self) -> MatchResult:
        """
        Run turns until the match is won or drawn.

        Returns:
            The match result
        """
        if self.input_source is None:
            raise ValueError("play() needs an input source")

        while not self.state.is_game_over():
            player = self.current_player
            column = self.input_source.request_column(player.name)
            try:
                self.submit(column)
            except ColumnFullError as e:
                debug.warning(f"{player.name} chose full column {e.column}", "game")
                self.input_source.column_rejected(player.name, e)

        return self.result()

    def result(self) -> MatchResult:
        """Get the result of a finished match."""
        if not self.state.is_game_over():
            raise RuntimeError("Match is still in progress")

        winner = None
        if self.state.status == GameResult.WON:
            winner = self.players[self.state.player_index]
        return MatchResult(winner=winner, winning_line=self.winning_line, moves=self.moves)
