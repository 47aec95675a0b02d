"""
connectfour.game - Core game mechanics for Connect Four

This package contains the board representation, the win scan and the
turn controller that runs a match.
"""

from connectfour.game.board import Board, ColumnFullError, InvalidColumnError, PlacementError
from connectfour.game.rules import (GameOverError, MatchResult, MatchState, Player,
                                    TurnController, find_winning_line, scan_for_win)

__all__ = [
    'Board', 'ColumnFullError', 'InvalidColumnError', 'PlacementError',
    'GameOverError', 'MatchResult', 'MatchState', 'Player', 'TurnController',
    'find_winning_line', 'scan_for_win',
]
