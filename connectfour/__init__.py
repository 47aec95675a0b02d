"""
connectfour - Two-player Connect Four for the terminal

This package provides the board state engine (gravity placement, win
detection and the winning-line mask), a turn controller that runs a match
between two players, and a console front end.
"""

# Version number
__version__ = '0.1.0'
