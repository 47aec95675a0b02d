"""
connectfour.interfaces - User interfaces for Connect Four

This package contains the console front end: keyboard input, coloured board
rendering and the command-line entry point.
"""

# Don't import anything here to avoid circular imports
__all__ = []
