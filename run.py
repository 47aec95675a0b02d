#!/usr/bin/env python3
"""
run.py - Main entry point for Connect Four

Usage:
    python run.py play [--player1 NAME] [--player2 NAME] [--no-color]
    python run.py analyze --position 0,0,...,1,2
    python run.py benchmark [--iterations N]
"""

import sys

from connectfour.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
