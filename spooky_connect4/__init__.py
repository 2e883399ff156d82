"""
spooky_connect4 - Connect Four rules engine

This package provides the authoritative Connect Four game state: the
board, move legality, turn alternation with undo, win/draw detection and
the input-plane encoding consumed by external models and search code.
"""

from spooky_connect4.game import (TOTAL_INPUT_PLANES, Board, ConnectFourEnv,
                                  Game, Move)
from spooky_connect4.utils import Color, GameOutcome

__version__ = '0.1.0'

RED = Color.RED
YELLOW = Color.YELLOW

__all__ = ['Board', 'Game', 'Move', 'GameOutcome', 'Color', 'ConnectFourEnv',
           'RED', 'YELLOW', 'TOTAL_INPUT_PLANES']
