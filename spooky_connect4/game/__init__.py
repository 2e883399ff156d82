"""
spooky_connect4.game - Core game mechanics for Connect Four

This package contains the board representation, the move type, the game
state machine and the tensor encoding of positions.
"""

from spooky_connect4.game.board import Board
from spooky_connect4.game.move import Move
from spooky_connect4.game.encoding import (TOTAL_INPUT_PLANES, decode_move,
                                           encode_game_planes, encode_move)
from spooky_connect4.game.rules import ConnectFourEnv, Game

__all__ = ['Board', 'Move', 'Game', 'ConnectFourEnv', 'TOTAL_INPUT_PLANES',
           'encode_game_planes', 'encode_move', 'decode_move']
