"""
encoding.py - Tensor export and move codec for the Connect Four engine

Position encoding (input planes for an external model):

    planes 2t, 2t+1 for t = 0..HISTORY_LENGTH-1
        stones of the side to move / of the opponent, t plies ago
        (t = 0 is the current position). Steps before the first move
        are left as zeros.
    plane 2 * HISTORY_LENGTH
        constant 1.0 when Red is to move, 0.0 when Yellow is.

Each plane is (height, width) row-major with row 0 at the bottom. The
result is flattened into a single float32 buffer.

Move codec: a move's action index is its column. Decoding needs a Game
because the row is wherever gravity would place the piece right now.
"""

from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from spooky_connect4.debug import DebugLevel, debug
from spooky_connect4.game.move import Move
from spooky_connect4.utils import EMPTY, Color, validate_integer

if TYPE_CHECKING:
    from spooky_connect4.game.board import Board
    from spooky_connect4.game.rules import Game

# Own and opponent stones
PIECE_PLANES = 2

# Positions of history encoded, current position included
HISTORY_LENGTH = 8

# Side-to-move plane
CONSTANT_PLANES = 1

TOTAL_INPUT_PLANES = HISTORY_LENGTH * PIECE_PLANES + CONSTANT_PLANES


def encode_game_planes(game: 'Game') -> Tuple[np.ndarray, int, int, int]:
    """
    Encode the current game state as stacked feature planes.

    Earlier positions are rebuilt on a scratch copy of the grid by lifting
    the most recent stones off one at a time, so the game is never touched.

    Args:
        game: The game to encode

    Returns:
        Tuple of (flat float32 data, num_planes, height, width) where
        len(data) == num_planes * height * width
    """
    timed = debug.is_enabled_for(DebugLevel.DEBUG, "encode")
    if timed:
        debug.start_timer("encode_game_planes")
    width = game.width()
    height = game.height()
    perspective = game.turn()
    own_value = perspective.value
    opp_value = perspective.other().value

    planes = np.zeros((TOTAL_INPUT_PLANES, height, width), dtype=np.float32)
    grid = game.board().get_state()
    history = game.move_history()
    steps_back = min(HISTORY_LENGTH - 1, len(history))

    for t in range(steps_back + 1):
        if t > 0:
            undone = history[-t]
            grid[undone.row(), undone.col()] = EMPTY
        planes[t * PIECE_PLANES] = grid == own_value
        planes[t * PIECE_PLANES + 1] = grid == opp_value

    if perspective is Color.RED:
        planes[HISTORY_LENGTH * PIECE_PLANES] = 1.0

    if timed:
        debug.end_timer("encode_game_planes", "encode")
    return planes.reshape(-1), TOTAL_INPUT_PLANES, height, width


def encode_move(move: Move, board: 'Board' = None) -> int:
    """
    Encode a move as its action index (the column).

    Raises:
        ValueError: If ``board`` is given and the move lies off it
    """
    if board is not None and (move.col() >= board.width() or move.row() >= board.height()):
        raise ValueError(
            f"{move!r} does not fit a {board.width()}x{board.height()} board"
        )
    return move.col()


def decode_move(action: int, game: 'Game') -> Optional[Move]:
    """
    Decode an action index into the move it names in the game's current position.

    Returns:
        Move(col, column_height(col)), or None if the column is off the
        board (negative included) or already full

    Raises:
        TypeError: If ``action`` is not an integer
    """
    action = validate_integer("Action index", action)
    if action < 0 or action >= game.width():
        debug.debug(f"Cannot decode action {action}: column out of range", "encode")
        return None

    board = game.board()
    row = board.column_height(action)
    if row >= game.height():
        debug.debug(f"Cannot decode action {action}: column is full", "encode")
        return None

    return Move(action, row)
