"""
move.py - Candidate placements for the Connect Four engine

A Move names a (col, row) cell. It carries no validity guarantee of its
own: legality is always judged against a particular Board, and the row of
a legal move is fixed by gravity (it equals the column's current height).
"""

from typing import TYPE_CHECKING, Optional

from spooky_connect4.utils import validate_integer

if TYPE_CHECKING:
    from spooky_connect4.game.board import Board
    from spooky_connect4.game.rules import Game


class Move:
    """An immutable (col, row) placement candidate, compared by value."""

    __slots__ = ("_col", "_row")

    def __init__(self, col: int, row: int):
        col = validate_integer("Move column", col)
        row = validate_integer("Move row", row)
        if col < 0 or row < 0:
            raise ValueError(f"Move coordinates must be non-negative, got ({col}, {row})")
        object.__setattr__(self, "_col", col)
        object.__setattr__(self, "_row", row)

    def __setattr__(self, name, value):
        raise AttributeError("Move is immutable")

    def col(self) -> int:
        return self._col

    def row(self) -> int:
        return self._row

    def is_legal(self, board: 'Board') -> bool:
        """
        Check the move against a board.

        Legal iff the column is on the board, not full, and the row is
        exactly the column's current height. A row below or above that
        slot is illegal even when the column has space.
        """
        if self._col >= board.width():
            return False
        if board.is_column_full(self._col):
            return False
        return self._row == board.column_height(self._col)

    def encode(self, board: 'Board' = None) -> int:
        """
        Encode the move as an action index.

        The index is the column, so legal moves of a position map one to
        one onto 0..width-1. Passing ``board`` checks that the move fits
        that board's dimensions.

        Raises:
            ValueError: If ``board`` is given and the move lies off it
        """
        from spooky_connect4.game.encoding import encode_move
        return encode_move(self, board)

    @staticmethod
    def decode(code: int, game: 'Game') -> Optional['Move']:
        """
        Decode an action index against a live game.

        Only the column survives encoding. The row is re-derived from the
        game's current column height, i.e. where gravity would put the
        piece if it were played now. Decoding the same index against two
        different positions can therefore give two different rows.

        Returns:
            The move, or None if the column is off the board or full
        """
        from spooky_connect4.game.encoding import decode_move
        return decode_move(code, game)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Move):
            return NotImplemented
        return self._col == other._col and self._row == other._row

    def __hash__(self) -> int:
        return hash((self._col, self._row))

    def __reduce__(self):
        return (Move, (self._col, self._row))

    def __str__(self) -> str:
        return f"col {self._col}"

    def __repr__(self) -> str:
        return f"Move(col={self._col}, row={self._row})"
