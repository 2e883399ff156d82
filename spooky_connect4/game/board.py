"""
board.py - Board representation for the Connect Four engine

This module implements the Board class: the grid of placed pieces and the
per-column fill counters. It holds no turn logic; the Game class is its
only writer and keeps place/remove_top calls paired.
"""

from typing import Optional

import numpy as np

from spooky_connect4.debug import debug
from spooky_connect4.utils import (EMPTY, STANDARD_COLS, STANDARD_ROWS, Color,
                                   is_valid_position, render_board_ascii,
                                   validate_dimension)


class Board:
    """
    A width x height Connect Four board under gravity.

    Cells are addressed as (col, row) with row 0 at the bottom. Pieces in a
    column always occupy rows 0..column_height(col)-1 with no gaps.
    """

    def __init__(self, width: int = STANDARD_COLS, height: int = STANDARD_ROWS):
        """
        Initialize an empty board.

        Args:
            width: Number of columns (positive)
            height: Number of rows (positive)

        Raises:
            ValueError: If a dimension is zero or negative
            TypeError: If a dimension is not an integer
        """
        self._width = validate_dimension("width", width)
        self._height = validate_dimension("height", height)
        debug.trace(f"Initializing {self._width}x{self._height} Board", "board")
        self.clear()

    @classmethod
    def standard(cls) -> 'Board':
        """Create an empty 7x6 board."""
        return cls(STANDARD_COLS, STANDARD_ROWS)

    def clear(self):
        """Remove every piece from the board."""
        self._grid = np.zeros((self._height, self._width), dtype=np.int8)
        self._heights = [0] * self._width

    def copy(self) -> 'Board':
        """Create an independent copy of this board."""
        new_board = Board.__new__(Board)
        new_board._width = self._width
        new_board._height = self._height
        new_board._grid = self._grid.copy()
        new_board._heights = list(self._heights)
        return new_board

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def get_piece(self, col: int, row: int) -> Optional[Color]:
        """Get the piece at (col, row), or None if empty or off the board."""
        if not is_valid_position(col, row, self._width, self._height):
            return None
        return Color.from_value(self._grid[row, col])

    def column_height(self, col: int) -> int:
        """Number of pieces stacked in a column; 0 for an off-board column."""
        if not 0 <= col < self._width:
            return 0
        return self._heights[col]

    def is_column_full(self, col: int) -> bool:
        return self.column_height(col) == self._height

    def is_board_full(self) -> bool:
        return all(h == self._height for h in self._heights)

    def stone_count(self) -> int:
        return sum(self._heights)

    def place(self, col: int, color: Color) -> int:
        """
        Drop a piece of ``color`` on top of column ``col``.

        The caller must have checked that the column is on the board and
        not full.

        Returns:
            The row the piece landed on
        """
        row = self._heights[col]
        self._grid[row, col] = color.value
        self._heights[col] = row + 1
        return row

    def remove_top(self, col: int) -> Optional[Color]:
        """
        Remove the topmost piece of column ``col``.

        The caller must have checked that the column is non-empty.

        Returns:
            The color of the removed piece
        """
        row = self._heights[col] - 1
        color = Color.from_value(self._grid[row, col])
        self._grid[row, col] = EMPTY
        self._heights[col] = row
        return color

    def get_state(self) -> np.ndarray:
        """
        Get a copy of the cell grid.

        Returns:
            (height, width) int8 array indexed [row, col], row 0 at the
            bottom; 0 is empty, otherwise the Color value
        """
        return self._grid.copy()

    def grid_view(self) -> np.ndarray:
        """Read-only view of the live grid, for in-package consumers."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    def to_display_string(self) -> str:
        """Render the board top row first, one character per cell."""
        return render_board_ascii(self._grid)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self._width == other._width
                and self._height == other._height
                and np.array_equal(self._grid, other._grid))

    def __hash__(self) -> int:
        return hash((self._width, self._height, self._grid.tobytes()))

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return f"Board(width={self._width}, height={self._height})"


if __name__ == "__main__":
    board = Board.standard()
    for col, color in [(3, Color.RED), (3, Color.YELLOW), (4, Color.RED)]:
        row = board.place(col, color)
        print(f"{color} -> ({col}, {row})")
    print(board)
    print("Column 3 height:", board.column_height(3))
