"""
utils.py - Constants, enumerations and helpers for the Connect Four engine

This module provides the piece colors, the terminal outcome type, the
direction vectors used by the win scan, and board rendering shared by the
Board and Game classes.
"""

from enum import Enum, auto
from typing import List, Optional, Tuple

import numpy as np

# Canonical board dimensions; any positive size is accepted
STANDARD_COLS = 7
STANDARD_ROWS = 6
CONNECT_N = 4  # Number of pieces in a row to win

EMPTY = 0  # Grid value of an empty cell


class Color(Enum):
    """Piece owner and player to move. Values double as grid cell values."""
    RED = 1
    YELLOW = 2

    def other(self) -> 'Color':
        """Get the opposing color."""
        return Color.YELLOW if self is Color.RED else Color.RED

    def to_char(self) -> str:
        return "R" if self is Color.RED else "Y"

    @classmethod
    def from_value(cls, value: int) -> Optional['Color']:
        """Map a grid cell value back to a Color (None for empty)."""
        if value == EMPTY:
            return None
        return cls(int(value))

    def __str__(self):
        return self.name.capitalize()


class GameOutcome(Enum):
    """
    Terminal result of a game.

    A tagged value: either a win for one color or a draw. There is no
    in-progress member; an ongoing game simply has no outcome.
    """
    RED_WIN = auto()
    YELLOW_WIN = auto()
    DRAW = auto()

    @classmethod
    def win(cls, color: Color) -> 'GameOutcome':
        return cls.RED_WIN if color is Color.RED else cls.YELLOW_WIN

    def winner(self) -> Optional[Color]:
        if self is GameOutcome.RED_WIN:
            return Color.RED
        if self is GameOutcome.YELLOW_WIN:
            return Color.YELLOW
        return None

    def is_draw(self) -> bool:
        return self is GameOutcome.DRAW

    def name(self) -> str:
        winner = self.winner()
        if winner is None:
            return "Draw"
        return f"{winner} wins"

    def encode_winner_absolute(self) -> float:
        """+1.0 for a Red win, -1.0 for a Yellow win, 0.0 for a draw."""
        winner = self.winner()
        if winner is None:
            return 0.0
        return 1.0 if winner is Color.RED else -1.0

    def encode_winner_from_perspective(self, perspective: Color) -> float:
        """+1.0 if ``perspective`` won, -1.0 if it lost, 0.0 for a draw."""
        if not isinstance(perspective, Color):
            raise TypeError(f"perspective must be a Color, got {perspective!r}")
        winner = self.winner()
        if winner is None:
            return 0.0
        return 1.0 if winner is perspective else -1.0

    def __str__(self):
        return self.name()


class Direction(Enum):
    """Axes scanned for four-in-a-row."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()    # bottom-left to top-right
    DIAGONAL_DOWN = auto()  # top-left to bottom-right


# Direction vectors as (dcol, drow); row 0 is the bottom of the board
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (1, 0),
    Direction.VERTICAL: (0, 1),
    Direction.DIAGONAL_UP: (1, 1),
    Direction.DIAGONAL_DOWN: (1, -1),
}


def is_valid_position(col: int, row: int, width: int, height: int) -> bool:
    """Check if a (col, row) cell lies on a width x height board."""
    return 0 <= col < width and 0 <= row < height


def line_through(grid: np.ndarray, col: int, row: int,
                 dcol: int, drow: int) -> List[Tuple[int, int]]:
    """
    Collect the contiguous run of same-colored cells through (col, row).

    Walks both ways along (dcol, drow) from the given cell and returns the
    run, including the starting cell, as (col, row) pairs ordered from the
    negative end to the positive end.

    Args:
        grid: (height, width) cell array indexed [row, col]
        col: Column of the starting cell
        row: Row of the starting cell
        dcol: Column step of the axis
        drow: Row step of the axis

    Returns:
        The run, or an empty list if the starting cell is empty
    """
    height, width = grid.shape
    value = grid[row, col]
    if value == EMPTY:
        return []

    backward = []
    c, r = col - dcol, row - drow
    while is_valid_position(c, r, width, height) and grid[r, c] == value:
        backward.append((c, r))
        c -= dcol
        r -= drow

    forward = []
    c, r = col + dcol, row + drow
    while is_valid_position(c, r, width, height) and grid[r, c] == value:
        forward.append((c, r))
        c += dcol
        r += drow

    return backward[::-1] + [(col, row)] + forward


def winning_line_at(grid: np.ndarray, col: int, row: int,
                    connect_n: int = CONNECT_N) -> List[Tuple[int, int]]:
    """
    Find a winning run through the piece at (col, row).

    Only the four lines through the given cell are scanned, so the cost is
    bounded by the board dimensions rather than the board area.

    Returns:
        The first run of length >= connect_n found, or an empty list
    """
    for dcol, drow in DIRECTION_VECTORS.values():
        run = line_through(grid, col, row, dcol, drow)
        if len(run) >= connect_n:
            return run
    return []


def check_win_at_position(grid: np.ndarray, col: int, row: int,
                          connect_n: int = CONNECT_N) -> bool:
    """Check if the piece at (col, row) completes connect_n in a row."""
    return bool(winning_line_at(grid, col, row, connect_n))


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render a grid as ASCII art, top row first.

    Each cell is one character (R, Y or .) and columns are separated by
    '|'. A line of column numbers follows the grid.
    """
    height, width = grid.shape
    lines = []
    for row in range(height - 1, -1, -1):
        cells = []
        for col in range(width):
            color = Color.from_value(grid[row, col])
            cells.append(color.to_char() if color else ".")
        lines.append("|" + "|".join(cells) + "|")

    lines.append(" " + " ".join(str(col % 10) for col in range(width)))
    return "\n".join(lines)


def validate_integer(name: str, value) -> int:
    """Return ``value`` as an int, raising TypeError for non-integers (bools included)."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    return int(value)


def validate_dimension(name: str, value) -> int:
    """Return ``value`` if it is a positive int, otherwise raise."""
    value = validate_integer(f"Board {name}", value)
    if value <= 0:
        raise ValueError(f"Board {name} must be positive, got {value}")
    return value


if __name__ == "__main__":
    test_grid = np.zeros((STANDARD_ROWS, STANDARD_COLS), dtype=np.int8)
    for c in range(4):
        test_grid[0, c] = Color.RED.value
    test_grid[1, 0] = Color.YELLOW.value

    print(render_board_ascii(test_grid))
    print("\nWin at (3, 0):", check_win_at_position(test_grid, 3, 0))
    print("Winning line:", winning_line_at(test_grid, 3, 0))
