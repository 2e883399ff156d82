"""
rules.py - Game state machine and Gymnasium environment for Connect Four

This module provides:
1. Game, the authoritative turn-taking state machine with undo
2. ConnectFourEnv, a gymnasium-compatible wrapper for reinforcement learning
"""

from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from spooky_connect4.debug import debug
from spooky_connect4.game import encoding
from spooky_connect4.game.board import Board
from spooky_connect4.game.move import Move
from spooky_connect4.utils import (STANDARD_COLS, STANDARD_ROWS, Color,
                                   GameOutcome, check_win_at_position,
                                   winning_line_at)


class MoveRecord(NamedTuple):
    """Everything needed to reverse one placement."""
    col: int
    row: int
    color: Color


class Game:
    """
    Connect Four game state.

    Owns a Board, the color to move, a stack of applied moves and the
    outcome, which is set the moment a move wins or fills the board and
    cleared again when that move is undone. Red always moves first.
    """

    def __init__(self, width: int = STANDARD_COLS, height: int = STANDARD_ROWS):
        """
        Start a new game on an empty board.

        Raises:
            ValueError: If a dimension is zero or negative
            TypeError: If a dimension is not an integer
        """
        self._board = Board(width, height)
        self._turn = Color.RED
        self._history: List[MoveRecord] = []
        self._outcome: Optional[GameOutcome] = None
        debug.debug(f"Initializing {self.name()} game", "game")

    @classmethod
    def standard(cls) -> 'Game':
        """Start a game on the canonical 7x6 board."""
        return cls(STANDARD_COLS, STANDARD_ROWS)

    def reset(self) -> None:
        """Return to the initial state: empty board, Red to move."""
        debug.debug("Resetting game", "game")
        self._board.clear()
        self._turn = Color.RED
        self._history = []
        self._outcome = None

    def clone(self) -> 'Game':
        """Create a fully independent copy of this game."""
        new_game = Game.__new__(Game)
        new_game._board = self._board.copy()
        new_game._turn = self._turn
        new_game._history = list(self._history)
        new_game._outcome = self._outcome
        return new_game

    def __copy__(self) -> 'Game':
        return self.clone()

    def __deepcopy__(self, memo) -> 'Game':
        return self.clone()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def width(self) -> int:
        return self._board.width()

    def height(self) -> int:
        return self._board.height()

    def board(self) -> Board:
        """The live board. Callers must not mutate it."""
        return self._board

    def get_piece(self, col: int, row: int) -> Optional[Color]:
        return self._board.get_piece(col, row)

    def turn(self) -> Color:
        return self._turn

    def is_over(self) -> bool:
        return self._outcome is not None

    def outcome(self) -> Optional[GameOutcome]:
        return self._outcome

    def move_history(self) -> Tuple[Move, ...]:
        """Moves applied so far, oldest first."""
        return tuple(Move(record.col, record.row) for record in self._history)

    def legal_moves(self) -> List[Move]:
        """
        Get the legal moves in ascending column order.

        Returns:
            One Move per non-full column with row set to the column height,
            or an empty list once the game is over
        """
        if self._outcome is not None:
            return []

        board = self._board
        return [Move(col, board.column_height(col))
                for col in range(board.width())
                if not board.is_column_full(col)]

    def is_legal_move(self, move: Move) -> bool:
        if self._outcome is not None:
            return False
        return move.is_legal(self._board)

    def winning_line(self) -> List[Tuple[int, int]]:
        """
        Get the cells of the winning line if the game is won.

        Returns:
            (col, row) cells of the run through the last move, or an empty
            list if the game is ongoing or drawn
        """
        if self._outcome is None or self._outcome.is_draw():
            return []

        last = self._history[-1]
        return winning_line_at(self._board.grid_view(), last.col, last.row)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def make_move(self, move: Move) -> bool:
        """
        Apply a move for the player to move.

        Args:
            move: The placement to make; its row must match the column height

        Returns:
            True if the move was applied, False if it was illegal or the
            game is already over (state unchanged)
        """
        if self._outcome is not None:
            debug.debug(f"Rejected {move!r}: game is over ({self._outcome})", "game")
            return False

        if not move.is_legal(self._board):
            debug.debug(f"Rejected {move!r}: illegal for current position", "game")
            return False

        color = self._turn
        row = self._board.place(move.col(), color)
        self._history.append(MoveRecord(move.col(), row, color))
        debug.trace(f"{color} plays ({move.col()}, {row})", "game")

        # Only the lines through the new stone can have changed
        if check_win_at_position(self._board.grid_view(), move.col(), row):
            self._outcome = GameOutcome.win(color)
            debug.info(f"{color} wins after {len(self._history)} plies", "game")
        elif self._board.is_board_full():
            self._outcome = GameOutcome.DRAW
            debug.info("Game ends in a draw", "game")

        self._turn = color.other()
        return True

    def unmake_move(self) -> bool:
        """
        Undo the most recent move.

        Returns:
            True if a move was undone, False if there was nothing to undo
        """
        if not self._history:
            debug.debug("No moves to undo", "game")
            return False

        record = self._history.pop()
        self._board.remove_top(record.col)
        self._turn = record.color
        self._outcome = None
        debug.trace(f"Undid {record.color} at ({record.col}, {record.row})", "game")
        return True

    # ------------------------------------------------------------------
    # Action-index protocol for search and self-play drivers
    # ------------------------------------------------------------------

    def action_size(self) -> int:
        return self.width()

    def board_shape(self) -> Tuple[int, int]:
        return self.height(), self.width()

    def input_plane_count(self) -> int:
        return encoding.TOTAL_INPUT_PLANES

    def legal_action_indices(self) -> List[int]:
        return [encoding.encode_move(move) for move in self.legal_moves()]

    def decode_action(self, action: int) -> Optional[Move]:
        return encoding.decode_move(action, self)

    def apply_action(self, action: int) -> bool:
        """Play the move named by an action index; False if it is not playable."""
        move = encoding.decode_move(action, self)
        if move is None:
            return False
        return self.make_move(move)

    def reward_absolute(self) -> float:
        """+1.0 Red won, -1.0 Yellow won, 0.0 for a draw or an ongoing game."""
        if self._outcome is None:
            return 0.0
        return self._outcome.encode_winner_absolute()

    def reward_from_perspective(self, perspective: Color) -> float:
        if self._outcome is None:
            return 0.0
        return self._outcome.encode_winner_from_perspective(perspective)

    def encode_game_planes(self) -> Tuple[np.ndarray, int, int, int]:
        """See spooky_connect4.game.encoding.encode_game_planes."""
        return encoding.encode_game_planes(self)

    def name(self) -> str:
        return f"connect4_{self.width()}x{self.height()}"

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, Game):
            return NotImplemented
        return (self._turn == other._turn
                and self._outcome == other._outcome
                and self._board == other._board)

    def __hash__(self) -> int:
        return hash((self._board, self._turn))

    def __str__(self) -> str:
        outcome = self._outcome.name() if self._outcome else "in progress"
        return f"Game(turn: {self._turn}, outcome: {outcome})\n{self._board}"

    def __repr__(self) -> str:
        return (f"Game(width={self.width()}, height={self.height()}, "
                f"turn={self._turn}, over={self.is_over()})")


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    Both players act through ``step``; the environment has no built-in
    opponent. Observations are the stacked input planes of the position and
    rewards are given from the point of view of the player who just moved.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, width: int = STANDARD_COLS, height: int = STANDARD_ROWS,
                 render_mode: Optional[str] = None):
        """
        Initialize the environment.

        Args:
            width: Number of board columns
            height: Number of board rows
            render_mode: None, "ascii" or "human"
        """
        debug.debug("Initializing ConnectFourEnv", "env")
        if render_mode is not None and render_mode not in self.metadata['render_modes']:
            raise ValueError(f"Unsupported render mode: {render_mode}")

        self.game = Game(width, height)
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(width)
        self.observation_space = spaces.Box(
            low=0.0, high=1.0,
            shape=(encoding.TOTAL_INPUT_PLANES, height, width),
            dtype=np.float32,
        )

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.0
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None,
              options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        debug.debug("Resetting environment", "env")
        super().reset(seed=seed)
        self.game.reset()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Drop a piece for the player to move.

        Args:
            action: Column index

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        mover = self.game.turn()
        if not self.game.apply_action(action):
            debug.warning(f"Invalid action: {action}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        reward = self.reward_step
        terminated = self.game.is_over()
        if terminated:
            outcome = self.game.outcome()
            if outcome.is_draw():
                reward = self.reward_draw
            elif outcome.winner() is mover:
                reward = self.reward_win
            else:
                reward = self.reward_lose
            debug.info(f"Episode over: {outcome}", "env")

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[Union[str, Any]]:
        if self.render_mode == "ascii":
            return self.game.board().to_display_string()
        if self.render_mode == "human":
            print(self.game.board().to_display_string())
        return None

    def action_masks(self) -> np.ndarray:
        """Boolean mask over columns that can currently be played."""
        mask = np.zeros(self.game.width(), dtype=bool)
        mask[self.game.legal_action_indices()] = True
        return mask

    def _get_observation(self) -> np.ndarray:
        data, num_planes, height, width = self.game.encode_game_planes()
        return data.reshape(num_planes, height, width)

    def _get_info(self) -> Dict:
        outcome = self.game.outcome()
        return {
            'valid_moves': self.game.legal_action_indices(),
            'current_player': self.game.turn().value,
            'outcome': outcome.name() if outcome else None,
            'moves_made': len(self.game.move_history()),
            'winning_line': self.game.winning_line(),
        }

    def close(self):
        pass


if __name__ == "__main__":
    from spooky_connect4.debug import DebugLevel

    debug.configure(level=DebugLevel.INFO)

    game = Game.standard()
    for col in [0, 1, 0, 1, 0, 1, 0]:
        game.apply_action(col)
    print(game)
    print("Winning line:", game.winning_line())

    print("\nTesting ConnectFourEnv:")
    env = ConnectFourEnv(render_mode="human")
    observation, info = env.reset(seed=0)
    done = False
    while not done:
        action = int(env.np_random.choice(info['valid_moves']))
        observation, reward, terminated, truncated, info = env.step(action)
        done = terminated or truncated
    print(f"Outcome: {info['outcome']}")
