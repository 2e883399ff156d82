import copy
import random
from concurrent.futures import ThreadPoolExecutor
from typing import List

import pytest

import spooky_connect4
from spooky_connect4 import RED, YELLOW, Game, GameOutcome, Move

# Fills a 7x6 board without ever completing four in a row
DRAW_PATTERN = [
    0, 1, 2, 0, 1, 2, 0, 1, 2, 0, 1, 2, 0, 1, 2, 0, 1, 2,
    3, 4, 5, 3, 4, 5, 3, 4, 5, 3, 4, 5, 3, 4, 5, 3, 4, 5,
    6, 6, 6, 6, 6, 6,
]


def play_columns(game: Game, columns: List[int]) -> None:
    for col in columns:
        assert game.apply_action(col), f"column {col} was not playable"


def random_playout(game: Game, rng: random.Random, max_moves: int = 42) -> int:
    played = 0
    while not game.is_over() and played < max_moves:
        assert game.make_move(rng.choice(game.legal_moves()))
        played += 1
    return played


def test_game_initial_state() -> None:
    game = Game(width=7, height=6)
    assert game.turn() == RED
    assert not game.is_over()
    assert game.outcome() is None
    assert game.move_history() == ()


def test_game_legal_moves_initial() -> None:
    game = Game(width=7, height=6)
    moves = game.legal_moves()
    assert moves == [Move(col, 0) for col in range(7)]


def test_game_make_move() -> None:
    game = Game(width=7, height=6)
    move = game.legal_moves()[0]
    assert game.make_move(move)
    assert game.turn() == YELLOW
    assert game.get_piece(0, 0) == RED
    assert game.move_history() == (Move(0, 0),)


def test_game_unmake_1_move() -> None:
    game = Game(width=7, height=6)
    game.make_move(game.legal_moves()[0])
    assert game.turn() == YELLOW

    assert game.unmake_move()
    assert game.turn() == RED
    assert game.board().column_height(0) == 0
    assert game.move_history() == ()


def test_game_unmake_when_empty() -> None:
    game = Game(width=7, height=6)
    assert not game.unmake_move()
    assert game == Game(width=7, height=6)


def test_game_unmake_10_moves() -> None:
    game = Game(width=7, height=6)
    moves = []
    for _ in range(10):
        move = game.legal_moves()[0]
        moves.append(move)
        game.make_move(move)

    for _ in range(len(moves)):
        assert game.unmake_move()

    assert game.turn() == RED
    assert not game.is_over()
    assert len(game.legal_moves()) == 7


@pytest.mark.parametrize("seed", range(10))
def test_undo_round_trip_restores_initial_state(seed: int) -> None:
    rng = random.Random(seed)
    game = Game(width=7, height=6)
    initial = game.clone()

    played = random_playout(game, rng)
    for _ in range(played):
        assert game.unmake_move()

    assert not game.unmake_move()
    assert game == initial
    assert game.outcome() is None
    assert game.board().stone_count() == 0


def test_turn_alternates_and_reverses() -> None:
    game = Game(width=7, height=6)
    rng = random.Random(7)
    expected = [RED]
    for _ in range(12):
        if game.is_over():
            break
        game.make_move(rng.choice(game.legal_moves()))
        expected.append(expected[-1].other())
        assert game.turn() == expected[-1]
        assert len(game.move_history()) == game.board().stone_count()

    while game.unmake_move():
        expected.pop()
        assert game.turn() == expected[-1]


def test_game_make_invalid_move_invalid_column() -> None:
    game = Game(width=7, height=6)
    assert not game.make_move(Move(10, 0))
    assert game.turn() == RED
    assert game.move_history() == ()


def test_game_make_move_wrong_row_rejected() -> None:
    game = Game(width=7, height=6)
    assert not game.make_move(Move(3, 2))
    game.make_move(Move(3, 0))
    assert not game.make_move(Move(3, 0))
    assert game.turn() == YELLOW
    assert game.board().column_height(3) == 1


def test_game_make_invalid_move_full_column() -> None:
    game = Game(width=7, height=6)
    for i in range(6):
        assert game.make_move(Move(0, i))

    assert game.board().is_column_full(0)
    assert not game.is_legal_move(Move(0, 0))
    assert not game.is_legal_move(Move(0, 6))
    assert not game.make_move(Move(0, 6))


def test_legal_moves_when_column_full() -> None:
    game = Game(width=7, height=6)
    for i in range(6):
        game.make_move(Move(0, i))

    legal_moves = game.legal_moves()
    assert len(legal_moves) == 6
    assert all(m.col() != 0 for m in legal_moves)
    assert [m.col() for m in legal_moves] == sorted(m.col() for m in legal_moves)


def test_game_is_legal_move() -> None:
    game = Game(width=7, height=6)
    legal_move = Move(0, 0)
    assert game.is_legal_move(legal_move)

    game.make_move(legal_move)
    assert game.is_legal_move(Move(0, 1))
    assert not game.is_legal_move(legal_move)


def test_game_vertical_win() -> None:
    game = Game(width=7, height=6)
    for i in range(3):
        game.make_move(Move(0, i))
        game.make_move(Move(1, i))
        assert not game.is_over()

    game.make_move(Move(0, 3))

    assert game.is_over()
    outcome = game.outcome()
    assert outcome is not None
    assert outcome.winner() == RED
    assert not outcome.is_draw()
    assert game.winning_line() == [(0, 0), (0, 1), (0, 2), (0, 3)]


def test_game_horizontal_win() -> None:
    game = Game(width=7, height=6)
    for col in range(3):
        game.make_move(Move(col, 0))
        game.make_move(Move(col, 1))
    assert not game.is_over()

    game.make_move(Move(3, 0))

    assert game.is_over()
    assert game.outcome().winner() == RED


def test_win_completed_in_the_middle_of_a_run() -> None:
    game = Game(width=7, height=6)
    play_columns(game, [0, 0, 1, 1, 3, 3])
    assert not game.is_over()

    play_columns(game, [2])
    assert game.outcome() == GameOutcome.RED_WIN
    assert game.winning_line() == [(0, 0), (1, 0), (2, 0), (3, 0)]


ASCENDING = [0, 1, 1, 2, 2, 3, 2, 3, 3, 6, 3]


@pytest.mark.parametrize("columns,line", [
    (ASCENDING, [(0, 0), (1, 1), (2, 2), (3, 3)]),
    ([6 - c for c in ASCENDING], [(3, 3), (4, 2), (5, 1), (6, 0)]),
])
def test_diagonal_wins(columns: List[int], line) -> None:
    game = Game(width=7, height=6)
    play_columns(game, columns[:-1])
    assert not game.is_over()

    play_columns(game, columns[-1:])
    assert game.outcome() == GameOutcome.RED_WIN
    assert game.winning_line() == line


def test_yellow_can_win() -> None:
    game = Game(width=7, height=6)
    play_columns(game, [0, 1, 0, 1, 0, 1, 2, 1])
    assert game.outcome().winner() == YELLOW
    assert game.reward_from_perspective(YELLOW) == 1.0
    assert game.reward_from_perspective(RED) == -1.0
    assert game.reward_absolute() == -1.0


def test_game_draw() -> None:
    game = Game(width=7, height=6)
    for col in DRAW_PATTERN:
        assert not game.is_over(), "game ended before the board was filled"
        game.apply_action(col)

    assert game.board().is_board_full()
    assert game.is_over()
    assert game.outcome().is_draw()
    assert game.outcome().winner() is None
    assert game.legal_moves() == []
    assert game.winning_line() == []
    assert game.reward_absolute() == 0.0


def test_undo_after_draw_returns_to_play() -> None:
    game = Game(width=7, height=6)
    play_columns(game, DRAW_PATTERN)

    assert game.unmake_move()
    assert game.outcome() is None
    assert game.legal_moves() == [Move(6, 5)]
    assert game.make_move(Move(6, 5))
    assert game.outcome().is_draw()


def test_moves_rejected_after_win() -> None:
    game = Game(width=7, height=6)
    play_columns(game, [0, 1, 0, 1, 0, 1, 0])
    before = game.clone()

    assert game.legal_moves() == []
    assert not game.is_legal_move(Move(2, 0))
    assert not game.make_move(Move(2, 0))
    assert not game.apply_action(2)
    assert game == before
    assert game.move_history() == before.move_history()


def test_undo_clears_win() -> None:
    game = Game(width=7, height=6)
    play_columns(game, [0, 1, 0, 1, 0, 1, 0])
    assert game.is_over()
    assert game.turn() == YELLOW

    assert game.unmake_move()
    assert not game.is_over()
    assert game.outcome() is None
    assert game.turn() == RED
    assert game.winning_line() == []


def test_full_random_game() -> None:
    game = Game(width=7, height=6)
    random_playout(game, random.Random(2024))
    assert game.is_over()
    assert game.outcome() is not None


def test_game_clone() -> None:
    game = Game(width=7, height=6)
    game.make_move(game.legal_moves()[0])

    cloned = game.clone()
    assert cloned.turn() == game.turn()
    assert cloned.is_over() == game.is_over()
    assert cloned == game


def test_clone_is_independent() -> None:
    game = Game(width=7, height=6)
    play_columns(game, [3, 3, 4])
    cloned = game.clone()

    play_columns(cloned, [4, 5])
    assert len(game.move_history()) == 3
    assert game.board().column_height(4) == 1
    assert game.turn() == YELLOW

    game.unmake_move()
    assert len(cloned.move_history()) == 5
    assert cloned.board().column_height(4) == 2

    assert copy.deepcopy(cloned) == cloned
    assert copy.deepcopy(cloned) is not cloned


def test_clones_played_on_separate_threads() -> None:
    game = Game(width=7, height=6)
    play_columns(game, [3, 2, 4])
    snapshot = game.clone()

    def playout(seed: int) -> int:
        return random_playout(game.clone(), random.Random(seed))

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(playout, range(16)))

    assert all(n > 0 for n in results)
    assert game == snapshot
    assert game.move_history() == snapshot.move_history()


def test_reset() -> None:
    game = Game(width=5, height=4)
    play_columns(game, [0, 1, 2])
    game.reset()
    assert game == Game(width=5, height=4)
    assert game.move_history() == ()


@pytest.mark.parametrize("width,height", [(0, 6), (7, 0), (-7, 6)])
def test_game_rejects_non_positive_dimensions(width: int, height: int) -> None:
    with pytest.raises(ValueError):
        Game(width=width, height=height)


def test_tiny_board_draw() -> None:
    game = Game(width=1, height=1)
    assert game.make_move(Move(0, 0))
    assert game.outcome().is_draw()


def test_single_row_board_draw_and_win() -> None:
    game = Game(width=4, height=1)
    play_columns(game, [0, 1, 2, 3])
    assert game.outcome() == GameOutcome.DRAW

    game = Game(width=7, height=1)
    for col in [0, 4, 1, 5, 2, 6]:
        game.apply_action(col)
    assert not game.is_over()


def test_wide_short_board_horizontal_win() -> None:
    game = Game(width=9, height=2)
    play_columns(game, [4, 4, 5, 5, 6, 6])
    play_columns(game, [7])
    assert game.outcome().winner() == RED


def test_action_protocol() -> None:
    game = Game(width=7, height=6)
    assert game.action_size() == 7
    assert game.board_shape() == (6, 7)
    assert game.input_plane_count() == spooky_connect4.TOTAL_INPUT_PLANES
    assert game.name() == "connect4_7x6"
    assert game.legal_action_indices() == list(range(7))

    for _ in range(6):
        assert game.apply_action(2)
    assert not game.apply_action(2)
    assert not game.apply_action(7)
    assert 2 not in game.legal_action_indices()
    assert game.decode_action(2) is None
    assert game.decode_action(3) == Move(3, 0)


def test_state_equality_and_hash() -> None:
    a = Game(width=7, height=6)
    b = Game(width=7, height=6)
    play_columns(a, [0, 1, 2])
    play_columns(b, [2, 1, 0])

    assert a == b
    assert hash(a) == hash(b)

    b.unmake_move()
    assert a != b


def test_board_representation() -> None:
    game = Game(width=7, height=6)
    game.make_move(Move(0, 0))
    game.make_move(Move(1, 0))

    board_str = str(game.board())
    assert "|" in board_str
    assert "R" in board_str
    assert "Y" in board_str
    assert "turn: Red" in str(game)
    assert repr(game) == "Game(width=7, height=6, turn=Red, over=False)"
