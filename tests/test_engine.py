"""Tests for the transition engine and game state lifecycle."""

import itertools

import pytest

from falling_blocks.game import (
    PIECES,
    Board,
    Engine,
    GameConfig,
    GameState,
    Move,
    Position,
    RandomPieceSource,
    candidate_state,
    rotate_right,
)

GREY = "#808080"


def sequence(*kinds):
    it = itertools.cycle(kinds)
    return lambda: PIECES[next(it)]


def make_engine(*kinds, **config):
    return Engine(GameConfig(**config), piece_source=sequence(*kinds))


def test_new_game_starts_empty_at_spawn():
    engine = make_engine("T")
    state = engine.new_game()
    assert state.board == Board.empty(20, 10)
    assert state.piece == PIECES["T"]
    assert state.position == Position(0, 3)
    assert state.is_done is False


def test_candidate_shifts_and_rotations():
    state = make_engine("L").new_game()
    assert candidate_state(state, Move.LEFT).position == Position(0, 2)
    assert candidate_state(state, Move.RIGHT).position == Position(0, 4)
    assert candidate_state(state, Move.DOWN).position == Position(1, 3)
    rotated = candidate_state(state, Move.ROTATE_RIGHT)
    assert rotated.piece == rotate_right(state.piece)
    assert rotated.position == state.position


def test_accepted_move_returns_new_state_and_keeps_old():
    engine = make_engine("T")
    state = engine.new_game()
    moved = engine.next_state(state, Move.RIGHT)
    assert moved.position == Position(0, 4)
    assert state.position == Position(0, 3)
    assert moved.board == state.board


def test_left_against_wall_returns_identical_state():
    engine = make_engine("O")
    state = GameState(Board.empty(20, 10), PIECES["O"], Position(5, 0))
    assert engine.next_state(state, Move.LEFT) is state


def test_blocked_rotation_is_rejected():
    engine = make_engine("I")
    vertical = rotate_right(PIECES["I"])
    # The vertical I sits in column 0; turning it back would push it past the wall
    state = GameState(Board.empty(20, 10), vertical, Position(5, -2))
    assert engine.next_state(state, Move.ROTATE_LEFT) is state


def test_i_piece_falls_to_floor_then_lands():
    engine = make_engine("I", "O")
    state = engine.new_game()
    for _ in range(18):
        nxt = engine.next_state(state, Move.DOWN)
        assert nxt.board is state.board
        state = nxt
    assert state.position == Position(18, 3)

    landed = engine.next_state(state, Move.DOWN)
    assert landed.is_done is False
    assert landed.piece == PIECES["O"]
    assert landed.position == Position(0, 3)
    assert [landed.board.cell(19, c) for c in range(10)] == [None] * 3 + [PIECES["I"].color] * 4 + [None] * 3
    assert landed.board.count_filled() == 4


def test_completed_row_is_cleared_and_rows_shift_down():
    engine = make_engine("O", "T")
    rows = [[None] * 10 for _ in range(20)]
    rows[19] = [GREY] * 3 + [None, None] + [GREY] * 5
    rows[17][0] = GREY
    state = GameState(Board.from_rows(rows), PIECES["O"], Position(0, 3))

    for _ in range(18):
        state = engine.next_state(state, Move.DOWN)
    landed = engine.next_state(state, Move.DOWN)

    assert landed.is_done is False
    assert landed.board.height == 20
    assert all(landed.board.cell(0, c) is None for c in range(10))
    assert landed.board.cell(18, 0) == GREY
    assert landed.board.cell(19, 3) == PIECES["O"].color
    assert landed.board.cell(19, 4) == PIECES["O"].color
    assert landed.board.count_filled() == 3


def test_spawn_collision_ends_game():
    engine = make_engine("O")
    rows = [[None] * 10 for _ in range(20)]
    rows[1][4] = GREY
    state = GameState(Board.from_rows(rows), PIECES["O"], Position(18, 0))

    over = engine.next_state(state, Move.DOWN)
    assert over.is_done is True
    assert over.board.cell(18, 0) == PIECES["O"].color

    for move in Move:
        assert engine.next_state(over, move) is over


def test_drop_lands_piece_at_bottom():
    engine = make_engine("O", "T")
    state = engine.new_game()
    dropped = engine.next_state(state, Move.DROP)
    assert dropped.piece == PIECES["T"]
    assert dropped.position == Position(0, 3)
    for r in (18, 19):
        for c in (3, 4):
            assert dropped.board.cell(r, c) == PIECES["O"].color


def test_drop_stops_on_stack():
    engine = make_engine("O")
    rows = [[None] * 10 for _ in range(20)]
    rows[10][3] = GREY
    state = GameState(Board.from_rows(rows), PIECES["O"], Position(0, 3))
    dropped = engine.next_state(state, Move.DROP)
    assert dropped.board.cell(9, 3) == PIECES["O"].color
    assert dropped.board.cell(8, 4) == PIECES["O"].color


def test_states_never_share_board_storage():
    engine = make_engine("O", "I")
    state = engine.new_game()
    landed = engine.next_state(state, Move.DROP)
    assert not (landed.board.cells is state.board.cells)
    assert state.board.count_filled() == 0


def test_custom_board_size_and_spawn():
    engine = make_engine("O", width=4, height=6, spawn_col=1)
    state = engine.new_game()
    assert state.board.cells.shape == (6, 4)
    assert state.position == Position(0, 1)


def test_random_piece_source_is_reproducible():
    a = RandomPieceSource(seed=7)
    b = RandomPieceSource(seed=7)
    assert [a().kind for _ in range(20)] == [b().kind for _ in range(20)]


def test_random_piece_source_uses_given_catalog():
    source = RandomPieceSource({"O": PIECES["O"]}, seed=1)
    assert {source().kind for _ in range(10)} == {"O"}


def test_composite_overlays_falling_piece():
    state = make_engine("O").new_game()
    composite = state.composite()
    assert composite.cell(0, 3) == PIECES["O"].color
    assert composite.count_filled() == 4
    assert state.board.count_filled() == 0


@pytest.mark.parametrize("move", [Move.LEFT, Move.RIGHT, Move.ROTATE_LEFT, Move.ROTATE_RIGHT])
def test_non_down_moves_never_change_board(move):
    engine = make_engine("S")
    state = engine.new_game()
    for _ in range(12):
        state = engine.next_state(state, move)
    assert state.board == Board.empty(20, 10)


def test_equal_states_hash_alike():
    engine = make_engine("T")
    a = engine.new_game()
    b = engine.new_game()
    assert a is not b
    assert hash(a) == hash(b)
    assert len({a, b, engine.next_state(a, Move.RIGHT)}) == 2
