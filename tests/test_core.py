import random

import numpy as np
import pytest

from tetris_engine.game import (
    Action,
    GameConfig,
    GameState,
    Piece,
    TetrisGame,
    TetrominoType,
    rotate_matrix,
)


def _started(seed: int = 0) -> TetrisGame:
    game = TetrisGame(GameConfig(random_seed=seed))
    game.start()
    return game


def _set_active(game: TetrisGame, kind: TetrominoType) -> Piece:
    piece = Piece.spawn(kind, game.config.width)
    game.session.active_piece = piece
    return piece


def _vertical_i(game: TetrisGame, x: int) -> Piece:
    piece = _set_active(game, TetrominoType.I)
    piece.matrix = rotate_matrix(piece.matrix, 1)
    piece.x = x
    return piece


def test_invalid_config_refuses_to_initialize():
    with pytest.raises(ValueError):
        GameConfig(width=0)
    with pytest.raises(ValueError):
        GameConfig(height=-3)
    with pytest.raises(ValueError):
        GameConfig(width=10.5)


def test_idle_until_started():
    game = TetrisGame(GameConfig(random_seed=0))
    assert game.state is GameState.IDLE
    assert not game.tick(5000)
    assert not game.soft_drop()
    assert not game.apply_move(1)
    assert game.hard_drop() == 0
    snap = game.snapshot()
    assert snap.state is GameState.IDLE
    assert snap.active_piece is None


def test_start_spawns_active_and_next():
    game = _started()
    s = game.session
    assert game.state is GameState.RUNNING
    assert s.active_piece is not None and s.next_piece is not None
    assert s.active_piece.y == 0
    assert s.score == 0 and s.level == 1 and s.drop_interval_ms == 1000


def test_start_while_running_keeps_session():
    game = _started()
    session = game.session
    game.start()
    assert game.session is session


def test_o_piece_falls_to_floor_and_locks():
    game = _started()
    piece = _set_active(game, TetrominoType.O)
    for _ in range(18):
        assert game.soft_drop()
    assert piece.y == 18
    assert not game.soft_drop()

    board = game.session.board
    assert board.filled_cells() == 4
    assert np.count_nonzero(board.grid[18:20, 4:6]) == 4
    assert game.session.score == 0
    assert game.session.lines_cleared_total == 0
    assert game.session.active_piece is not piece
    assert not game.session.is_over


def test_move_is_rejected_at_wall():
    game = _started()
    piece = _set_active(game, TetrominoType.O)
    for _ in range(4):
        assert game.apply_move(-1)
    assert piece.x == 0
    assert not game.apply_move(-1)
    assert piece.x == 0


def test_zero_move_reports_no_change():
    game = _started()
    piece = _set_active(game, TetrominoType.O)
    assert not game.apply_move(0)
    assert piece.x == 4


def test_apply_rotate_delegates_with_kicks():
    game = _started()
    piece = _set_active(game, TetrominoType.T)
    piece.y = 5
    assert game.apply_rotate(1)
    assert np.array_equal(piece.matrix, rotate_matrix(Piece.spawn(TetrominoType.T, 10).matrix, 1))


def test_hard_drop_clears_single_line():
    game = _started()
    board = game.session.board
    board.grid[19, :9] = int(TetrominoType.L)
    board.grid[18, 0] = int(TetrominoType.J)
    _vertical_i(game, 7)

    assert game.hard_drop() == 16
    assert game.session.lines_cleared_total == 1
    assert game.session.score == 100
    assert np.array_equal(board.grid[0], np.zeros(10))
    assert board.cell(0, 19) == int(TetrominoType.J)
    assert board.filled_cells() == 4


def _fill_four_rows_but_column_nine(game: TetrisGame) -> None:
    game.session.board.grid[16:20, :9] = int(TetrominoType.S)


def test_four_lines_at_level_one():
    game = _started()
    _fill_four_rows_but_column_nine(game)
    _vertical_i(game, 7)
    game.hard_drop()
    assert game.session.score == 800
    assert game.session.lines_cleared_total == 4
    assert game.session.board.filled_cells() == 0


def test_four_lines_at_level_three():
    game = _started()
    game.session.level = 3
    game.session.lines_cleared_total = 20
    game.session.drop_interval_ms = 800
    _fill_four_rows_but_column_nine(game)
    _vertical_i(game, 7)
    game.hard_drop()
    assert game.session.score == 2400
    assert game.session.level == 3


def test_level_up_speeds_gravity():
    game = _started()
    game.session.lines_cleared_total = 9
    game.session.board.grid[19, :9] = 1
    _vertical_i(game, 7)
    game.hard_drop()
    assert game.session.level == 2
    assert game.session.drop_interval_ms == 900


def test_spawn_into_blocked_top_rows_ends_game_without_locking():
    game = _started()
    board = game.session.board
    board.grid[0:2, 3:7] = int(TetrominoType.Z)
    filled = board.filled_cells()

    game.spawn()

    assert game.session.is_over
    assert game.state is GameState.GAME_OVER
    assert board.filled_cells() == filled
    assert game.session.next_piece is not None
    assert not game.soft_drop()
    assert not game.apply_rotate(1)
    assert not game.tick(10_000)
    assert game.snapshot().active_piece is None


def test_game_over_emits_positive_final_score():
    game = _started()
    received = []
    game.add_game_over_listener(received.append)
    game.session.score = 1300
    game.session.board.grid[0:2, :] = 1
    game.spawn()
    assert received == [1300]


def test_game_over_with_zero_score_emits_nothing():
    game = _started()
    received = []
    game.add_game_over_listener(received.append)
    game.session.board.grid[0:2, :] = 1
    game.spawn()
    assert game.session.is_over
    assert received == []


def test_tick_drops_only_after_interval_exceeded():
    game = _started()
    piece = game.session.active_piece
    assert not game.tick(600)
    assert not game.tick(400)
    assert piece.y == 0
    assert game.tick(1)
    assert piece.y == 1
    assert game.session.drop_accumulator_ms == 0
    assert not game.tick(999)


def test_manual_soft_drop_resets_gravity_timer():
    game = _started()
    game.tick(900)
    game.soft_drop()
    assert not game.tick(900)


def test_pause_withholds_ticks_and_intents():
    game = _started()
    piece = game.session.active_piece
    game.pause()
    assert game.state is GameState.PAUSED
    assert not game.tick(50_000)
    assert not game.apply_move(1)
    assert not game.soft_drop()
    assert game.hard_drop() == 0
    assert (piece.x, piece.y) == (Piece.spawn(piece.kind, 10).x, 0)

    game.resume()
    assert game.state is GameState.RUNNING
    assert not game.tick(10)
    assert piece.y == 0


def test_toggle_pause():
    game = _started()
    game.toggle_pause()
    assert game.state is GameState.PAUSED
    game.toggle_pause()
    assert game.state is GameState.RUNNING


def test_restart_invalidates_old_tick_callback():
    game = _started()
    stale = game.tick_callback()
    game.restart()
    piece = game.session.active_piece
    assert not stale(50_000)
    assert piece.y == 0

    fresh = game.tick_callback()
    assert fresh(1001)
    assert piece.y == 1


def test_restart_after_game_over():
    game = _started()
    game.session.board.grid[0:2, :] = 1
    game.spawn()
    assert game.state is GameState.GAME_OVER
    game.start()
    assert game.state is GameState.RUNNING
    assert game.session.board.filled_cells() == 0


def test_snapshot_is_read_only_copy():
    game = _started()
    snap = game.snapshot()
    assert snap.board.shape == (20, 10)
    with pytest.raises(ValueError):
        snap.board[0, 0] = 1
    snap.active_piece.x += 3
    assert game.session.active_piece.x != snap.active_piece.x
    assert snap.ghost_piece.y == 18
    assert snap.next_piece.kind == game.session.next_piece.kind


def test_get_state_overlays_falling_piece_as_negative():
    game = _started()
    state = game.get_state()
    kind = int(game.session.active_piece.kind)
    assert np.count_nonzero(state == -kind) == 4
    assert game.session.board.filled_cells() == 0


def test_step_reports_score_delta():
    game = _started()
    _fill_four_rows_but_column_nine(game)
    _vertical_i(game, 7)
    state, reward, done, info = game.step(Action.HARD_DROP)
    assert reward == 800
    assert not done
    assert info["lines_cleared_total"] == 4
    assert state.shape == (20, 10)


def test_score_level_and_speed_are_monotonic():
    game = _started(seed=3)
    chooser = random.Random(3)
    last = (0, 1, 1000)
    for _ in range(3000):
        if game.session.is_over:
            game.restart()
            last = (0, 1, 1000)
        game.step(chooser.choice(list(Action)))
        game.tick(chooser.choice([0, 50, 400]))
        s = game.session
        current = (s.score, s.level, s.drop_interval_ms)
        assert current[0] >= last[0]
        assert current[1] >= last[1]
        assert current[2] <= last[2]
        assert current[2] >= game.rules.min_drop_interval_ms
        last = current
