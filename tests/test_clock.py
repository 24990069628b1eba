from tetris_engine.game import GameConfig, GameState, TetrisGame, TickDriver


class _FakeClock:
    def __init__(self) -> None:
        self.value = 0.0

    def advance(self, amount: float) -> None:
        self.value += amount

    def __call__(self) -> float:
        return self.value


def _driver():
    clock = _FakeClock()
    game = TetrisGame(GameConfig(random_seed=0))
    driver = TickDriver(game, clock)
    return clock, game, driver


def test_pump_delivers_elapsed_time():
    clock, game, driver = _driver()
    clock.advance(5000)
    driver.start()
    piece = game.session.active_piece

    clock.advance(600)
    assert not driver.pump()
    clock.advance(401)
    assert driver.pump()
    assert piece.y == 1


def test_no_catch_up_after_pause():
    clock, game, driver = _driver()
    driver.start()
    piece = game.session.active_piece

    clock.advance(900)
    driver.pump()
    driver.pause()
    clock.advance(60_000)
    assert not driver.pump()

    driver.resume()
    assert game.state is GameState.RUNNING
    clock.advance(50)
    assert not driver.pump()
    assert piece.y == 0
    clock.advance(60)
    assert driver.pump()
    assert piece.y == 1


def test_toggle_pause_rebases_on_resume():
    clock, game, driver = _driver()
    driver.start()
    piece = game.session.active_piece
    driver.toggle_pause()
    clock.advance(30_000)
    driver.toggle_pause()
    clock.advance(10)
    assert not driver.pump()
    assert piece.y == 0


def test_restart_uses_fresh_baseline():
    clock, game, driver = _driver()
    driver.start()
    clock.advance(10_000)
    driver.restart()
    piece = game.session.active_piece
    clock.advance(20)
    assert not driver.pump()
    assert piece.y == 0


def test_idle_game_is_never_ticked():
    clock, game, driver = _driver()
    clock.advance(10_000)
    assert not driver.pump()
    assert game.state is GameState.IDLE
