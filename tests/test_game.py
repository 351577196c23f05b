"""Tests for the Game state machine and play loop."""

import pytest

from smooth_snake.config import BoundaryMode, GameConfig
from smooth_snake.food import Food, FoodType
from smooth_snake.game import TRANSITIONS, Game, GameEvent, GameState
from smooth_snake.input import Key
from smooth_snake.reporting import LoggingScoreReporter
from smooth_snake.vector import Vector2D

FRAME = 1000 / 60


def _playing_game(**config_kwargs) -> Game:
    config_kwargs.setdefault("seed", 7)
    game = Game(GameConfig(**config_kwargs))
    game.start_new_game()
    game.food_manager.reset()
    return game


def _place_food(game: Game, food_type=FoodType.NORMAL, position=None) -> Food:
    food = Food(food_type)
    food.is_active = True
    food.position = position if position is not None else game.worm.head
    assert game.food_manager.add(food)
    return food


def _tap(game: Game, key: Key) -> None:
    game.input_handler.press(key)
    game.update(FRAME)
    game.input_handler.release(key)
    game.update(FRAME)


def _run_until_over(game: Game, max_frames: int = 2000) -> None:
    for _ in range(max_frames):
        game.update(FRAME)
        if game.state == GameState.GAME_OVER:
            return
    pytest.fail("game never ended")


class _ExplodingReporter:
    def __init__(self):
        self.calls = 0

    def submit(self, report):
        self.calls += 1
        raise RuntimeError("leaderboard down")


class TestInitialState:
    def test_starts_in_menu(self):
        game = Game(GameConfig(seed=1))
        assert game.state == GameState.MENU
        assert game.score == 0
        assert game.worm.head == Vector2D(400, 300)
        assert game.food_manager.active_count() == 1

    def test_menu_waits_for_direction(self):
        game = Game(GameConfig(seed=1))
        head = game.worm.head
        for _ in range(10):
            game.update(FRAME)
        assert game.state == GameState.MENU
        assert game.worm.head == head

    def test_direction_starts_play(self):
        game = Game(GameConfig(seed=1))
        game.input_handler.press(Key.ARROW_UP)
        game.update(FRAME)
        assert game.state == GameState.PLAYING


class TestTransitions:
    def test_table_has_reset_from_every_state(self):
        for state in GameState:
            assert TRANSITIONS[(state, GameEvent.RESET)] == GameState.PLAYING

    def test_invalid_event_ignored(self):
        game = Game(GameConfig(seed=1))
        game.resume()
        assert game.state == GameState.MENU
        game.pause()
        assert game.state == GameState.MENU

    def test_space_pauses_and_resumes(self):
        game = _playing_game()
        _tap(game, Key.SPACE)
        assert game.state == GameState.PAUSED
        _tap(game, Key.SPACE)
        assert game.state == GameState.PLAYING

    def test_paused_game_is_frozen(self):
        game = _playing_game()
        game.update(FRAME)
        game.pause()
        head = game.worm.head
        played = game.play_time
        for _ in range(30):
            game.update(FRAME)
        assert game.worm.head == head
        assert game.play_time == played

    def test_visibility_hidden_pauses(self):
        game = _playing_game()
        game.handle_visibility_hidden()
        assert game.state == GameState.PAUSED
        menu = Game(GameConfig(seed=1))
        menu.handle_visibility_hidden()
        assert menu.state == GameState.MENU

    def test_reset_key_while_paused(self):
        game = _playing_game()
        game.pause()
        _tap(game, Key.R)
        assert game.state == GameState.PLAYING

    def test_reset_from_game_over(self):
        game = _playing_game(width=200, height=200)
        _run_until_over(game)
        _tap(game, Key.R)
        assert game.state == GameState.PLAYING
        assert game.score == 0
        assert game.worm.is_alive
        assert game.worm.length == 5
        assert game.food_manager.active_count() == 1


class TestPlaying:
    def test_worm_moves_and_time_accumulates(self):
        game = _playing_game()
        for _ in range(66):
            game.update(FRAME)
        assert game.worm.head.x == pytest.approx(510)
        assert game.game_time_seconds == 1

    def test_eating_food(self):
        game = _playing_game()
        food = _place_food(game)
        game.update(16)
        assert game.score == 10
        assert game.food_count == 1
        assert game.worm.length == 7
        assert not food.is_active
        assert game.color_flash == 500

    def test_flash_decays(self):
        game = _playing_game()
        _place_food(game)
        game.update(16)
        game.update(100)
        assert game.color_flash == 400

    def test_speed_food_boosts(self):
        game = _playing_game()
        _place_food(game, FoodType.SPEED)
        game.update(16)
        assert game.score == 25
        assert game.worm.speed == 110

    def test_one_food_per_tick(self):
        game = _playing_game()
        _place_food(game)
        second = _place_food(game, FoodType.BONUS)
        game.update(16)
        assert game.food_count == 1
        assert second.is_active
        game.update(16)
        assert game.food_count == 2
        assert game.score == 60

    def test_steering(self):
        game = _playing_game()
        game.input_handler.press(Key.ARROW_DOWN)
        for _ in range(30):
            game.update(FRAME)
        assert game.worm.direction.equals(Vector2D.down())

    def test_debug_speed_keys(self):
        game = _playing_game()
        _tap(game, Key.PLUS)
        assert game.worm.speed == 120
        _tap(game, Key.MINUS)
        _tap(game, Key.MINUS)
        assert game.worm.speed == 80


class TestGameOver:
    def test_boundary_death(self):
        game = _playing_game(width=200, height=200)
        _run_until_over(game)
        assert not game.worm.is_alive
        assert game.worm.head.x + 8 > 200

    def test_wrap_mode_survives(self):
        game = _playing_game(width=200, height=200, boundary_mode=BoundaryMode.WRAP)
        for _ in range(180):
            game.update(FRAME)
            assert -8 <= game.worm.head.x <= 208
        assert game.state == GameState.PLAYING

    def test_self_collision_ends_game(self):
        game = _playing_game()
        # A body curled tightly enough that following leaves it in place.
        game.worm.segments = [
            Vector2D(400, 300),
            Vector2D(400, 314),
            Vector2D(412, 310),
            Vector2D(410, 300),
        ]
        game.update(FRAME)
        assert game.state == GameState.GAME_OVER

    def test_game_over_ignores_input(self):
        game = _playing_game(width=200, height=200)
        _run_until_over(game)
        head = game.worm.head
        game.input_handler.press(Key.ARROW_UP)
        for _ in range(10):
            game.update(FRAME)
        assert game.state == GameState.GAME_OVER
        assert game.worm.head == head


class TestScoreReporting:
    def test_reported_once(self):
        reporter = LoggingScoreReporter()
        game = Game(
            GameConfig(width=200, height=200, seed=3),
            score_reporter=reporter,
            player_id="alice",
        )
        game.start_new_game()
        game.food_manager.reset()
        _place_food(game, FoodType.BONUS)
        _run_until_over(game)
        for _ in range(20):
            game.update(FRAME)
        assert len(reporter.reports) == 1
        report = reporter.reports[0]
        assert report.player_id == "alice"
        assert report.score == 50
        assert report.food_count == 1
        assert report.game_time_seconds == game.game_time_seconds

    def test_each_game_reports(self):
        reporter = LoggingScoreReporter()
        game = Game(
            GameConfig(width=200, height=200, seed=3),
            score_reporter=reporter,
            player_id="alice",
        )
        for _ in range(2):
            game.reset_game()
            game.food_manager.reset()
            _run_until_over(game)
        assert len(reporter.reports) == 2

    def test_no_player_no_report(self):
        reporter = LoggingScoreReporter()
        game = Game(GameConfig(width=200, height=200, seed=3), score_reporter=reporter)
        game.start_new_game()
        game.food_manager.reset()
        _run_until_over(game)
        assert reporter.reports == []

    def test_reporter_failure_is_swallowed(self):
        reporter = _ExplodingReporter()
        game = Game(
            GameConfig(width=200, height=200, seed=3),
            score_reporter=reporter,
            player_id="bob",
        )
        game.start_new_game()
        game.food_manager.reset()
        _run_until_over(game)
        game.update(FRAME)
        assert reporter.calls == 1
        assert game.state == GameState.GAME_OVER


class TestSnapshot:
    def test_snapshot_fields(self):
        game = _playing_game()
        _place_food(game, position=Vector2D(100, 100))
        snap = game.snapshot()
        assert snap["state"] == "playing"
        assert snap["length"] == 5
        assert snap["boundary_mode"] == "death"
        assert snap["bounds"] == {"x": 0.0, "y": 0.0, "width": 800.0, "height": 600.0}
        assert len(snap["foods"]) == 1
        assert snap["worm"]["alive"] is True
        assert snap["worm_colors"]["head"] == "#00ff88"
