"""Single-player game: state machine wiring worm, food, input and collisions."""

from __future__ import annotations

import enum
import logging

import numpy as np

from smooth_snake.collision import CollisionDetector
from smooth_snake.config import BoundaryMode, FoodType, GameConfig, WORM_COLORS
from smooth_snake.food import Food, FoodManager
from smooth_snake.input import InputHandler
from smooth_snake.reporting import ScoreReport, ScoreReporter
from smooth_snake.vector import Rectangle
from smooth_snake.worm import Worm

logger = logging.getLogger(__name__)


class GameState(enum.Enum):
    """Phases of a game."""

    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class GameEvent(enum.Enum):
    """Inputs to the game state machine."""

    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    DIE = "die"
    RESET = "reset"


TRANSITIONS: dict[tuple[GameState, GameEvent], GameState] = {
    (GameState.MENU, GameEvent.START): GameState.PLAYING,
    (GameState.MENU, GameEvent.RESET): GameState.PLAYING,
    (GameState.PLAYING, GameEvent.PAUSE): GameState.PAUSED,
    (GameState.PLAYING, GameEvent.DIE): GameState.GAME_OVER,
    (GameState.PLAYING, GameEvent.RESET): GameState.PLAYING,
    (GameState.PAUSED, GameEvent.RESUME): GameState.PLAYING,
    (GameState.PAUSED, GameEvent.RESET): GameState.PLAYING,
    (GameState.GAME_OVER, GameEvent.RESET): GameState.PLAYING,
}


class Game:
    """Owns one worm, its food and the game phase.

    Call :meth:`update` once per frame with the elapsed milliseconds, and
    read :meth:`snapshot` for rendering. Input arrives through the
    :class:`InputHandler` passed in (or created here); a finished game is
    reported once to *score_reporter* when a *player_id* is known.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        input_handler: InputHandler | None = None,
        score_reporter: ScoreReporter | None = None,
        player_id: str | None = None,
    ) -> None:
        cfg = config or GameConfig()
        self.config = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.bounds = Rectangle(0.0, 0.0, cfg.width, cfg.height)

        self.worm = Worm.from_config(cfg, self.bounds.center)
        self.food_manager = FoodManager.from_config(cfg, self.bounds, rng=self.rng)
        self.input_handler = input_handler or InputHandler()
        self.collision_detector = CollisionDetector(cfg.collision_tolerance)
        self.score_reporter = score_reporter
        self.player_id = player_id

        self.state = GameState.MENU
        self.score = 0
        self.food_count = 0
        self.play_time = 0.0
        self.color_flash = 0.0
        self._score_reported = False
        self._reset_world()

    # --- state machine ---

    def _transition(self, event: GameEvent) -> bool:
        target = TRANSITIONS.get((self.state, event))
        if target is None:
            logger.debug("Ignoring %s while %s.", event.value, self.state.value)
            return False
        logger.debug("%s -> %s on %s.", self.state.value, target.value, event.value)
        self.state = target
        return True

    def update(self, delta_time: float) -> None:
        """Advance one frame of *delta_time* milliseconds."""
        if self.color_flash > 0:
            self.color_flash = max(0.0, self.color_flash - delta_time)

        if self.state == GameState.MENU:
            self._update_menu()
        elif self.state == GameState.PLAYING:
            self._update_playing(delta_time)
        elif self.state == GameState.PAUSED:
            self._update_paused()
        else:
            self._update_game_over()

        # Must run last so next frame's edge detection sees this frame.
        self.input_handler.update()

    def _update_menu(self) -> None:
        if self.input_handler.direction_vector().magnitude() > 0:
            self.start_new_game()

    def _update_paused(self) -> None:
        if self.input_handler.was_space_just_pressed():
            self._transition(GameEvent.RESUME)
        if self.input_handler.was_reset_just_pressed():
            self.reset_game()

    def _update_game_over(self) -> None:
        if self.input_handler.was_reset_just_pressed():
            self.reset_game()

    def _update_playing(self, delta_time: float) -> None:
        if self._handle_actions():
            return

        self.play_time += delta_time
        self.worm.update(delta_time)
        self.food_manager.update(delta_time, self.worm.segments)

        self._resolve_food()
        if (
            not self.worm.is_alive
            or self.collision_detector.snake_self_collision(self.worm)
        ):
            self._game_over("self collision")
            return

        if self.config.boundary_mode == BoundaryMode.DEATH:
            if self.worm.check_boundary_collision(self.bounds.width, self.bounds.height):
                self._game_over("boundary")
        else:
            self.worm.wrap_around_bounds(self.bounds.width, self.bounds.height)

    def _handle_actions(self) -> bool:
        """Apply pause/reset and steering. True if the frame should stop."""
        handler = self.input_handler
        if handler.was_space_just_pressed():
            self._transition(GameEvent.PAUSE)
            return True
        if handler.was_reset_just_pressed():
            self.reset_game()
            return True

        direction = handler.direction_vector()
        if direction.magnitude() > 0:
            self.worm.turn(direction)

        if handler.was_speed_up_pressed():
            self.worm.increase_speed(self.config.debug_speed_step)
        if handler.was_speed_down_pressed():
            self.worm.increase_speed(-self.config.debug_speed_step)
        return False

    def _resolve_food(self) -> None:
        for food in self.food_manager.foods:
            if self.collision_detector.snake_to_food(self.worm, food):
                food.consume()
                self._eat(food)
                return

    def _eat(self, food: Food) -> None:
        self.worm.grow()
        self.score += food.value
        self.food_count += 1
        self.color_flash = self.config.eat_flash_duration
        if food.type == FoodType.SPEED:
            self.worm.increase_speed(self.config.speed_food_bonus)
        logger.debug(
            "Ate %s food (+%d), score %d.", food.type.value, food.value, self.score,
        )

    def _game_over(self, reason: str) -> None:
        if not self._transition(GameEvent.DIE):
            return
        self.worm.is_alive = False
        logger.info(
            "Game over (%s) with score %d after %.1fs.",
            reason, self.score, self.play_time / 1000,
        )
        self._report_score()

    def _report_score(self) -> None:
        if self._score_reported:
            return
        self._score_reported = True
        if self.score_reporter is None or not self.player_id:
            return
        report = ScoreReport(
            player_id=self.player_id,
            score=self.score,
            food_count=self.food_count,
            game_time_seconds=int(self.play_time // 1000),
        )
        try:
            self.score_reporter.submit(report)
        except Exception:
            logger.exception("Score reporter failed for %s.", self.player_id)

    # --- lifecycle ---

    def _reset_world(self) -> None:
        self.worm.reset(self.bounds.center)
        self.food_manager.reset()
        self.food_manager.force_spawn(self.worm.segments)
        self.score = 0
        self.food_count = 0
        self.play_time = 0.0
        self.color_flash = 0.0
        self._score_reported = False

    def reset_game(self) -> None:
        """Start over from a fresh worm and food set, in the playing state."""
        self._reset_world()
        self._transition(GameEvent.RESET)

    def start_new_game(self) -> None:
        self._reset_world()
        self._transition(GameEvent.START)

    def pause(self) -> None:
        self._transition(GameEvent.PAUSE)

    def resume(self) -> None:
        self._transition(GameEvent.RESUME)

    def reset(self) -> None:
        self.reset_game()

    def handle_visibility_hidden(self) -> None:
        """Pause when the game is no longer visible."""
        if self.state == GameState.PLAYING:
            self._transition(GameEvent.PAUSE)

    # --- read-only views ---

    @property
    def game_time_seconds(self) -> int:
        return int(self.play_time // 1000)

    def snapshot(self) -> dict:
        """Serializable view of everything a renderer needs."""
        return {
            "state": self.state.value,
            "score": self.score,
            "food_count": self.food_count,
            "game_time": self.game_time_seconds,
            "color_flash": self.color_flash,
            "length": self.worm.length,
            "length_score": self.worm.score(),
            "worm": self.worm.to_dict(),
            "worm_colors": dict(WORM_COLORS),
            "foods": self.food_manager.to_dict()["foods"],
            "bounds": self.bounds.to_dict(),
            "boundary_mode": self.config.boundary_mode.value,
        }
