"""Keyboard state tracking with edge detection."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from smooth_snake.vector import Vector2D

logger = logging.getLogger(__name__)


class Key(str, enum.Enum):
    """Physical key codes the game reacts to."""

    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"
    W = "KeyW"
    A = "KeyA"
    S = "KeyS"
    D = "KeyD"
    SPACE = "Space"
    R = "KeyR"
    PLUS = "Equal"
    MINUS = "Minus"


_UP_KEYS = (Key.ARROW_UP, Key.W)
_DOWN_KEYS = (Key.ARROW_DOWN, Key.S)
_LEFT_KEYS = (Key.ARROW_LEFT, Key.A)
_RIGHT_KEYS = (Key.ARROW_RIGHT, Key.D)

# Key used to represent each InputState flag in ``apply_snapshot``.
_SNAPSHOT_KEYS: dict[str, Key] = {
    "up": Key.ARROW_UP,
    "down": Key.ARROW_DOWN,
    "left": Key.ARROW_LEFT,
    "right": Key.ARROW_RIGHT,
    "space": Key.SPACE,
    "reset": Key.R,
}


@dataclass(frozen=True)
class InputState:
    """Logical input flags for one tick."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    space: bool = False
    reset: bool = False


def _code(key: Key | str) -> str:
    return key.value if isinstance(key, Key) else key


class InputHandler:
    """Tracks current and previous key state.

    Key events may arrive at any time via :meth:`press` and
    :meth:`release`. :meth:`update` must run exactly once at the end of
    each tick; it copies the current state into the previous state, which
    is what the ``just pressed`` / ``just released`` queries compare
    against.
    """

    def __init__(self) -> None:
        self._keys: dict[str, bool] = {}
        self._previous: dict[str, bool] = {}

    def press(self, key: Key | str) -> None:
        self._keys[_code(key)] = True

    def release(self, key: Key | str) -> None:
        self._keys[_code(key)] = False

    def blur(self) -> None:
        """Forget every key, e.g. when the window loses focus."""
        self._keys.clear()
        self._previous.clear()

    def apply_snapshot(self, snapshot: InputState) -> None:
        """Replace the current key state with a whole-tick snapshot."""
        for flag, key in _SNAPSHOT_KEYS.items():
            self._keys[key.value] = getattr(snapshot, flag)

    def is_key_pressed(self, key: Key | str) -> bool:
        return self._keys.get(_code(key), False)

    def _any_pressed(self, keys: tuple[Key, ...]) -> bool:
        return any(self.is_key_pressed(k) for k in keys)

    @property
    def state(self) -> InputState:
        return InputState(
            up=self._any_pressed(_UP_KEYS),
            down=self._any_pressed(_DOWN_KEYS),
            left=self._any_pressed(_LEFT_KEYS),
            right=self._any_pressed(_RIGHT_KEYS),
            space=self.is_key_pressed(Key.SPACE),
            reset=self.is_key_pressed(Key.R),
        )

    def direction_vector(self) -> Vector2D:
        """Sum of held directions, normalized; zero when they cancel."""
        state = self.state
        direction = Vector2D.zero()
        if state.up:
            direction = direction.add(Vector2D.up())
        if state.down:
            direction = direction.add(Vector2D.down())
        if state.left:
            direction = direction.add(Vector2D.left())
        if state.right:
            direction = direction.add(Vector2D.right())
        return direction.normalize()

    def is_key_just_pressed(self, key: Key | str) -> bool:
        code = _code(key)
        return self._keys.get(code, False) and not self._previous.get(code, False)

    def is_key_just_released(self, key: Key | str) -> bool:
        code = _code(key)
        return not self._keys.get(code, False) and self._previous.get(code, False)

    def was_space_just_pressed(self) -> bool:
        return self.is_key_just_pressed(Key.SPACE)

    def was_reset_just_pressed(self) -> bool:
        return self.is_key_just_pressed(Key.R)

    def was_speed_up_pressed(self) -> bool:
        return self.is_key_just_pressed(Key.PLUS)

    def was_speed_down_pressed(self) -> bool:
        return self.is_key_just_pressed(Key.MINUS)

    def active_keys(self) -> list[str]:
        return [code for code, down in self._keys.items() if down]

    def update(self) -> None:
        """Roll current key state into previous. Call last in each tick."""
        self._previous = dict(self._keys)
