"""Tests for the InputHandler."""

import math

import pytest

from smooth_snake.input import InputHandler, InputState, Key
from smooth_snake.vector import Vector2D


@pytest.fixture()
def handler():
    return InputHandler()


class TestKeyState:
    def test_press_and_release(self, handler):
        handler.press(Key.ARROW_UP)
        assert handler.is_key_pressed("ArrowUp")
        handler.release("ArrowUp")
        assert not handler.is_key_pressed(Key.ARROW_UP)

    def test_unknown_key_is_not_pressed(self, handler):
        assert not handler.is_key_pressed("KeyQ")

    def test_active_keys(self, handler):
        handler.press(Key.W)
        handler.press(Key.SPACE)
        handler.release(Key.W)
        assert handler.active_keys() == ["Space"]

    def test_state_merges_arrows_and_wasd(self, handler):
        handler.press(Key.A)
        handler.press(Key.ARROW_DOWN)
        assert handler.state == InputState(down=True, left=True)


class TestDirection:
    def test_single_direction(self, handler):
        handler.press(Key.D)
        assert handler.direction_vector() == Vector2D(1, 0)

    def test_diagonal_is_normalized(self, handler):
        handler.press(Key.ARROW_UP)
        handler.press(Key.ARROW_RIGHT)
        v = handler.direction_vector()
        assert v.x == pytest.approx(1 / math.sqrt(2))
        assert v.y == pytest.approx(-1 / math.sqrt(2))

    def test_opposites_cancel(self, handler):
        handler.press(Key.ARROW_LEFT)
        handler.press(Key.ARROW_RIGHT)
        assert handler.direction_vector() == Vector2D.zero()

    def test_nothing_held(self, handler):
        assert handler.direction_vector() == Vector2D.zero()


class TestEdgeDetection:
    def test_just_pressed_lasts_one_tick(self, handler):
        handler.press(Key.SPACE)
        assert handler.was_space_just_pressed()
        handler.update()
        assert handler.is_key_pressed(Key.SPACE)
        assert not handler.was_space_just_pressed()

    def test_just_released(self, handler):
        handler.press(Key.R)
        handler.update()
        handler.release(Key.R)
        assert handler.is_key_just_released(Key.R)
        handler.update()
        assert not handler.is_key_just_released(Key.R)

    def test_press_and_release_within_tick_is_missed(self, handler):
        handler.press(Key.SPACE)
        handler.release(Key.SPACE)
        assert not handler.was_space_just_pressed()

    def test_debug_speed_keys(self, handler):
        handler.press(Key.PLUS)
        assert handler.was_speed_up_pressed()
        assert not handler.was_speed_down_pressed()
        handler.press(Key.MINUS)
        assert handler.was_speed_down_pressed()

    def test_reset_key(self, handler):
        handler.press("KeyR")
        assert handler.was_reset_just_pressed()


class TestBlurAndSnapshot:
    def test_blur_clears_everything(self, handler):
        handler.press(Key.ARROW_UP)
        handler.update()
        handler.blur()
        assert handler.active_keys() == []
        assert not handler.is_key_just_released(Key.ARROW_UP)
        assert handler.direction_vector() == Vector2D.zero()

    def test_apply_snapshot(self, handler):
        handler.apply_snapshot(InputState(up=True, space=True))
        assert handler.direction_vector() == Vector2D.up()
        assert handler.was_space_just_pressed()
        handler.update()
        handler.apply_snapshot(InputState(up=True))
        assert handler.state == InputState(up=True)
        assert handler.is_key_just_released(Key.SPACE)
