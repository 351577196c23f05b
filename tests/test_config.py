"""Tests for GameConfig."""

import pytest

from smooth_snake.config import BoundaryMode, GameConfig


class TestGameConfig:
    def test_defaults(self):
        cfg = GameConfig()
        assert (cfg.width, cfg.height) == (800, 600)
        assert cfg.boundary_mode == BoundaryMode.DEATH
        assert cfg.initial_speed == 100
        assert cfg.max_food_count == 3
        assert cfg.max_delta_time == pytest.approx(1000 / 30)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"segment_radius": -1},
            {"initial_length": 0},
            {"growth_rate": -1},
            {"turning_speed": 0},
            {"max_food_count": 0},
            {"max_delta_time": 0},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            GameConfig(**kwargs)

    def test_frozen(self):
        cfg = GameConfig()
        with pytest.raises(AttributeError):
            cfg.width = 10  # type: ignore[misc]

    def test_to_dict_uses_enum_values(self):
        assert GameConfig(boundary_mode=BoundaryMode.WRAP).to_dict()["boundary_mode"] == "wrap"

    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(width=640, boundary_mode=BoundaryMode.WRAP, seed=9)
        path = tmp_path / "nested" / "config.json"
        cfg.save(path)
        assert GameConfig.load(path) == cfg

    def test_from_dict_bad_mode(self):
        with pytest.raises(ValueError):
            GameConfig.from_dict({"boundary_mode": "bounce"})
