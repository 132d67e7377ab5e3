"""
Tests for config.py
"""

import pytest
import sys
import os
from unittest.mock import patch

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig, load_config
from domain.constants import GRID_SIZE, TICK_RATE
from domain.game_state import WallPolicy

ENV_KEYS = [
    "SNAKE_GRID_SIZE",
    "SNAKE_TICK_RATE",
    "SNAKE_WALL_POLICY",
    "SNAKE_BONUS_ENABLED",
    "SNAKE_DB_PATH",
    "SNAKE_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the tests
    with patch("config.load_dotenv"):
        yield


class TestLoadConfig:

    def test_defaults(self):
        config = load_config()
        assert config.width == GRID_SIZE
        assert config.height == GRID_SIZE
        assert config.tick_rate == TICK_RATE
        assert config.wall_policy == WallPolicy.BLOCKING
        assert config.bonus_enabled is True
        assert config.db_path is None
        assert config.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SNAKE_GRID_SIZE", "12")
        monkeypatch.setenv("SNAKE_TICK_RATE", "10.5")
        monkeypatch.setenv("SNAKE_WALL_POLICY", "off")
        monkeypatch.setenv("SNAKE_BONUS_ENABLED", "no")
        monkeypatch.setenv("SNAKE_DB_PATH", "/tmp/snake-test.db")
        monkeypatch.setenv("SNAKE_LOG_LEVEL", "debug")

        config = load_config()
        assert (config.width, config.height) == (12, 12)
        assert config.tick_rate == 10.5
        assert config.wall_policy == WallPolicy.WRAPPING
        assert config.bonus_enabled is False
        assert config.db_path == "/tmp/snake-test.db"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("key,value", [
        ("SNAKE_GRID_SIZE", "big"),
        ("SNAKE_GRID_SIZE", "0"),
        ("SNAKE_TICK_RATE", "-1"),
        ("SNAKE_WALL_POLICY", "lava"),
        ("SNAKE_BONUS_ENABLED", "maybe"),
    ])
    def test_invalid_values_raise(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ValueError):
            load_config()


class TestGameConfig:

    def test_accepts_policy_value_string(self):
        assert GameConfig(wall_policy="wrapping").wall_policy == WallPolicy.WRAPPING

    def test_rejects_bad_grid(self):
        with pytest.raises(ValueError):
            GameConfig(width=0)
