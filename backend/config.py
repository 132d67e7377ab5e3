"""
Runtime configuration for Snake Evolution.

Values come from the environment (optionally a .env file loaded with
python-dotenv); gameplay tuning constants stay in domain/constants.py.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from domain.constants import GRID_SIZE, TICK_RATE
from domain.game_state import WallPolicy

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class GameConfig:
    width: int = GRID_SIZE
    height: int = GRID_SIZE
    tick_rate: float = TICK_RATE
    wall_policy: WallPolicy = WallPolicy.BLOCKING
    bonus_enabled: bool = True
    db_path: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid size must be positive, got {self.width}x{self.height}")
        if self.tick_rate <= 0:
            raise ValueError(f"Tick rate must be positive, got {self.tick_rate}")
        self.wall_policy = WallPolicy(self.wall_policy)
        self.log_level = self.log_level.upper()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_config() -> GameConfig:
    """
    Build a GameConfig from environment variables.

    Recognised variables:
        SNAKE_GRID_SIZE     tiles per side (default 24)
        SNAKE_TICK_RATE     base moves per second (default 8)
        SNAKE_WALL_POLICY   blocking | wrapping (also on/off)
        SNAKE_BONUS_ENABLED true/false
        SNAKE_DB_PATH       SQLite file for the high score
        SNAKE_LOG_LEVEL     logging level name

    Raises:
        ValueError: if a variable holds an invalid value.
    """
    load_dotenv()

    grid_size = _int_env("SNAKE_GRID_SIZE", GRID_SIZE)
    wall_raw = os.getenv("SNAKE_WALL_POLICY")
    wall_policy = WallPolicy.parse(wall_raw) if wall_raw else WallPolicy.BLOCKING

    return GameConfig(
        width=grid_size,
        height=grid_size,
        tick_rate=_float_env("SNAKE_TICK_RATE", TICK_RATE),
        wall_policy=wall_policy,
        bonus_enabled=_bool_env("SNAKE_BONUS_ENABLED", True),
        db_path=os.getenv("SNAKE_DB_PATH") or None,
        log_level=os.getenv("SNAKE_LOG_LEVEL", "INFO"),
    )
