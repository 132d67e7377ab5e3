"""
High score persistence.

Stores never raise: an unavailable or corrupt backend is logged and treated
as "no stored value" so the tick loop keeps running.
"""

import logging
import sqlite3
from typing import Optional

import database
from domain.game_state import WallPolicy
from .repositories import SettingsRepository

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "high_score"
WALL_POLICY_KEY = "wall_policy"

STORAGE_ERRORS = (sqlite3.Error, OSError)


class HighScoreStore:
    """
    Interface the Simulation uses to read and write the high score.
    """

    def get_high_score(self) -> int:
        raise NotImplementedError

    def set_high_score(self, value: int) -> None:
        raise NotImplementedError


class InMemoryHighScoreStore(HighScoreStore):
    """Keeps the high score for the lifetime of the process."""

    def __init__(self, initial: int = 0):
        self.value = max(int(initial), 0)

    def get_high_score(self) -> int:
        return self.value

    def set_high_score(self, value: int) -> None:
        self.value = max(int(value), 0)


class SqliteHighScoreStore(HighScoreStore):
    """
    High score (and wall policy preference) backed by the SQLite settings table.
    """

    def __init__(self, db_path: Optional[str] = None, repository: Optional[SettingsRepository] = None):
        self.db_path = db_path
        self.repository = repository or SettingsRepository(db_path)
        self.available = self._init_schema()

    def _init_schema(self) -> bool:
        try:
            database.init_database(self.db_path)
            return True
        except STORAGE_ERRORS as e:
            logger.warning(f"Settings storage unavailable, using defaults: {e}")
            return False

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.repository.get(key)
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not read '{key}' from settings storage: {e}")
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self.repository.set(key, value)
            return True
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not write '{key}' to settings storage: {e}")
            return False

    def get_high_score(self) -> int:
        raw = self._read(HIGH_SCORE_KEY)
        if raw is None:
            return 0
        try:
            value = int(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid stored high score {raw!r}")
            return 0
        return value if value >= 0 else 0

    def set_high_score(self, value: int) -> None:
        if self._write(HIGH_SCORE_KEY, str(int(value))):
            logger.debug(f"Persisted high score {value}")

    def get_wall_policy(self, default: WallPolicy = WallPolicy.BLOCKING) -> WallPolicy:
        raw = self._read(WALL_POLICY_KEY)
        if raw is None:
            return default
        try:
            return WallPolicy.parse(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid stored wall policy {raw!r}")
            return default

    def set_wall_policy(self, policy: WallPolicy) -> None:
        self._write(WALL_POLICY_KEY, WallPolicy(policy).value)
