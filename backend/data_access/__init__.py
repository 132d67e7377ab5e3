"""
Data access layer for Snake Evolution.

Persistence of the high score and player preferences lives here, behind
stores that degrade to defaults instead of raising.
"""

from .high_score import (
    HighScoreStore,
    InMemoryHighScoreStore,
    SqliteHighScoreStore,
)
from .repositories import SettingsRepository

__all__ = [
    'HighScoreStore',
    'InMemoryHighScoreStore',
    'SqliteHighScoreStore',
    'SettingsRepository',
]
