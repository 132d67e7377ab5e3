"""
Repository layer for database access.
"""

from .base import BaseRepository
from .settings_repository import SettingsRepository

__all__ = ['BaseRepository', 'SettingsRepository']
