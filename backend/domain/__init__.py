"""
Domain entities for the Snake Evolution game engine.

This module contains the core game entities that are independent of
infrastructure concerns (storage, audio, rendering, etc.).
"""

from .constants import UP, DOWN, LEFT, RIGHT, VALID_MOVES, DIRECTION_NAMES
from .snake import Snake
from .game_state import GameState, RunState, TickOutcome, TickResult, WallPolicy

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'DIRECTION_NAMES',
    'Snake',
    'GameState',
    'RunState',
    'TickOutcome',
    'TickResult',
    'WallPolicy',
]
