"""
Autopilot players for Snake Evolution.

Players look at a GameState and propose a direction, feeding the same
InputController a keyboard would.
"""

from .base import Player, safe_moves
from .random_player import RandomPlayer
from .greedy_player import GreedyPlayer
from .variant_registry import get_player_class, list_variants, AVAILABLE_VARIANTS

__all__ = [
    'Player',
    'safe_moves',
    'RandomPlayer',
    'GreedyPlayer',
    'get_player_class',
    'list_variants',
    'AVAILABLE_VARIANTS',
]
