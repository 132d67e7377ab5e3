"""
Greedy player implementation - heads for the nearest item along safe moves.
"""

import random
from typing import Optional, Tuple

from domain.game_state import GameState, WallPolicy
from .base import Player, next_cell, safe_moves


def _axis_distance(a: int, b: int, extent: int, wrapping: bool) -> int:
    d = abs(a - b)
    return min(d, extent - d) if wrapping else d


class GreedyPlayer(Player):
    """
    Picks the safe move that gets closest to the bonus (when present) or the
    food. Ties are broken at random.
    """

    name = "greedy"
    description = "Closest safe move towards the bonus or food"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def distance(self, game_state: GameState, cell, target) -> int:
        wrapping = game_state.wall_policy == WallPolicy.WRAPPING
        return (
            _axis_distance(cell[0], target[0], game_state.width, wrapping)
            + _axis_distance(cell[1], target[1], game_state.height, wrapping)
        )

    def get_move(self, game_state: GameState) -> Tuple[int, int]:
        valid_moves = safe_moves(game_state)
        if not valid_moves:
            return game_state.direction

        target = game_state.bonus or game_state.food
        if target is None:
            return self.rng.choice(valid_moves)

        scored = [
            (self.distance(game_state, next_cell(game_state, move), target), move)
            for move in valid_moves
        ]
        best = min(score for score, _ in scored)
        return self.rng.choice([move for score, move in scored if score == best])
