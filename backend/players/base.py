"""
Base player interface for autopilot input sources.
"""

from typing import List, Tuple

from domain.constants import VALID_MOVES
from domain.game_state import GameState, WallPolicy


class Player:
    """
    Base class/interface for player logic.

    A player looks at the current snapshot and returns the direction it wants
    next. The answer goes through the InputController like any keypress.
    """

    name = "player"
    description = ""

    def get_move(self, game_state: GameState) -> Tuple[int, int]:
        """
        Return a move direction given the current game state.

        Args:
            game_state: Current snapshot of the game

        Returns:
            One of UP, DOWN, LEFT, RIGHT as (dx, dy)
        """
        raise NotImplementedError


def next_cell(game_state: GameState, move: Tuple[int, int]):
    """Where the head lands for `move`, or None if that hits a blocking wall."""
    hx, hy = game_state.head
    x, y = hx + move[0], hy + move[1]
    if 0 <= x < game_state.width and 0 <= y < game_state.height:
        return (x, y)
    if game_state.wall_policy == WallPolicy.WRAPPING:
        return (x % game_state.width, y % game_state.height)
    return None


def safe_moves(game_state: GameState) -> List[Tuple[int, int]]:
    """
    Moves that neither reverse, hit a wall, nor run into the body.

    The tail counts as free unless the move eats, since it is vacated this tick.
    """
    dx, dy = game_state.direction
    snake = game_state.snake
    moves = []
    # Sorted for a stable order under a seeded rng
    for move in sorted(VALID_MOVES):
        if len(snake) > 1 and move == (-dx, -dy):
            continue
        cell = next_cell(game_state, move)
        if cell is None:
            continue
        grows = cell == game_state.food or cell == game_state.bonus
        body = snake if grows else snake[:-1]
        if cell in body:
            continue
        moves.append(move)
    return moves
