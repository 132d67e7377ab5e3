"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List, Tuple, Optional


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        direction: active (dx, dy) heading, committed at the start of each tick
        alive: whether this snake is still alive
        death_reason: e.g., 'wall', 'self', 'board_full'
        death_tick: The tick number when the snake died
    """

    def __init__(self, positions: List[Tuple[int, int]], direction: Tuple[int, int]):
        if not positions:
            raise ValueError("Snake needs at least one cell.")
        self.positions = deque(positions)
        self.direction = direction
        self.alive = True
        self.death_reason: Optional[str] = None
        self.death_tick: Optional[int] = None

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Tuple[int, int]:
        """Return the tail position (last element)."""
        return self.positions[-1]

    def __len__(self) -> int:
        return len(self.positions)

    def occupies(self, cell: Tuple[int, int]) -> bool:
        return cell in self.positions

    def die(self, reason: str, tick: int) -> None:
        self.alive = False
        self.death_reason = reason
        self.death_tick = tick
