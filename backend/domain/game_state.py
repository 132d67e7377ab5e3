"""
GameState entity - a snapshot of the game at a point in time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .constants import DIRECTION_NAMES

Cell = Tuple[int, int]


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class WallPolicy(str, Enum):
    """What happens when the head crosses the grid edge."""

    BLOCKING = "blocking"   # crossing an edge ends the run
    WRAPPING = "wrapping"   # re-enter from the opposite edge

    @classmethod
    def parse(cls, value: str) -> "WallPolicy":
        """
        Accept the enum value or the on/off wording used by the wall toggle.
        """
        normalized = (value or "").strip().lower()
        aliases = {
            "on": cls.BLOCKING,
            "walls": cls.BLOCKING,
            "off": cls.WRAPPING,
            "wrap": cls.WRAPPING,
        }
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown wall policy '{value}'. Expected one of: {valid}")


class TickOutcome(str, Enum):
    CONTINUED = "continued"
    ATE_FOOD = "ate_food"
    ATE_BONUS = "ate_bonus"
    GAME_OVER = "game_over"
    NOT_RUNNING = "not_running"


@dataclass(frozen=True)
class GameState:
    """
    A read-only snapshot of the game at a specific tick.

    Attributes:
        tick: number of ticks applied in the current run
        snake: tuple of (x, y) from head to tail
        direction: active (dx, dy) heading
        food: (x, y) of the food, or None once the board is full
        bonus: (x, y) of the bonus item, or None
        bonus_expires_at: tick at which the bonus disappears, or None
        score, high_score, level: scoring progress
        moves_per_second: current simulation rate
        run_state: RunState of the simulation
        wall_policy: WallPolicy in effect
        width, height: board dimensions
        death_reason: 'wall', 'self' or 'board_full' once the run is over
    """

    tick: int
    snake: Tuple[Cell, ...]
    direction: Cell
    food: Optional[Cell]
    bonus: Optional[Cell]
    bonus_expires_at: Optional[int]
    score: int
    high_score: int
    level: int
    moves_per_second: float
    run_state: RunState
    wall_policy: WallPolicy
    width: int
    height: int
    death_reason: Optional[str] = None

    @property
    def head(self) -> Cell:
        return self.snake[0]

    @property
    def step_duration(self) -> float:
        """Seconds between two ticks at the current rate."""
        return 1.0 / self.moves_per_second

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the snapshot into a JSON-serializable dict for external renderers.
        """
        return {
            "tick": self.tick,
            "snake": [list(cell) for cell in self.snake],
            "direction": DIRECTION_NAMES.get(self.direction),
            "food": list(self.food) if self.food is not None else None,
            "bonus": list(self.bonus) if self.bonus is not None else None,
            "bonus_expires_at": self.bonus_expires_at,
            "score": self.score,
            "high_score": self.high_score,
            "level": self.level,
            "moves_per_second": self.moves_per_second,
            "run_state": self.run_state.value,
            "wall_policy": self.wall_policy.value,
            "width": self.width,
            "height": self.height,
            "death_reason": self.death_reason,
        }

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        B = bonus
        H = snake head
        o = snake body
        (0,0) is the top left, matching screen coordinates.
        """
        # Create empty board
        board = [['.' for _ in range(self.width)] for _ in range(self.height)]

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'
        if self.bonus is not None:
            bx, by = self.bonus
            board[by][bx] = 'B'

        for idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if idx == 0 else 'o'

        result = []
        for y in range(self.height):
            result.append(f"{y:2d} {' '.join(board[y])}")

        # Add x-axis labels at the bottom
        result.append("   " + " ".join(str(i % 10) for i in range(self.width)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, state={self.run_state.value}, "
            f"length={len(self.snake)}, food={self.food}, score={self.score}>"
        )


@dataclass(frozen=True)
class TickResult:
    """
    What a single tick produced, for sound and score side effects.
    """

    outcome: TickOutcome
    state: GameState
    bonus_spawned: bool = False
    bonus_expired: bool = False
    new_high_score: bool = False
    level_up: bool = False

    @property
    def ate(self) -> bool:
        return self.outcome in (TickOutcome.ATE_FOOD, TickOutcome.ATE_BONUS)

    @property
    def game_over(self) -> bool:
        return (
            self.outcome == TickOutcome.GAME_OVER
            or self.state.run_state == RunState.GAME_OVER
        )
