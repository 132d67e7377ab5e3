"""
Tick-based simulation for Snake Evolution.

The Simulation owns every piece of mutable game state (snake, food, bonus,
score, level, run state). Collaborators read it through snapshot() and change
it only through tick(), start(), toggle_pause(), restart(), set_food() and
set_wall_policy().
"""

import logging
import random
from typing import Iterable, List, Optional, Set, Tuple

from domain.constants import (
    RIGHT,
    VALID_MOVES,
    GRID_SIZE,
    INITIAL_LENGTH,
    TICK_RATE,
    MAX_TICK_RATE,
    SPEED_STEP,
    POINTS_PER_LEVEL,
    FOOD_POINTS,
    BONUS_POINTS,
    BONUS_EVERY,
    BONUS_LIFETIME_TICKS,
    MAX_SPAWN_ATTEMPTS,
)
from domain.game_state import (
    Cell,
    GameState,
    RunState,
    TickOutcome,
    TickResult,
    WallPolicy,
)
from domain.snake import Snake

logger = logging.getLogger(__name__)


def validate_direction(direction) -> Tuple[int, int]:
    """Return the direction as a tuple, or raise ValueError if it is not a cardinal unit vector."""
    try:
        candidate = (int(direction[0]), int(direction[1]))
    except (TypeError, IndexError, ValueError):
        raise ValueError(f"Invalid direction {direction!r}")
    if candidate not in VALID_MOVES:
        raise ValueError(f"Invalid direction {direction!r}: expected one of {sorted(VALID_MOVES)}")
    return candidate


def is_reversal(direction: Tuple[int, int], current: Tuple[int, int]) -> bool:
    return direction[0] == -current[0] and direction[1] == -current[1]


class Simulation:
    """
    Manages:
      - Board (width, height) and wall policy
      - Snake and its active direction
      - Food and the optional bonus item
      - Score, high score, level and speed
      - Run state (idle, running, paused, game over)
    """

    def __init__(
        self,
        width: int = GRID_SIZE,
        height: int = GRID_SIZE,
        wall_policy: WallPolicy = WallPolicy.BLOCKING,
        high_score_store=None,
        rng: Optional[random.Random] = None,
        bonus_enabled: bool = True,
        tick_rate: float = TICK_RATE,
        initial_snake: Optional[List[Cell]] = None,
        initial_direction: Tuple[int, int] = RIGHT,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}.")
        if tick_rate <= 0:
            raise ValueError(f"Tick rate must be positive, got {tick_rate}.")

        self.width = width
        self.height = height
        self.wall_policy = WallPolicy(wall_policy)
        self.rng = rng or random.Random()
        self.high_score_store = high_score_store
        self.bonus_enabled = bonus_enabled
        self.base_tick_rate = float(tick_rate)

        self._initial_direction = validate_direction(initial_direction)
        self._initial_snake = None
        if initial_snake is not None:
            self._initial_snake = [tuple(cell) for cell in initial_snake]
            self._validate_body(self._initial_snake)

        self.high_score = self._load_high_score()
        self.run_state = RunState.IDLE
        # Bumped every time the run enters RUNNING (start, resume, restart)
        self.run_epoch = 0
        self._reset_run()

    # ------------------------------------------------------------------
    # Grid helpers
    # ------------------------------------------------------------------

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def wrap(self, cell: Cell) -> Cell:
        x, y = cell
        return (x % self.width, y % self.height)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self.run_state != RunState.IDLE:
            return
        self.run_state = RunState.RUNNING
        self.run_epoch += 1
        logger.info(f"Run started on a {self.width}x{self.height} board ({self.wall_policy.value}).")

    def toggle_pause(self) -> None:
        if self.run_state == RunState.RUNNING:
            self.run_state = RunState.PAUSED
            logger.info(f"Paused at tick {self.tick_number}.")
        elif self.run_state == RunState.PAUSED:
            self.run_state = RunState.RUNNING
            self.run_epoch += 1
            logger.info(f"Resumed at tick {self.tick_number}.")

    def restart(self) -> None:
        """Re-initialize snake, food, score and level, then start running. High score is kept."""
        self._reset_run()
        self.run_state = RunState.RUNNING
        self.run_epoch += 1
        logger.info("Run restarted.")

    def set_wall_policy(self, policy: WallPolicy) -> None:
        self.wall_policy = WallPolicy(policy)
        logger.info(f"Wall policy set to {self.wall_policy.value}.")

    def set_food(self, cell: Cell) -> None:
        """
        Place the food at a specific cell.

        Raises:
            ValueError: if the cell is out of bounds or already occupied.
        """
        cell = tuple(cell)
        if not self.in_bounds(cell):
            raise ValueError(f"Food out of bounds at {cell}.")
        if self.snake.occupies(cell) or cell == self.bonus:
            raise ValueError(f"Food cannot be placed on an occupied cell {cell}.")
        self.food = cell

    def _reset_run(self) -> None:
        if self._initial_snake is not None:
            body = list(self._initial_snake)
        else:
            body = self._default_body()
        snake = Snake(body, self._initial_direction)

        food = self.spawn_item(set(body))
        if food is None:
            raise ValueError(f"No free cell left for food on a {self.width}x{self.height} board.")

        # Assign everything at once so a renderer never sees a half-reset run.
        self.snake = snake
        self.food = food
        self.bonus: Optional[Cell] = None
        self.bonus_expires_at: Optional[int] = None
        self.tick_number = 0
        self.score = 0
        self.foods_eaten = 0
        self.level = 1
        self.moves_per_second = self._rate_for_level(1)

    def _default_body(self) -> List[Cell]:
        start_x, start_y = self.width // 2, self.height // 2
        dx, dy = self._initial_direction
        body = []
        for i in range(INITIAL_LENGTH):
            cell = (start_x - dx * i, start_y - dy * i)
            if not self.in_bounds(cell):
                break
            body.append(cell)
        return body

    def _validate_body(self, body: List[Cell]) -> None:
        if not body:
            raise ValueError("Initial snake must have at least one cell.")
        for cell in body:
            if not self.in_bounds(cell):
                raise ValueError(f"Snake cell out of bounds at {cell}.")
        if len(set(body)) != len(body):
            raise ValueError(f"Snake overlaps itself: {body}")
        if len(body) > 1:
            dx, dy = self._initial_direction
            head = body[0]
            if (head[0] + dx, head[1] + dy) == body[1]:
                raise ValueError(
                    f"Initial direction {self._initial_direction} points into the snake's neck at {body[1]}."
                )

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, direction: Optional[Tuple[int, int]] = None) -> TickResult:
        """
        Advance the game by exactly one step.

        Args:
            direction: the direction resolved by the input controller for this
                tick, or None to keep the active one.

        Returns:
            TickResult with the outcome and the post-tick snapshot. Collisions
            are reported as a GAME_OVER outcome, never raised.
        """
        if self.run_state != RunState.RUNNING:
            return TickResult(outcome=TickOutcome.NOT_RUNNING, state=self.snapshot())

        snake = self.snake

        # 1) Commit the buffered direction
        if direction is not None:
            direction = validate_direction(direction)
            if len(snake) > 1 and is_reversal(direction, snake.direction):
                logger.debug(f"Ignoring reversal {direction} at tick {self.tick_number}.")
            else:
                snake.direction = direction

        # 2) Expire the bonus before anything can eat it
        bonus_expired = False
        if self.bonus is not None and self.tick_number >= self.bonus_expires_at:
            logger.debug(f"Bonus at {self.bonus} expired at tick {self.tick_number}.")
            self.bonus = None
            self.bonus_expires_at = None
            bonus_expired = True

        self.tick_number += 1

        # 3) Compute the new head and apply the wall policy
        hx, hy = snake.head
        dx, dy = snake.direction
        new_head = (hx + dx, hy + dy)
        if not self.in_bounds(new_head):
            if self.wall_policy == WallPolicy.WRAPPING:
                new_head = self.wrap(new_head)
            else:
                return self._end_run("wall", bonus_expired=bonus_expired)

        # 4) Growth decision
        ate_food = new_head == self.food
        ate_bonus = self.bonus is not None and new_head == self.bonus
        will_grow = ate_food or ate_bonus

        # 5) Self-collision against the cells still occupied after this move.
        # The tail is vacated unless we grow, so it is a legal target.
        occupied = set(snake.positions)
        if not will_grow:
            occupied.discard(snake.tail)
        if new_head in occupied:
            return self._end_run("self", bonus_expired=bonus_expired)

        # 6) Move
        snake.positions.appendleft(new_head)
        if not will_grow:
            snake.positions.pop()

        outcome = TickOutcome.CONTINUED
        bonus_spawned = False
        level_up = False

        if ate_food:
            outcome = TickOutcome.ATE_FOOD
            self.foods_eaten += 1
            level_up = self._add_points(FOOD_POINTS)
            self.food = self._place_food()
            if self.food is not None:
                bonus_spawned = self._maybe_spawn_bonus()
        elif ate_bonus:
            outcome = TickOutcome.ATE_BONUS
            self.bonus = None
            self.bonus_expires_at = None
            level_up = self._add_points(BONUS_POINTS)

        new_high_score = self._update_high_score() if will_grow else False

        if will_grow and self.food is None:
            snake.die("board_full", self.tick_number)
            self.run_state = RunState.GAME_OVER
            logger.info(f"Board filled at tick {self.tick_number} with score {self.score}.")

        return TickResult(
            outcome=outcome,
            state=self.snapshot(),
            bonus_spawned=bonus_spawned,
            bonus_expired=bonus_expired,
            new_high_score=new_high_score,
            level_up=level_up,
        )

    def _end_run(self, reason: str, bonus_expired: bool = False) -> TickResult:
        self.snake.die(reason, self.tick_number)
        self.run_state = RunState.GAME_OVER
        logger.info(
            f"Game over ({reason}) at tick {self.tick_number}: "
            f"score {self.score}, high score {self.high_score}."
        )
        return TickResult(
            outcome=TickOutcome.GAME_OVER,
            state=self.snapshot(),
            bonus_expired=bonus_expired,
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def spawn_item(self, exclude: Iterable[Cell]) -> Optional[Cell]:
        """
        Return a uniformly random cell not in `exclude`, or None if there is none.

        Rejection sampling is capped at MAX_SPAWN_ATTEMPTS; after that the free
        cells are enumerated so a nearly full board still terminates quickly.
        """
        excluded: Set[Cell] = set(exclude)
        for _ in range(MAX_SPAWN_ATTEMPTS):
            cell = (self.rng.randrange(self.width), self.rng.randrange(self.height))
            if cell not in excluded:
                return cell

        free = [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if (x, y) not in excluded
        ]
        if not free:
            return None
        return self.rng.choice(free)

    def _place_food(self) -> Optional[Cell]:
        exclude = set(self.snake.positions)
        if self.bonus is not None:
            exclude.add(self.bonus)
        cell = self.spawn_item(exclude)
        if cell is None and self.bonus is not None:
            # Only the bonus cell is left; it becomes the food.
            cell = self.bonus
            self.bonus = None
            self.bonus_expires_at = None
        return cell

    def _maybe_spawn_bonus(self) -> bool:
        if not self.bonus_enabled or self.bonus is not None:
            return False
        if self.foods_eaten % BONUS_EVERY != 0:
            return False
        exclude = set(self.snake.positions)
        exclude.add(self.food)
        cell = self.spawn_item(exclude)
        if cell is None:
            return False
        self.bonus = cell
        self.bonus_expires_at = self.tick_number + BONUS_LIFETIME_TICKS
        logger.debug(f"Bonus spawned at {cell}, expires at tick {self.bonus_expires_at}.")
        return True

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _rate_for_level(self, level: int) -> float:
        cap = max(float(MAX_TICK_RATE), self.base_tick_rate)
        return min(self.base_tick_rate + (level - 1) * SPEED_STEP, cap)

    def _add_points(self, points: int) -> bool:
        """Add points and re-evaluate the level. Returns True on a level up."""
        self.score += points
        new_level = 1 + self.score // POINTS_PER_LEVEL
        if new_level <= self.level:
            return False
        self.level = new_level
        self.moves_per_second = self._rate_for_level(new_level)
        logger.info(f"Level {self.level} reached: {self.moves_per_second:g} moves per second.")
        return True

    def _load_high_score(self) -> int:
        if self.high_score_store is None:
            return 0
        try:
            value = int(self.high_score_store.get_high_score())
        except Exception as e:
            logger.warning(f"Could not read high score, starting from 0: {e}")
            return 0
        return max(value, 0)

    def _update_high_score(self) -> bool:
        if self.score <= self.high_score:
            return False
        self.high_score = self.score
        if self.high_score_store is not None:
            try:
                self.high_score_store.set_high_score(self.high_score)
            except Exception as e:
                # Don't raise - the run continues even if storage is unavailable
                logger.warning(f"Could not persist high score {self.high_score}: {e}")
        return True

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def direction(self) -> Tuple[int, int]:
        return self.snake.direction

    @property
    def step_duration(self) -> float:
        """Seconds between two ticks at the current level."""
        return 1.0 / self.moves_per_second

    def snapshot(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            tick=self.tick_number,
            snake=tuple(self.snake.positions),
            direction=self.snake.direction,
            food=self.food,
            bonus=self.bonus,
            bonus_expires_at=self.bonus_expires_at,
            score=self.score,
            high_score=self.high_score,
            level=self.level,
            moves_per_second=self.moves_per_second,
            run_state=self.run_state,
            wall_policy=self.wall_policy,
            width=self.width,
            height=self.height,
            death_reason=self.snake.death_reason,
        )

    def print_board(self):
        """
        Prints a visual representation of the current board state.
        """
        print("\n" + self.snapshot().print_board() + "\n")
