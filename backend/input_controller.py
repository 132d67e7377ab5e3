"""
Input controller: turns raw directional events into at most one direction
change per simulation tick.

Render and input callbacks fire far more often than the simulation ticks.
Without the per-tick lock a player could queue two quick turns between ticks
and reverse straight into the segment behind the head.
"""

import logging
from typing import Dict, Optional, Tuple

from domain.constants import UP, DOWN, LEFT, RIGHT, VALID_MOVES
from domain.game_state import RunState
from simulation import Simulation, is_reversal

logger = logging.getLogger(__name__)

PAUSE = "PAUSE"

# Key names as reported by keyboard events
KEY_BINDINGS: Dict[str, object] = {
    "ArrowUp": UP,
    "ArrowDown": DOWN,
    "ArrowLeft": LEFT,
    "ArrowRight": RIGHT,
    "w": UP,
    "s": DOWN,
    "a": LEFT,
    "d": RIGHT,
    " ": PAUSE,
    "Spacebar": PAUSE,
}


class InputController:
    """
    Buffers one pending direction per tick for a Simulation.

    The reversal check is made against the snake's *active* direction, not the
    buffered one, so two proposals in the same tick can never add up to a
    reversal.
    """

    def __init__(self, simulation: Simulation):
        self.simulation = simulation
        self._pending: Optional[Tuple[int, int]] = None
        self._locked = False

    @property
    def pending(self) -> Optional[Tuple[int, int]]:
        return self._pending

    def propose(self, direction) -> bool:
        """
        Offer a direction for the next tick.

        Returns:
            True if the direction was buffered, False if it was rejected
            (not running, not a cardinal direction, a second change in the
            same tick, or a reversal of the active direction).
        """
        if self.simulation.run_state != RunState.RUNNING:
            return False
        try:
            direction = (int(direction[0]), int(direction[1]))
        except (TypeError, IndexError, ValueError):
            return False
        if direction not in VALID_MOVES:
            return False
        if self._locked:
            return False

        snake = self.simulation.snake
        if len(snake) > 1 and is_reversal(direction, snake.direction):
            return False

        self._pending = direction
        self._locked = True
        return True

    def take_pending(self) -> Optional[Tuple[int, int]]:
        """Hand the buffered direction to the tick about to run and release the lock."""
        direction = self._pending
        self._pending = None
        self._locked = False
        return direction

    def pause_or_restart(self) -> None:
        """
        Start an idle game, restart a finished one, or toggle pause.

        Not subject to the per-tick lock.
        """
        state = self.simulation.run_state
        self.take_pending()
        if state == RunState.IDLE:
            self.simulation.start()
        elif state == RunState.GAME_OVER:
            self.simulation.restart()
        else:
            self.simulation.toggle_pause()

    def handle_key(self, key: str) -> bool:
        """
        Route a key name to the matching intent. Unknown keys are ignored.

        Returns:
            True if the key was consumed.
        """
        action = KEY_BINDINGS.get(key)
        if action is None and isinstance(key, str):
            action = KEY_BINDINGS.get(key.lower())
        if action is None:
            return False
        if action == PAUSE:
            self.pause_or_restart()
            return True
        accepted = self.propose(action)
        if not accepted:
            logger.debug(f"Rejected key {key!r} at tick {self.simulation.tick_number}.")
        return True
