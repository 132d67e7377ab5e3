"""
Fixed-timestep scheduler.

Accumulates the elapsed frame time and runs zero, one or several simulation
ticks per frame, so game speed does not depend on the display refresh rate.
"""

import logging
from typing import List, Optional

from domain.constants import MAX_FRAME_DELTA
from domain.game_state import RunState, TickResult
from input_controller import InputController
from simulation import Simulation

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Drives Simulation.tick() from frame signals.

    The accumulator is zeroed whenever the run is not RUNNING, and again
    whenever the simulation reports a new run epoch (start, resume, restart),
    so resuming after a pause never replays a burst of catch-up ticks even if
    no frame arrived while paused.
    """

    def __init__(
        self,
        simulation: Simulation,
        controller: Optional[InputController] = None,
        max_frame_delta: float = MAX_FRAME_DELTA,
    ):
        self.simulation = simulation
        self.controller = controller
        self.max_frame_delta = max_frame_delta
        self.accumulator = 0.0
        self._last_timestamp: Optional[float] = None
        self._run_epoch = getattr(simulation, "run_epoch", None)

    def reset(self) -> None:
        self.accumulator = 0.0
        self._last_timestamp = None

    def _sync_run_epoch(self) -> None:
        epoch = getattr(self.simulation, "run_epoch", None)
        if epoch != self._run_epoch:
            self._run_epoch = epoch
            self.reset()

    def frame(self, timestamp: float) -> List[TickResult]:
        """
        Handle a frame signal carrying an absolute timestamp in seconds.

        The first frame after a start, pause or game over counts as zero
        elapsed time.
        """
        if self.simulation.run_state != RunState.RUNNING:
            self.reset()
            return []
        self._sync_run_epoch()
        if self._last_timestamp is None:
            dt = 0.0
        else:
            dt = max(0.0, timestamp - self._last_timestamp)
        self._last_timestamp = timestamp
        return self.advance(dt)

    def advance(self, dt: float) -> List[TickResult]:
        """
        Add `dt` seconds to the accumulator and run every tick that is due.

        The step duration is re-read before each tick so a level change takes
        effect on the very next check.
        """
        if self.simulation.run_state != RunState.RUNNING:
            self.reset()
            return []
        self._sync_run_epoch()

        if self.max_frame_delta is not None and dt > self.max_frame_delta:
            logger.debug(f"Clamping frame delta {dt:.3f}s to {self.max_frame_delta:.3f}s.")
            dt = self.max_frame_delta
        self.accumulator += dt

        results: List[TickResult] = []
        while self.accumulator >= self.simulation.step_duration:
            self.accumulator -= self.simulation.step_duration
            direction = self.controller.take_pending() if self.controller else None
            result = self.simulation.tick(direction)
            results.append(result)
            if self.simulation.run_state != RunState.RUNNING:
                self.reset()
                break
        return results
