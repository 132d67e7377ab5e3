"""
Tests for scheduler.py - fixed-timestep accumulation.
"""

import pytest
import random
import sys
import os
from unittest.mock import Mock

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import UP, RIGHT, POINTS_PER_LEVEL
from domain.game_state import RunState, TickOutcome, WallPolicy
from input_controller import InputController
from scheduler import Scheduler
from simulation import Simulation


def make_loop(tick_rate=8, snake=None, direction=RIGHT, wall_policy=WallPolicy.WRAPPING,
              max_frame_delta=None, bonus_enabled=False):
    sim = Simulation(
        width=20,
        height=20,
        wall_policy=wall_policy,
        initial_snake=snake or [(5, 5), (4, 5), (3, 5)],
        initial_direction=direction,
        rng=random.Random(0),
        tick_rate=tick_rate,
        bonus_enabled=bonus_enabled,
    )
    sim.set_food((0, 19))
    sim.start()
    controller = InputController(sim)
    scheduler = Scheduler(sim, controller, max_frame_delta=max_frame_delta)
    return sim, controller, scheduler


class TestAdvance:
    """Scheduler.advance()"""

    def test_short_frame_runs_no_tick(self):
        sim, _, scheduler = make_loop(tick_rate=8)
        assert scheduler.advance(0.05) == []
        assert sim.tick_number == 0
        assert scheduler.accumulator == pytest.approx(0.05)

    def test_frames_accumulate_into_one_tick(self):
        sim, _, scheduler = make_loop(tick_rate=8)
        scheduler.advance(0.0625)
        results = scheduler.advance(0.0625)
        assert len(results) == 1
        assert sim.tick_number == 1
        assert scheduler.accumulator == pytest.approx(0.0)

    def test_long_frame_runs_several_ticks(self):
        sim, _, scheduler = make_loop(tick_rate=8)
        results = scheduler.advance(0.5)
        assert len(results) == 4
        assert sim.snake.head == (9, 5)

    def test_frame_delta_is_clamped(self):
        sim, _, scheduler = make_loop(tick_rate=8, max_frame_delta=0.25)
        results = scheduler.advance(10.0)
        assert len(results) == 2

    def test_buffered_direction_applied_at_tick(self):
        sim, controller, scheduler = make_loop(tick_rate=8)
        controller.propose(UP)
        scheduler.advance(0.125)
        assert sim.direction == UP
        assert controller.pending is None

    def test_buffered_direction_used_once_for_multi_tick_frame(self):
        sim, controller, scheduler = make_loop(tick_rate=8)
        controller.propose(UP)
        scheduler.advance(0.25)
        # Second tick keeps going UP with nothing new buffered
        assert sim.snake.head == (5, 3)

    def test_stops_ticking_on_game_over(self):
        sim, _, scheduler = make_loop(
            tick_rate=8, snake=[(18, 5), (17, 5)], wall_policy=WallPolicy.BLOCKING
        )
        results = scheduler.advance(1.0)
        assert results[-1].outcome == TickOutcome.GAME_OVER
        assert len(results) == 2
        assert sim.run_state == RunState.GAME_OVER
        assert scheduler.accumulator == 0.0

    def test_no_ticks_while_paused_and_accumulator_reset(self):
        sim, _, scheduler = make_loop(tick_rate=8)
        scheduler.advance(0.1)
        sim.toggle_pause()
        assert scheduler.advance(5.0) == []
        assert scheduler.accumulator == 0.0
        sim.toggle_pause()
        # Resume starts from zero: no burst of catch-up ticks
        assert scheduler.advance(0.1) == []
        assert sim.tick_number == 0

    def test_resume_without_paused_advance_resets_accumulator(self):
        sim, _, scheduler = make_loop(tick_rate=8)
        scheduler.advance(0.1)
        sim.toggle_pause()
        sim.toggle_pause()
        assert scheduler.advance(0.1) == []
        assert scheduler.accumulator == pytest.approx(0.1)

    def test_level_change_applies_on_next_check(self):
        sim, _, scheduler = make_loop(tick_rate=4, snake=[(0, 5)])
        old_step = sim.step_duration
        # Feed enough food for a level up, one tick at a time
        for _ in range(POINTS_PER_LEVEL):
            hx, hy = sim.snake.head
            sim.set_food((hx + 1, hy))
            scheduler.advance(old_step)
        assert sim.level == 2
        new_step = sim.step_duration
        assert new_step < old_step
        # Exactly one new step of time is enough for a tick now
        scheduler.accumulator = 0.0
        assert len(scheduler.advance(new_step)) == 1

    def test_works_without_controller(self):
        sim = Simulation(width=10, height=10, rng=random.Random(0), tick_rate=10)
        sim.start()
        scheduler = Scheduler(sim)
        assert len(scheduler.advance(0.25)) == 2


class TestFrame:
    """Scheduler.frame() with absolute timestamps."""

    def test_first_frame_counts_as_zero(self):
        sim, _, scheduler = make_loop(tick_rate=8)
        assert scheduler.frame(100.0) == []
        assert len(scheduler.frame(100.125)) == 1

    def test_resume_ignores_time_spent_paused(self):
        sim, _, scheduler = make_loop(tick_rate=8)
        scheduler.frame(0.0)
        sim.toggle_pause()
        scheduler.frame(0.1)
        sim.toggle_pause()
        assert scheduler.frame(60.0) == []
        assert sim.tick_number == 0
        assert len(scheduler.frame(60.125)) == 1

    def test_pause_and_resume_between_frames_drops_elapsed_time(self):
        """No frame arrives while paused; the resume must still reset the clock."""
        sim, controller, scheduler = make_loop(tick_rate=8)
        scheduler.frame(0.0)
        scheduler.frame(0.1)
        controller.pause_or_restart()
        controller.pause_or_restart()
        assert sim.run_state == RunState.RUNNING
        assert scheduler.frame(60.0) == []
        assert sim.tick_number == 0
        assert len(scheduler.frame(60.125)) == 1

    def test_restart_between_frames_drops_elapsed_time(self):
        sim, _, scheduler = make_loop(
            tick_rate=8, snake=[(18, 5), (17, 5)], wall_policy=WallPolicy.BLOCKING
        )
        scheduler.frame(0.0)
        scheduler.frame(0.1)
        sim.restart()
        assert scheduler.frame(30.0) == []
        assert sim.tick_number == 0

    def test_frame_calls_tick_through_simulation(self):
        sim = Mock()
        sim.run_state = RunState.RUNNING
        sim.step_duration = 0.5
        scheduler = Scheduler(sim, max_frame_delta=None)
        scheduler.frame(1.0)
        scheduler.frame(2.0)
        assert sim.tick.call_count == 2
        sim.tick.assert_called_with(None)
