"""
Tests for the domain entities: Snake, GameState, TickResult and enums.
"""

import pytest
import json
import sys
import os
from collections import deque

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain import (
    UP, RIGHT,
    Snake,
    GameState,
    RunState,
    TickOutcome,
    TickResult,
    WallPolicy,
)


def make_state(**overrides):
    fields = dict(
        tick=3,
        snake=((2, 1), (1, 1)),
        direction=RIGHT,
        food=(3, 0),
        bonus=None,
        bonus_expires_at=None,
        score=2,
        high_score=9,
        level=1,
        moves_per_second=8.0,
        run_state=RunState.RUNNING,
        wall_policy=WallPolicy.WRAPPING,
        width=4,
        height=3,
    )
    fields.update(overrides)
    return GameState(**fields)


class TestSnake:
    """Tests for the Snake class."""

    def test_snake_initialization(self):
        snake = Snake([(5, 5), (4, 5)], RIGHT)
        assert list(snake.positions) == [(5, 5), (4, 5)]
        assert isinstance(snake.positions, deque)
        assert snake.alive is True
        assert snake.death_reason is None
        assert snake.death_tick is None

    def test_head_and_tail(self):
        snake = Snake([(5, 5), (4, 5), (3, 5)], RIGHT)
        assert snake.head == (5, 5)
        assert snake.tail == (3, 5)
        assert len(snake) == 3

    def test_empty_snake_rejected(self):
        with pytest.raises(ValueError):
            Snake([], RIGHT)

    def test_die_records_reason(self):
        snake = Snake([(5, 5)], UP)
        snake.die("wall", 10)
        assert snake.alive is False
        assert snake.death_reason == "wall"
        assert snake.death_tick == 10


class TestWallPolicy:

    @pytest.mark.parametrize("raw,expected", [
        ("blocking", WallPolicy.BLOCKING),
        ("WRAPPING", WallPolicy.WRAPPING),
        ("on", WallPolicy.BLOCKING),
        ("off", WallPolicy.WRAPPING),
        (" wrap ", WallPolicy.WRAPPING),
    ])
    def test_parse(self, raw, expected):
        assert WallPolicy.parse(raw) == expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            WallPolicy.parse("lava")


class TestGameState:
    """Tests for the GameState snapshot."""

    def test_print_board_markers(self):
        board = make_state(bonus=(0, 2)).print_board()
        lines = board.split("\n")
        assert lines[0] == " 0 . . . F"
        assert lines[1] == " 1 . o H ."
        assert lines[2] == " 2 B . . ."
        assert lines[3] == "   0 1 2 3"

    def test_to_dict_is_json_serializable(self):
        data = make_state(death_reason=None).to_dict()
        encoded = json.loads(json.dumps(data))
        assert encoded["snake"] == [[2, 1], [1, 1]]
        assert encoded["direction"] == "RIGHT"
        assert encoded["run_state"] == "running"
        assert encoded["wall_policy"] == "wrapping"
        assert encoded["bonus"] is None

    def test_step_duration(self):
        assert make_state(moves_per_second=10.0).step_duration == pytest.approx(0.1)

    def test_repr(self):
        text = repr(make_state())
        assert "tick=3" in text
        assert "score=2" in text


class TestTickResult:

    def test_ate_flags(self):
        assert TickResult(TickOutcome.ATE_FOOD, make_state()).ate
        assert TickResult(TickOutcome.ATE_BONUS, make_state()).ate
        assert not TickResult(TickOutcome.CONTINUED, make_state()).ate

    def test_game_over_from_outcome_or_state(self):
        assert TickResult(TickOutcome.GAME_OVER, make_state()).game_over
        finished = make_state(run_state=RunState.GAME_OVER, death_reason="board_full")
        assert TickResult(TickOutcome.ATE_FOOD, finished).game_over
        assert not TickResult(TickOutcome.CONTINUED, make_state()).game_over
