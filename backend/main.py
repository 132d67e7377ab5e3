"""
Headless runner for Snake Evolution.

Drives a real-time game loop in the terminal: an autopilot player feeds the
InputController, the Scheduler ticks the Simulation at the level's rate, sound
cues go to the log, and the board is printed after every tick.
"""

import argparse
import json
import logging
import random
import time
from typing import Any, Callable, Dict, Optional

from config import GameConfig, load_config
from data_access import HighScoreStore, InMemoryHighScoreStore, SqliteHighScoreStore
from domain.game_state import RunState, WallPolicy
from input_controller import InputController
from players import AVAILABLE_VARIANTS, get_player_class
from scheduler import Scheduler
from services.sound_cues import SoundCue, SoundDispatcher
from simulation import Simulation

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60


def _log_cue(cue: SoundCue) -> None:
    logger.info(f"[sound] {cue.value}")


def run_game(
    config: GameConfig,
    store: Optional[HighScoreStore] = None,
    player_variant: Optional[str] = None,
    fps: int = DEFAULT_FPS,
    max_ticks: Optional[int] = None,
    seed: Optional[int] = None,
    render: bool = True,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """
    Runs a single game until the snake dies or max_ticks is reached.

    Args:
        config: Board size, tick rate, wall policy and bonus settings.
        store: High score store; defaults to an in-memory one.
        player_variant: Autopilot key (see players.AVAILABLE_VARIANTS).
        fps: Frame signals per second sent to the scheduler.
        max_ticks: Optional upper limit on simulation ticks.
        seed: Seed shared by the board and the autopilot.
        render: Print the board after every tick.
        clock, sleep: Time source and frame wait, injectable for tests.

    Returns:
        A dictionary summarizing the run.
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")

    rng = random.Random(seed)
    simulation = Simulation(
        width=config.width,
        height=config.height,
        wall_policy=config.wall_policy,
        high_score_store=store or InMemoryHighScoreStore(),
        rng=rng,
        bonus_enabled=config.bonus_enabled,
        tick_rate=config.tick_rate,
    )
    controller = InputController(simulation)
    scheduler = Scheduler(simulation, controller)
    sounds = SoundDispatcher(play=_log_cue)
    player = get_player_class(player_variant)(rng=random.Random(seed))

    frame_interval = 1.0 / fps
    ticks = 0

    controller.pause_or_restart()  # idle -> running

    while simulation.run_state == RunState.RUNNING:
        if max_ticks is not None and ticks >= max_ticks:
            logger.info(f"Stopping after {ticks} ticks.")
            break

        controller.propose(player.get_move(simulation.snapshot()))

        for result in scheduler.frame(clock()):
            ticks += 1
            sounds.dispatch(result)
            if result.new_high_score:
                logger.debug(f"New high score: {result.state.high_score}")
            if render:
                print("\n" + result.state.print_board())
                print(
                    f"Score: {result.state.score}  High: {result.state.high_score}  "
                    f"Level: {result.state.level}"
                )

        sleep(frame_interval)

    final = simulation.snapshot()
    if final.run_state == RunState.GAME_OVER:
        logger.info(f"Game Over: {final.death_reason}")

    return {
        "score": final.score,
        "high_score": final.high_score,
        "level": final.level,
        "ticks": final.tick,
        "length": len(final.snake),
        "run_state": final.run_state.value,
        "death_reason": final.death_reason,
        "wall_policy": final.wall_policy.value,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a headless Snake Evolution game driven by an autopilot."
    )
    parser.add_argument("--width", type=int, default=None,
                        help="Board width in cells (default from SNAKE_GRID_SIZE)")
    parser.add_argument("--height", type=int, default=None,
                        help="Board height in cells (default from SNAKE_GRID_SIZE)")
    parser.add_argument("--walls", choices=["on", "off"], default=None,
                        help="'on' ends the run at the border, 'off' wraps around. "
                             "Defaults to the stored preference.")
    parser.add_argument("--tick-rate", type=float, default=None,
                        help="Base moves per second")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS,
                        help="Frames per second driving the scheduler")
    parser.add_argument("--max-ticks", type=int, default=None,
                        help="Stop after this many ticks")
    parser.add_argument("--player", choices=AVAILABLE_VARIANTS, default=None,
                        help="Autopilot variant")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for a reproducible game")
    parser.add_argument("--no-bonus", action="store_true",
                        help="Disable the time-limited bonus item")
    parser.add_argument("--db-path", type=str, default=None,
                        help="SQLite file holding the high score")
    parser.add_argument("--no-persist", action="store_true",
                        help="Keep the high score in memory only")
    parser.add_argument("--quiet", action="store_true",
                        help="Do not print the board")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = load_config()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.width is not None:
        config.width = args.width
    if args.height is not None:
        config.height = args.height
    if args.tick_rate is not None:
        config.tick_rate = args.tick_rate
    if args.no_bonus:
        config.bonus_enabled = False
    if args.db_path:
        config.db_path = args.db_path
    # Re-run validation after CLI overrides
    config = GameConfig(**vars(config))

    if args.no_persist:
        store = InMemoryHighScoreStore()
    else:
        store = SqliteHighScoreStore(config.db_path)
        if args.walls is None:
            config.wall_policy = store.get_wall_policy(default=config.wall_policy)
    if args.walls is not None:
        config.wall_policy = WallPolicy.parse(args.walls)
        if isinstance(store, SqliteHighScoreStore):
            store.set_wall_policy(config.wall_policy)

    result = run_game(
        config,
        store=store,
        player_variant=args.player,
        fps=args.fps,
        max_ticks=args.max_ticks,
        seed=args.seed,
        render=not args.quiet,
    )

    print("\nGame Summary:")
    print(json.dumps(result, indent=2))
    return result


if __name__ == "__main__":
    main()
