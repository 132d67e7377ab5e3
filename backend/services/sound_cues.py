"""
Sound cue dispatch.

Maps tick results to fire-and-forget sound cues. Playback is delegated to an
injected callable; any failure it raises (missing device, autoplay
restrictions, ...) is logged and ignored so the tick loop never stops.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from domain.game_state import TickOutcome, TickResult

logger = logging.getLogger(__name__)


class SoundCue(str, Enum):
    EAT = "eat"
    BONUS = "bonus"
    COLLISION = "collision"
    BONUS_SPAWN = "bonus_spawn"


def cues_for(result: TickResult) -> List[SoundCue]:
    """
    Return the cues a tick result should trigger, in play order.
    """
    cues: List[SoundCue] = []
    if result.outcome == TickOutcome.ATE_FOOD:
        cues.append(SoundCue.EAT)
    elif result.outcome == TickOutcome.ATE_BONUS:
        cues.append(SoundCue.BONUS)
    if result.game_over:
        # Also covers a run that ends on the tick it eats (board full)
        cues.append(SoundCue.COLLISION)

    if result.bonus_spawned:
        cues.append(SoundCue.BONUS_SPAWN)
    return cues


class SoundDispatcher:
    """
    Sends cues to a player callable.

    Args:
        play: callable taking a SoundCue. None disables sound.
        muted: when True, nothing is played.
    """

    def __init__(self, play: Optional[Callable[[SoundCue], None]] = None, muted: bool = False):
        self.play = play
        self.muted = muted

    def dispatch(self, result: TickResult) -> List[SoundCue]:
        """
        Play every cue for `result`.

        Returns:
            The cues that were played successfully.
        """
        if self.muted or self.play is None:
            return []

        played = []
        for cue in cues_for(result):
            try:
                self.play(cue)
                played.append(cue)
            except Exception as e:
                logger.warning(f"Failed to play sound '{cue.value}': {e}")
        return played
