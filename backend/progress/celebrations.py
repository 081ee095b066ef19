"""
Celebration presenters notified by the achievement detector.

The detector never renders anything; a presenter decides what a celebration
looks like. ConfettiPresenter turns each achievement into confetti bursts the
client plays back, LoggingPresenter only records it.
"""
import logging
from typing import Dict, List

from .schemas import AchievementEvent, AchievementKind, CelebrationBurst

logger = logging.getLogger(__name__)

DEFAULT_COLORS = ["#FFD700", "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7"]
GOAL_COLORS = ["#FFD700", "#FFA500", "#FF69B4", "#00CED1", "#32CD32"]
MILESTONE_COLORS: Dict[int, List[str]] = {
    25: ["#FFD700", "#FFA500"],
    50: ["#4ECDC4", "#45B7D1"],
    75: ["#FF69B4", "#9B59B6"],
}
STREAK_COLORS = ["#FF6B6B", "#4ECDC4", "#45B7D1", "#FFD93D"]
WEIGHT_LOSS_COLORS = ["#00C851", "#FFD93D", "#FF6B6B"]


def bursts_for(event: AchievementEvent) -> List[CelebrationBurst]:
    """Build the confetti sequence for one achievement."""
    aid = event.id
    if event.kind == AchievementKind.GOAL:
        # Left, right, centre, then a final shower
        return [
            CelebrationBurst(achievement_id=aid, particle_count=50, spread=55, origin_x=0.25, origin_y=0.6,
                             colors=GOAL_COLORS, scalar=1.2, delay_ms=0),
            CelebrationBurst(achievement_id=aid, particle_count=50, spread=55, origin_x=0.75, origin_y=0.6,
                             colors=GOAL_COLORS, scalar=1.2, delay_ms=150),
            CelebrationBurst(achievement_id=aid, particle_count=100, spread=90, origin_x=0.5, origin_y=0.3,
                             colors=GOAL_COLORS, scalar=1.5, delay_ms=300),
            CelebrationBurst(achievement_id=aid, particle_count=150, spread=120, origin_x=0.5, origin_y=0.1,
                             colors=GOAL_COLORS, scalar=0.8, delay_ms=600),
        ]
    if event.kind == AchievementKind.MILESTONE:
        colors = MILESTONE_COLORS.get(event.milestone, STREAK_COLORS)
        return [CelebrationBurst(achievement_id=aid, particle_count=80, spread=60, colors=colors)]
    if event.kind == AchievementKind.STREAK:
        return [CelebrationBurst(achievement_id=aid, particle_count=150, spread=100, colors=STREAK_COLORS)]
    if event.kind == AchievementKind.WEIGHT_LOSS:
        return [CelebrationBurst(achievement_id=aid, particle_count=100, spread=80, colors=WEIGHT_LOSS_COLORS)]
    return [CelebrationBurst(achievement_id=aid, colors=DEFAULT_COLORS)]


class LoggingPresenter:
    """Presenter that only writes achievements to the log."""

    def present(self, event: AchievementEvent) -> None:
        logger.info(f"🎊 {event.title} ({event.id})")


class ConfettiPresenter:
    """Collects confetti bursts until the client drains them."""

    def __init__(self):
        self._pending: List[CelebrationBurst] = []

    def present(self, event: AchievementEvent) -> None:
        bursts = bursts_for(event)
        self._pending.extend(bursts)
        logger.debug(f"Queued {len(bursts)} confetti burst(s) for {event.id}")

    @property
    def pending(self) -> List[CelebrationBurst]:
        return list(self._pending)

    def drain(self) -> List[CelebrationBurst]:
        bursts, self._pending = self._pending, []
        return bursts
