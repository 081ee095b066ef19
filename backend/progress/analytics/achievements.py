"""
Achievement detection.

The detector is re-evaluated whenever its inputs change. Every rule is gated by
a fired-id store so each achievement fires at most once for the lifetime of
that store, no matter how often (or with what regressed values) evaluate runs.

Firing order within one pass: goal -> milestones ascending -> streak ->
weight-loss thresholds ascending.
"""
import logging
import threading
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Protocol, Set

from ..config import settings
from ..schemas import AchievementEvent, AchievementKind, WeightObservation

logger = logging.getLogger(__name__)

GOAL_ACHIEVED_ID = "goal-achieved"
STREAK_ID_TEMPLATE = "{days}-day-streak"


class CelebrationPresenter(Protocol):
    def present(self, event: AchievementEvent) -> None:
        ...


class FiredAchievementStore:
    """Key-presence set of achievement ids that already fired."""

    def __init__(self, fired: Optional[Iterable[str]] = None):
        self._fired: Set[str] = set(fired or [])
        self._lock = threading.Lock()

    def has(self, achievement_id: str) -> bool:
        return achievement_id in self._fired

    def add(self, achievement_id: str) -> None:
        with self._lock:
            self._fired.add(achievement_id)

    def claim(self, achievement_id: str) -> bool:
        """Record the id; False if it was already recorded."""
        with self._lock:
            if achievement_id in self._fired:
                return False
            self._fired.add(achievement_id)
            return True

    def __contains__(self, achievement_id: str) -> bool:
        return self.has(achievement_id)

    def __len__(self) -> int:
        return len(self._fired)


def _all_present(*values) -> bool:
    return all(v is not None for v in values)


def _as_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def has_full_streak(entries: Iterable[WeightObservation], today: date, days: int) -> bool:
    """True when each of the last `days` calendar days (ending today) has an entry."""
    logged = {e.date.isoformat() for e in entries}
    return all(
        (today - timedelta(days=i)).isoformat() in logged
        for i in range(days)
    )


def milestone_progress(start_weight: float, current_weight: float, goal_weight: float) -> Optional[float]:
    """Percent of the way from start to goal, or None when start == goal."""
    total_goal = abs(start_weight - goal_weight)
    if total_goal == 0:
        return None
    return abs(start_weight - current_weight) / total_goal * 100


def _fmt(value: float) -> str:
    return f"{value:g}"


class AchievementDetector:
    """
    Evaluates achievement rules and keeps the queue of visible achievements.

    - store: fired-id set; dismissing or clearing never removes ids from it
    - presenter: optional celebration collaborator notified on every firing
    """

    def __init__(
        self,
        store: Optional[FiredAchievementStore] = None,
        presenter: Optional[CelebrationPresenter] = None,
        goal_tolerance: Optional[float] = None,
        milestones: Optional[List[int]] = None,
        loss_thresholds: Optional[List[int]] = None,
        streak_days: Optional[int] = None,
    ):
        self.store = store if store is not None else FiredAchievementStore()
        self.presenter = presenter
        self.goal_tolerance = settings.goal_tolerance if goal_tolerance is None else goal_tolerance
        self.milestones = sorted(milestones if milestones is not None else settings.milestone_percents)
        self.loss_thresholds = sorted(
            loss_thresholds if loss_thresholds is not None else settings.weight_loss_thresholds
        )
        self.streak_days = settings.streak_goal_days if streak_days is None else streak_days
        self._visible: List[AchievementEvent] = []
        self._lock = threading.RLock()

    @property
    def achievements(self) -> List[AchievementEvent]:
        with self._lock:
            return list(self._visible)

    def evaluate(
        self,
        current_weight: Optional[float],
        goal_weight: Optional[float],
        start_weight: Optional[float],
        recent_entries: Optional[Iterable[WeightObservation]],
        weight_unit: str = "lbs",
        today: Optional[date] = None,
    ) -> List[AchievementEvent]:
        """Run every rule once and return the achievements newly fired by this pass."""
        if today is None:
            today = date.today()
        current_weight, goal_weight, start_weight = (
            _as_float(current_weight), _as_float(goal_weight), _as_float(start_weight)
        )
        entries = list(recent_entries or [])
        # Check-and-record of fired ids and the visible queue must not interleave
        with self._lock:
            return self._run_rules(current_weight, goal_weight, start_weight, entries, weight_unit, today)

    def _run_rules(self, current_weight, goal_weight, start_weight, entries, weight_unit, today):
        fired: List[AchievementEvent] = []

        # Goal
        if _all_present(current_weight, goal_weight, start_weight):
            if abs(current_weight - goal_weight) <= self.goal_tolerance:
                self._fire(fired, GOAL_ACHIEVED_ID, AchievementKind.GOAL,
                           "🎉 Goal Achieved!",
                           f"Congratulations! You've reached your goal weight of {_fmt(goal_weight)} {weight_unit}!")

        # Percentage milestones
        if _all_present(current_weight, goal_weight, start_weight):
            pct = milestone_progress(start_weight, current_weight, goal_weight)
            if pct is None:
                logger.debug("Start weight equals goal weight; skipping milestone rules")
            else:
                for milestone in self.milestones:
                    if pct >= milestone:
                        self._fire(fired, f"milestone-{milestone}", AchievementKind.MILESTONE,
                                   f"🌟 {milestone}% Milestone!",
                                   f"You're {milestone}% of the way to your goal! Keep up the amazing work!",
                                   milestone=milestone)

        # Logging streak
        if len(entries) >= self.streak_days and has_full_streak(entries, today, self.streak_days):
            self._fire(fired, STREAK_ID_TEMPLATE.format(days=self.streak_days), AchievementKind.STREAK,
                       f"🔥 {self.streak_days}-Day Streak!",
                       f"Congratulations on logging your weight for {self.streak_days} days straight!")

        # Cumulative weight loss
        if _all_present(current_weight, start_weight):
            loss = start_weight - current_weight
            for threshold in self.loss_thresholds:
                if loss >= threshold:
                    self._fire(fired, f"weight-loss-{threshold}", AchievementKind.WEIGHT_LOSS,
                               f"💪 {threshold} {weight_unit} Lost!",
                               f"Amazing progress! You've lost {threshold} {weight_unit}!")

        return fired

    def dismiss(self, achievement_id: str) -> bool:
        """Hide one visible achievement. Returns False if it wasn't visible."""
        with self._lock:
            before = len(self._visible)
            self._visible = [a for a in self._visible if a.id != achievement_id]
            return len(self._visible) != before

    def clear_all(self) -> None:
        with self._lock:
            self._visible = []

    def _fire(self, fired: List[AchievementEvent], achievement_id: str, kind: AchievementKind,
              title: str, description: str, milestone: Optional[int] = None) -> None:
        if not self.store.claim(achievement_id):
            return
        event = AchievementEvent(
            id=achievement_id,
            kind=kind,
            title=title,
            description=description,
            milestone=milestone,
            fired_at=datetime.now(timezone.utc),
        )
        self._visible.append(event)
        fired.append(event)
        logger.info(f"Achievement fired: {achievement_id}")
        if self.presenter is not None:
            try:
                self.presenter.present(event)
            except Exception:
                logger.exception(f"Celebration presenter failed for {achievement_id}")
