"""
Trend analytics over a user's weight series.

- analyze: weekly/monthly average change, short-term trend, logging streak,
  best/worst day of week
- time_to_goal: rough ETA at the current weekly pace
"""
import logging
import math
from datetime import date, timedelta
from statistics import mean
from typing import Iterable, List, Optional, Tuple

from ..config import settings
from ..schemas import (
    DayOfWeek,
    DayOfWeekStat,
    GoalEstimate,
    TrendDirection,
    TrendSummary,
    WeightObservation,
)

logger = logging.getLogger(__name__)

# Sunday-first, matching how the dashboard labels weekdays
DAY_NAMES = [
    DayOfWeek.SUNDAY,
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
]


# ---------------- Utilities ----------------
def _to_series(entries: Iterable[WeightObservation]) -> List[Tuple[date, float]]:
    # sorted() is stable, so same-day entries keep their input order
    points = [(e.date, float(e.weight)) for e in entries]
    return sorted(points, key=lambda p: p[0])


def _sunday_first(d: date) -> int:
    return (d.weekday() + 1) % 7  # date.weekday() is 0 Mon..6 Sun


def _weekly_changes(values: List[float]) -> List[float]:
    return [values[i] - values[i - 7] for i in range(7, len(values), 7)]


def _classify(values: List[float], window: int, threshold: float) -> TrendDirection:
    recent = values[-window:]
    if not recent:
        return TrendDirection.STABLE
    diff = recent[-1] - recent[0]
    if diff > threshold:
        return TrendDirection.INCREASING
    if diff < -threshold:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def logging_streak(dates: Iterable[date], today: date) -> int:
    """Consecutive days with at least one entry, counting back from today."""
    dates_set = set(dates)
    streak = 0
    cur = today
    while cur in dates_set:
        streak += 1
        cur = cur - timedelta(days=1)
    return streak


def _day_of_week_stats(series: List[Tuple[date, float]]) -> List[DayOfWeekStat]:
    acc = [[0.0, 0] for _ in range(7)]  # sum, n
    for (_, prev), (d, cur) in zip(series[:-1], series[1:]):
        idx = _sunday_first(d)
        acc[idx][0] += cur - prev
        acc[idx][1] += 1
    return [
        DayOfWeekStat(day=DAY_NAMES[i], transitions=n, average_change=s / n)
        for i, (s, n) in enumerate(acc) if n
    ]


def _rank_days(stats: List[DayOfWeekStat]) -> Tuple[Optional[DayOfWeek], Optional[DayOfWeek]]:
    best = worst = None
    best_change = math.inf
    worst_change = -math.inf
    # Strict comparisons: on ties the earlier day in the week wins
    for stat in stats:
        if stat.average_change < best_change:
            best_change = stat.average_change
            best = stat.day
        if stat.average_change > worst_change:
            worst_change = stat.average_change
            worst = stat.day
    return best, worst


# ---------------- Public API ----------------
def analyze(entries: Iterable[WeightObservation], today: Optional[date] = None) -> TrendSummary:
    """Derive a TrendSummary from observations in any order."""
    if today is None:
        today = date.today()
    series = _to_series(entries or [])
    if not series:
        return TrendSummary()

    dates = [d for d, _ in series]
    values = [v for _, v in series]

    weekly = _weekly_changes(values)
    average_weekly_change = mean(weekly) if weekly else 0.0

    stats = _day_of_week_stats(series)
    best_day, worst_day = _rank_days(stats)

    summary = TrendSummary(
        total_entries=len(series),
        average_weekly_change=average_weekly_change,
        weekly_average=abs(average_weekly_change),
        monthly_average=abs(average_weekly_change) * 4,
        trend=_classify(values, settings.trend_window, settings.stable_threshold),
        streak=logging_streak(dates, today),
        best_day=best_day,
        worst_day=worst_day,
        day_of_week=stats,
    )
    logger.debug(
        "Analyzed %d entries: trend=%s streak=%d avg_weekly=%.3f",
        summary.total_entries, summary.trend.value, summary.streak, average_weekly_change,
    )
    return summary


def time_to_goal(
    current_weight: Optional[float],
    goal_weight: Optional[float],
    average_weekly_change: float,
) -> Optional[GoalEstimate]:
    """Weeks to goal at the current pace; None when it can't be estimated."""
    if current_weight is None or goal_weight is None or not average_weekly_change:
        return None
    remaining = abs(float(current_weight) - float(goal_weight))
    weeks = math.ceil(remaining / abs(average_weekly_change))
    if weeks > 52:
        label = f"{math.ceil(weeks / 52)} years"
    elif weeks > 4:
        label = f"{math.ceil(weeks / 4)} months"
    else:
        label = f"{weeks} weeks"
    return GoalEstimate(weeks=weeks, label=label)


def trend_message(summary: TrendSummary, weight_unit: str) -> str:
    if summary.weekly_average > 0.1:
        direction = {
            TrendDirection.DECREASING: "losing",
            TrendDirection.INCREASING: "gaining",
        }.get(summary.trend, "maintaining")
        return f"You're {direction} {summary.weekly_average:.1f} {weight_unit}/week on average"
    return "Your weight is staying stable"
