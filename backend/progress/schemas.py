"""
Pydantic schemas for observations, derived analytics and achievement events.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


# ============ Observation Schemas ============

class WeightObservation(BaseModel):
    """One user-submitted body-weight reading."""
    weight: Decimal = Field(..., gt=0)
    date: date

    model_config = ConfigDict(frozen=True)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value):
        # Timestamps (and ISO strings carrying a time part) keep their calendar day
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class WeightUnit(str, Enum):
    LBS = "lbs"
    KG = "kg"


class Profile(BaseModel):
    """Profile values the achievement rules read. Any weight may be missing."""
    current_weight: Optional[float] = None
    goal_weight: Optional[float] = None
    start_weight: Optional[float] = None
    height_inches: Optional[float] = None
    weight_unit: WeightUnit = WeightUnit.LBS


# ============ Trend Schemas ============

class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class DayOfWeek(str, Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


class DayOfWeekStat(BaseModel):
    """Average day-over-day change for entries logged on one weekday."""
    day: DayOfWeek
    transitions: int
    average_change: float


class TrendSummary(BaseModel):
    """Derived statistics over a user's weight series."""
    total_entries: int = 0
    average_weekly_change: float = 0.0  # signed, positive = gain
    weekly_average: float = 0.0
    monthly_average: float = 0.0
    trend: TrendDirection = TrendDirection.STABLE
    streak: int = 0
    best_day: Optional[DayOfWeek] = None
    worst_day: Optional[DayOfWeek] = None
    day_of_week: List[DayOfWeekStat] = []


class GoalEstimate(BaseModel):
    """Rough time to reach the goal at the current weekly pace."""
    weeks: int
    label: str


class TrendInsightsResponse(BaseModel):
    summary: TrendSummary
    time_to_goal: Optional[GoalEstimate] = None
    message: str
    weight_unit: WeightUnit


# ============ Achievement Schemas ============

class AchievementKind(str, Enum):
    GOAL = "goal"
    MILESTONE = "milestone"
    STREAK = "streak"
    WEIGHT_LOSS = "weight-loss"


class AchievementEvent(BaseModel):
    """An achievement that just became satisfied."""
    id: str
    kind: AchievementKind
    title: str
    description: str
    milestone: Optional[int] = None
    fired_at: datetime


class CelebrationBurst(BaseModel):
    """One confetti burst a client can play for an achievement."""
    achievement_id: str
    particle_count: int = 100
    spread: int = 70
    origin_x: float = 0.5
    origin_y: float = 0.6
    colors: List[str] = []
    scalar: float = 1.0
    delay_ms: int = 0


class EvaluationResponse(BaseModel):
    fired: List[AchievementEvent]
    celebrations: List[CelebrationBurst] = []
