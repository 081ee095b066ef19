"""
Insights endpoints.

- GET /api/users/{user_id}/insights/trends: weekly/monthly change, trend,
  streak, best/worst weekday, time to goal
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from .. import schemas
from ..analytics import analyze, time_to_goal, trend_message
from ..sources import fetch_observations, fetch_profile


router = APIRouter(prefix="/api/users/{user_id}/insights", tags=["Insights"])


@router.get("/trends", response_model=schemas.TrendInsightsResponse)
def get_trends(
    user_id: str,
    today: Optional[date] = Query(None, description="Day the streak counts back from (defaults to server date)"),
    db: Session = Depends(get_db),
):
    """
    Trend statistics for the user's weight history.

    - **today**: reference day for the logging streak
    """
    profile = fetch_profile(db, user_id)
    unit = profile.weight_unit.value
    entries = fetch_observations(db, user_id, weight_unit=unit)
    summary = analyze(entries, today=today or date.today())
    return schemas.TrendInsightsResponse(
        summary=summary,
        time_to_goal=time_to_goal(profile.current_weight, profile.goal_weight, summary.average_weekly_change),
        message=trend_message(summary, unit),
        weight_unit=profile.weight_unit,
    )
