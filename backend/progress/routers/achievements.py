"""
Achievement routes: evaluate rules, list, dismiss and clear visible achievements.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from ..database import get_db
from .. import schemas, sessions
from ..sources import fetch_observations, fetch_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users/{user_id}/achievements", tags=["Achievements"])


@router.post("/evaluate", response_model=schemas.EvaluationResponse)
def evaluate_achievements(
    user_id: str,
    today: Optional[date] = Query(None, description="Day the streak rule counts back from"),
    db: Session = Depends(get_db),
):
    """
    Re-run the achievement rules against the latest profile and entries.
    Returns only the achievements that fired in this pass, plus their confetti.
    """
    profile = fetch_profile(db, user_id)
    unit = profile.weight_unit.value
    entries = fetch_observations(db, user_id, weight_unit=unit)

    session = sessions.get_session(user_id)
    # Held across evaluate and drain so bursts stay with the request that fired them
    with session.lock:
        fired = session.detector.evaluate(
            current_weight=profile.current_weight,
            goal_weight=profile.goal_weight,
            start_weight=profile.start_weight,
            recent_entries=entries,
            weight_unit=unit,
            today=today or date.today(),
        )
        celebrations = session.presenter.drain()
    if fired:
        logger.info(f"User {user_id}: {len(fired)} new achievement(s)")
    return schemas.EvaluationResponse(fired=fired, celebrations=celebrations)


@router.get("", response_model=List[schemas.AchievementEvent])
def list_achievements(user_id: str):
    """Achievements fired this session that haven't been dismissed."""
    session = sessions.find_session(user_id)
    if session is None:
        return []
    return session.detector.achievements


@router.delete("/{achievement_id}", status_code=status.HTTP_204_NO_CONTENT)
def dismiss_achievement(user_id: str, achievement_id: str):
    """
    Hide one achievement. It stays recorded as fired and will not fire again.
    """
    session = sessions.find_session(user_id)
    dismissed = False
    if session is not None:
        with session.lock:
            dismissed = session.detector.dismiss(achievement_id)
    if not dismissed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Achievement not found"
        )
    return None


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_achievements(user_id: str):
    """Hide all visible achievements without resetting what already fired."""
    session = sessions.find_session(user_id)
    if session is not None:
        with session.lock:
            session.detector.clear_all()
    return None
