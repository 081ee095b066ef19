"""
Read-side adapters over the hosted store.

The analytics only ever see fully materialized snapshots: observations and a
profile, already converted to the user's display unit.
"""
from __future__ import annotations
import logging
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import models
from .schemas import Profile, WeightObservation, WeightUnit
from .units import convert_weight

logger = logging.getLogger(__name__)

STORE_UNIT = "lbs"


def safe_float(val: Any) -> Optional[float]:
    try:
        if val is None:
            return None
        return float(val)
    except (TypeError, ValueError):
        return None


def parse_date_str(s: Any) -> Optional[date]:
    if s is None:
        return None
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    try:
        return date.fromisoformat(str(s))
    except ValueError:
        pass
    try:
        from dateutil import parser as _parser
        return _parser.parse(str(s)).date()
    except (ValueError, OverflowError):
        return None


def _display_unit(profile: Optional[models.Profile]) -> str:
    unit = (profile.weight_unit if profile is not None else None) or STORE_UNIT
    return unit if unit in (WeightUnit.LBS.value, WeightUnit.KG.value) else STORE_UNIT


def fetch_observations(db: Session, user_id: str, weight_unit: Optional[str] = None) -> List[WeightObservation]:
    """All weight entries for a user, unordered. Rows that can't be parsed are skipped."""
    if weight_unit is None:
        weight_unit = _display_unit(db.query(models.Profile).filter(models.Profile.user_id == user_id).first())
    rows = db.query(models.WeightEntry).filter(models.WeightEntry.user_id == user_id).all()
    out: List[WeightObservation] = []
    for row in rows:
        entry_date = parse_date_str(row.entry_date)
        weight = safe_float(row.weight)
        if entry_date is None or weight is None:
            logger.warning(f"Skipping malformed weight entry {row.id} for user {user_id}")
            continue
        try:
            out.append(WeightObservation(
                weight=round(convert_weight(weight, STORE_UNIT, weight_unit), 4),
                date=entry_date,
            ))
        except ValidationError as e:
            logger.warning(f"Skipping invalid weight entry {row.id} for user {user_id}: {e}")
    return out


def fetch_profile(db: Session, user_id: str) -> Profile:
    """Profile values in the user's display unit. Missing profile gives empty values."""
    row = db.query(models.Profile).filter(models.Profile.user_id == user_id).first()
    unit = _display_unit(row)
    if row is None:
        return Profile(weight_unit=unit)

    start_weight = safe_float(row.start_weight)
    if start_weight is None:
        # Fall back to the earliest logged weight
        entries = db.query(models.WeightEntry).filter(models.WeightEntry.user_id == user_id).all()
        dated = [
            (parse_date_str(e.entry_date), safe_float(e.weight)) for e in entries
        ]
        dated = [(d, w) for d, w in dated if d is not None and w is not None]
        if dated:
            start_weight = min(dated, key=lambda p: p[0])[1]

    return Profile(
        current_weight=convert_weight(safe_float(row.current_weight), STORE_UNIT, unit),
        goal_weight=convert_weight(safe_float(row.goal_weight), STORE_UNIT, unit),
        start_weight=convert_weight(start_weight, STORE_UNIT, unit),
        height_inches=safe_float(row.height_inches),
        weight_unit=unit,
    )
