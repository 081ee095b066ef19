"""
SQLAlchemy models for the tables this service reads.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func
from .database import Base


class Profile(Base):
    """Profile model matching the 'profiles' table."""
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), unique=True, index=True, nullable=False)
    current_weight = Column(Numeric)  # in lbs
    goal_weight = Column(Numeric)  # in lbs
    start_weight = Column(Numeric)  # in lbs, optional
    height_inches = Column(Numeric(5, 2))
    weight_unit = Column(String(3), default="lbs")  # display unit: lbs or kg
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Profile(user_id={self.user_id}, current={self.current_weight}, goal={self.goal_weight})>"


class WeightEntry(Base):
    """Weight entry model matching the 'weight_entries' table."""
    __tablename__ = "weight_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), index=True, nullable=False)
    entry_date = Column(String(32), nullable=False)  # ISO-8601 date
    weight = Column(Numeric, nullable=False)  # in lbs
    notes = Column(String)  # optional
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<WeightEntry(id={self.id}, user_id={self.user_id}, weight={self.weight})>"
