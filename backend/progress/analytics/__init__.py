"""
Weight analytics: trend statistics and achievement detection.
"""
from .trends import analyze, time_to_goal, trend_message
from .achievements import AchievementDetector, FiredAchievementStore, CelebrationPresenter

__all__ = [
    "analyze",
    "time_to_goal",
    "trend_message",
    "AchievementDetector",
    "FiredAchievementStore",
    "CelebrationPresenter",
]
