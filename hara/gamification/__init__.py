"""
Gamification system for Hara

This module implements the progression engine behind gut check-ins:
- XP and leveling curve
- Daily check-in streak with read-time decay
- Achievement definitions and idempotent unlocking
- Progression record persistence
"""

from hara.gamification.xp_system import calculate_level_from_xp, get_level_name, get_xp_for_checkin
from hara.gamification.streak_system import update_streak, decayed_streak
from hara.gamification.achievement_system import (
    ACHIEVEMENTS,
    AchievementDefinition,
    check_and_award_achievements,
    get_achievement_progress,
    get_recent_achievements,
)
from hara.gamification.progression_store import ProgressionStore
from hara.gamification.engine import GamificationEngine

__all__ = [
    "calculate_level_from_xp",
    "get_level_name",
    "get_xp_for_checkin",
    "update_streak",
    "decayed_streak",
    "ACHIEVEMENTS",
    "AchievementDefinition",
    "check_and_award_achievements",
    "get_achievement_progress",
    "get_recent_achievements",
    "ProgressionStore",
    "GamificationEngine",
]
