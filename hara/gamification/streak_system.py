"""
Daily Check-In Streak System

A streak counts consecutive calendar days with at least one check-in.

Rules:
- First ever check-in starts the streak at 1
- Check-in the day after the last one extends it by 1
- Another check-in on the same day leaves it unchanged
- Any longer gap starts over at 1 (today counts as a fresh start)

On read, a streak whose last check-in is neither today nor yesterday is
shown as 0 without writing anything back.
"""

from typing import Any, Dict, Optional
from datetime import date, timedelta
import logging

logger = logging.getLogger(__name__)


def is_streak_alive(last_check_in_date: Optional[date], today: date) -> bool:
    """True when the last check-in was today or yesterday"""
    if last_check_in_date is None:
        return False
    return last_check_in_date in (today, today - timedelta(days=1))


def decayed_streak(current_streak: int, last_check_in_date: Optional[date], today: date) -> int:
    """Streak value to present on read, given the current date"""
    if current_streak > 0 and not is_streak_alive(last_check_in_date, today):
        return 0
    return current_streak


def update_streak(
    current_streak: int,
    last_check_in_date: Optional[date],
    today: date
) -> Dict[str, Any]:
    """
    Compute the streak after a check-in on ``today``

    A last check-in date later than today (clock moved backwards) is
    neither today nor yesterday, so it falls through to a reset.

    Returns:
        {
            'current_streak': int,
            'old_streak': int,
            'streak_broken': bool,
            'message': str
        }
    """
    old_streak = current_streak
    streak_broken = False

    # First check-in
    if last_check_in_date is None:
        new_streak = 1
        message = "Streak started! Day 1"

    # Consecutive day
    elif last_check_in_date == today - timedelta(days=1):
        new_streak = current_streak + 1
        message = f"Streak continues! Day {new_streak}"

    # Same day, already counted
    elif last_check_in_date == today:
        new_streak = current_streak
        message = f"Streak continues! Day {new_streak}"

    # Gap, or a date in the future
    else:
        new_streak = 1
        streak_broken = old_streak > 0
        gap_days = (today - last_check_in_date).days
        message = "Starting fresh! Day 1"
        logger.info(f"Streak reset from {old_streak} days, gap was {gap_days} days")

    return {
        "current_streak": new_streak,
        "old_streak": old_streak,
        "streak_broken": streak_broken,
        "message": message,
    }
