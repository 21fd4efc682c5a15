"""
XP and Leveling System

Pure level calculations over total XP; nothing here is persisted.

Leveling Curve (cumulative XP to reach each level):
- Level 1: 0
- Level 2: 100
- Level 3: 250
- Level 4: 500
- Level 5: 1000
- Level 6: 1750
- Level 7: 2750
- Level 8: 4000
- Level 9: 5500
- Level 10: 7500
- Level 11: 10000
- Beyond the table each level needs another 2000 XP

XP Award Rules:
- Check-in where the gut was honored: 10 XP
- Any other check-in: 5 XP
- Ignored gut with a bad logged outcome: -5 XP
- Achievement unlocks: 10-150 XP
"""

from typing import Any, Dict, Optional

LEVEL_THRESHOLDS = [0, 100, 250, 500, 1000, 1750, 2750, 4000, 5500, 7500, 10000]
OVERFLOW_LEVEL_XP = 2000

LEVEL_NAMES = [
    "The Listener",
    "The Aware",
    "The Seeker",
    "The Trusting",
    "The Intuitive",
    "The Aligned",
    "The Wise",
    "The Centered",
    "The Awakened",
    "The Master",
]

HONORED_CHECKIN_XP = 10
CHECKIN_XP = 5
BAD_OUTCOME_PENALTY = -5


def calculate_level_from_xp(total_xp: int) -> Dict[str, Any]:
    """
    Calculate level and progress from total XP

    ``progress_percent`` is not clamped; display code should clamp it
    to [0, 100].

    Returns:
        {
            'level': int,
            'current_level_xp': int,
            'next_level_xp': int,
            'progress_percent': float
        }
    """
    level = 1
    for index, threshold in enumerate(LEVEL_THRESHOLDS):
        if total_xp >= threshold:
            level = index + 1
        else:
            break

    current_level_xp = LEVEL_THRESHOLDS[level - 1]
    if level < len(LEVEL_THRESHOLDS):
        next_level_xp = LEVEL_THRESHOLDS[level]
    else:
        next_level_xp = current_level_xp + OVERFLOW_LEVEL_XP

    progress = (total_xp - current_level_xp) / (next_level_xp - current_level_xp) * 100

    return {
        "level": level,
        "current_level_xp": current_level_xp,
        "next_level_xp": next_level_xp,
        "progress_percent": progress,
    }


def get_level_name(level: int) -> str:
    """Flavor label for a level; levels past the table keep the last label"""
    if level < 1:
        return LEVEL_NAMES[0]
    if level > len(LEVEL_NAMES):
        return LEVEL_NAMES[-1]
    return LEVEL_NAMES[level - 1]


def get_xp_for_checkin(will_ignore: Optional[str]) -> int:
    """Honoring the gut (``will_ignore == "no"``) earns double XP"""
    return HONORED_CHECKIN_XP if will_ignore == "no" else CHECKIN_XP
