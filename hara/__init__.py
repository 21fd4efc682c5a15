"""
Hara: gut-intuition journaling with a gamified progression engine

Check-ins are appended to a local entry log; every check-in feeds the
gamification engine (XP, levels, daily streaks, achievements) and the
trust score derived from how often the user honored their gut.
"""

__version__ = "0.1.0"
