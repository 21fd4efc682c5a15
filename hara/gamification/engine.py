"""
Gamification Engine

Owns the progression record and is its only writer. Two mutations exist:
``record_check_in`` and ``adjust_xp``. Both load the record, change it,
re-run the achievement evaluator and save exactly once.

Each read-modify-write holds a lock so concurrent callers sharing one
engine cannot lose a streak increment or an achievement grant. Callers
writing the same storage from separate processes need their own
single-writer arrangement.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from hara.gamification.achievement_system import (
    check_and_award_achievements,
    get_achievement_progress,
    get_recent_achievements,
)
from hara.gamification.progression_store import ProgressionStore
from hara.gamification.streak_system import update_streak
from hara.gamification.xp_system import calculate_level_from_xp, get_level_name
from hara.models.entry import EntryStats
from hara.models.progression import AchievementGrant, ProgressionRecord
from hara.storage.entry_store import EntryStore
from hara.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


def _coerce_xp(value: Any) -> int:
    """Non-numeric XP amounts count as 0"""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Ignoring non-numeric XP amount: {value!r}")
        return 0


class GamificationEngine:
    """
    XP, level, streak and achievement bookkeeping for one user/device

    Args:
        progression_store: Persistence for the progression record
        entry_store: Read-only source of entry statistics for achievements
        clock: Source of "now"; captured once per operation
        exact_achievements: Unlock only when a count equals its target
    """

    def __init__(
        self,
        progression_store: ProgressionStore,
        entry_store: EntryStore,
        clock: Optional[Clock] = None,
        exact_achievements: bool = False
    ):
        self.progression_store = progression_store
        self.entry_store = entry_store
        self.clock = clock or SystemClock()
        self.exact_achievements = exact_achievements
        self._lock = threading.Lock()

    def get_data(self) -> ProgressionRecord:
        """Current record with streak decay applied"""
        return self.progression_store.load(self.clock.today())

    def record_check_in(self, xp_award: int) -> ProgressionRecord:
        """
        Record one check-in worth ``xp_award`` XP

        Updates XP, check-in count and the daily streak, then unlocks any
        achievements the new state satisfies.
        """
        xp_award = _coerce_xp(xp_award)

        with self._lock:
            now = self.clock.now()
            today = now.date()
            record = self.progression_store.load(today)
            old_level = calculate_level_from_xp(record.total_xp)["level"]

            record.total_xp = max(0, record.total_xp + xp_award)
            record.total_checkins += 1

            streak = update_streak(record.current_streak, record.last_check_in_date, today)
            record.current_streak = streak["current_streak"]
            record.last_check_in_date = today

            check_and_award_achievements(
                record, self.entry_store.stats(), now, exact=self.exact_achievements
            )
            self.progression_store.save(record)

        logger.info(
            f"Recorded check-in +{xp_award} XP. Total: {record.total_xp} XP, "
            f"check-ins: {record.total_checkins}, streak: {record.current_streak}"
        )
        self._log_level_change(old_level, record.total_xp)
        return record

    def adjust_xp(self, delta: int) -> ProgressionRecord:
        """
        Add ``delta`` XP (may be negative), never going below 0

        Streak and check-in count are untouched; achievements are still
        re-evaluated.
        """
        delta = _coerce_xp(delta)

        with self._lock:
            now = self.clock.now()
            record = self.progression_store.load(now.date())
            old_level = calculate_level_from_xp(record.total_xp)["level"]

            new_total = record.total_xp + delta
            if new_total < 0:
                logger.info(f"XP adjustment {delta} clamped at 0 (was {record.total_xp})")
            record.total_xp = max(0, new_total)

            check_and_award_achievements(
                record, self.entry_store.stats(), now, exact=self.exact_achievements
            )
            self.progression_store.save(record)

        logger.info(f"Adjusted XP by {delta}. Total: {record.total_xp} XP")
        self._log_level_change(old_level, record.total_xp)
        return record

    def get_level_info(self, record: Optional[ProgressionRecord] = None) -> Dict[str, Any]:
        """
        Level display values for the current (or given) record

        Returns:
            {
                'total_xp': int,
                'level': int,
                'level_name': str,
                'current_level_xp': int,
                'next_level_xp': int,
                'progress_percent': float (clamped to 0-100)
            }
        """
        record = record or self.get_data()
        level_info = calculate_level_from_xp(record.total_xp)
        return {
            "total_xp": record.total_xp,
            "level": level_info["level"],
            "level_name": get_level_name(level_info["level"]),
            "current_level_xp": level_info["current_level_xp"],
            "next_level_xp": level_info["next_level_xp"],
            "progress_percent": min(max(level_info["progress_percent"], 0.0), 100.0),
        }

    def get_recent_achievements(self, limit: int = 3) -> List[AchievementGrant]:
        return get_recent_achievements(self.get_data(), limit)

    def get_achievement_progress(self) -> List[Dict[str, Any]]:
        return get_achievement_progress(self.get_data(), self.entry_stats())

    def entry_stats(self) -> EntryStats:
        return self.entry_store.stats()

    def reset(self) -> None:
        """Forget all progression (entries are left alone)"""
        with self._lock:
            self.progression_store.reset()

    def _log_level_change(self, old_level: int, total_xp: int) -> None:
        new_level = calculate_level_from_xp(total_xp)["level"]
        if new_level > old_level:
            logger.info(f"Leveled up from {old_level} to {new_level} ({get_level_name(new_level)})")
        elif new_level < old_level:
            logger.info(f"Dropped from level {old_level} to {new_level}")
