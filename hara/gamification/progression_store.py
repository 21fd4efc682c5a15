"""
Progression Store

Reads and writes the single persisted ProgressionRecord.

Missing or unreadable data is not an error: it loads as an all-zero
record. Loading also applies streak decay as a read-time view only, so a
broken streak shows as 0 but is never written back by ``load``.
"""

import logging
from datetime import date

import pydantic

from hara.gamification.streak_system import decayed_streak
from hara.models.progression import ProgressionRecord
from hara.storage.kv_store import PROGRESSION_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class ProgressionStore:
    """Persistence for the progression record"""

    def __init__(self, store: KeyValueStore, key: str = PROGRESSION_KEY):
        self.store = store
        self.key = key

    def load(self, today: date) -> ProgressionRecord:
        """Load the record as seen on ``today``"""
        raw = self.store.get(self.key)
        if not raw:
            return ProgressionRecord()

        try:
            record = ProgressionRecord.model_validate_json(raw)
        except pydantic.ValidationError as e:
            logger.warning(f"Unreadable progression record in slot {self.key}, starting from defaults: {e}")
            return ProgressionRecord()

        streak = decayed_streak(record.current_streak, record.last_check_in_date, today)
        if streak != record.current_streak:
            logger.debug(
                f"Streak of {record.current_streak} lapsed "
                f"(last check-in {record.last_check_in_date}), showing 0"
            )
            record.current_streak = streak
        return record

    def save(self, record: ProgressionRecord) -> None:
        """Overwrite the persisted record"""
        self.store.set(self.key, record.to_storage())
        logger.debug(
            f"Saved progression: {record.total_xp} XP, {record.total_checkins} check-ins, "
            f"streak {record.current_streak}"
        )

    def reset(self) -> None:
        self.store.delete(self.key)
        logger.info("Progression record cleared")
