"""
OutcomeService - Logging what happened after a decision

When an entry's outcome is logged the engine always re-evaluates
achievements. If the user ignored their gut and the outcome reads as bad,
a small XP penalty is applied. The bad-outcome check is a plain keyword
match; the engine only ever sees the resulting signed delta.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from hara.gamification.engine import GamificationEngine
from hara.gamification.xp_system import BAD_OUTCOME_PENALTY
from hara.models.entry import BaseEntry
from hara.models.progression import ProgressionRecord
from hara.storage.entry_store import EntryStore
from hara.storage.kv_store import ANALYSIS_CACHE_KEYS, KeyValueStore
from hara.utils.clock import Clock

logger = logging.getLogger(__name__)

BAD_OUTCOME_KEYWORDS = (
    "regret",
    "wrong",
    "mistake",
    "bad",
    "worse",
    "failed",
    "should have",
    "wish i",
    "disappointed",
    "upset",
    "stressed",
    "anxious",
    "uncomfortable",
    "wasn't right",
    "didn't work",
    "backfired",
    "poor choice",
    "went wrong",
)


def is_bad_outcome(text: str) -> bool:
    """True if the outcome text contains any bad-outcome keyword"""
    lowered = text.lower()
    return any(keyword in lowered for keyword in BAD_OUTCOME_KEYWORDS)


def outcome_xp_change(entry: BaseEntry, consequence: str) -> int:
    """XP delta for a logged outcome: a penalty only for an ignored gut that went badly"""
    if entry.will_ignore == "yes" and is_bad_outcome(consequence):
        return BAD_OUTCOME_PENALTY
    return 0


@dataclass
class OutcomeResult:
    """Result of logging an outcome"""
    entry: BaseEntry
    record: ProgressionRecord
    xp_change: int
    title: str
    message: str


class OutcomeService:
    """Service for logging and removing decision outcomes and entries"""

    def __init__(
        self,
        entry_store: EntryStore,
        engine: GamificationEngine,
        clock: Clock,
        cache_store: Optional[KeyValueStore] = None
    ):
        self.entry_store = entry_store
        self.engine = engine
        self.clock = clock
        self.cache_store = cache_store

    def log_consequence(self, index: int, consequence: str) -> OutcomeResult:
        """
        Attach an outcome to the entry at ``index``

        Raises:
            EntryNotFoundError: If there is no entry at ``index``
        """
        entry = self.entry_store.update_consequence(index, consequence, self.clock.now())
        xp_change = outcome_xp_change(entry, consequence)

        # A zero delta still re-evaluates achievements without counting a check-in
        record = self.engine.adjust_xp(xp_change)

        if xp_change < 0:
            logger.info(f"Bad outcome after ignored gut on entry {index}: {xp_change} XP")
            title = f"Lesson learned: {xp_change} XP"
            message = "Your gut was trying to protect you"
        else:
            title = "Outcome logged"
            message = "Your pattern is learning from this"

        return OutcomeResult(
            entry=entry,
            record=record,
            xp_change=xp_change,
            title=title,
            message=message,
        )

    def remove_consequence(self, index: int) -> BaseEntry:
        """Clear a logged outcome so it can be logged again"""
        return self.entry_store.clear_consequence(index)

    def remove_entry(self, index: int) -> BaseEntry:
        """Delete an entry and drop analyses computed from the old log"""
        removed = self.entry_store.remove(index)
        if self.cache_store is not None:
            for key in ANALYSIS_CACHE_KEYS:
                self.cache_store.delete(key)
        return removed
