"""Pydantic models for check-in entries and progression records"""

from hara.models.entry import (
    BaseEntry,
    CheckInEntry,
    EntryStats,
    TapEntry,
    VoiceEntry,
    check_in_entry_adapter,
)
from hara.models.progression import AchievementGrant, ProgressionRecord

__all__ = [
    "BaseEntry",
    "CheckInEntry",
    "EntryStats",
    "TapEntry",
    "VoiceEntry",
    "check_in_entry_adapter",
    "AchievementGrant",
    "ProgressionRecord",
]
