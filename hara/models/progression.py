"""Progression models for gamification"""
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Older records stored the day as a human readable string, e.g. "Mon Oct 19 2026"
LEGACY_DATE_FORMATS = ("%Y-%m-%d", "%a %b %d %Y")


class AchievementGrant(BaseModel):
    """An unlocked achievement"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str
    xp: int
    unlocked_at: datetime
    icon: str


class ProgressionRecord(BaseModel):
    """A user's XP, streak, check-in count and unlocked achievements"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_xp: int = Field(default=0, ge=0, alias="totalXP")
    total_checkins: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    last_check_in_date: Optional[date] = None
    achievements: List[AchievementGrant] = Field(default_factory=list)

    @field_validator("last_check_in_date", mode="before")
    @classmethod
    def _parse_stored_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if not isinstance(value, str):
            return value
        value = value.strip()
        if not value:
            return None
        for fmt in LEGACY_DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value

    def has_achievement(self, achievement_id: str) -> bool:
        return any(grant.id == achievement_id for grant in self.achievements)

    def to_storage(self) -> str:
        return self.model_dump_json(by_alias=True)
