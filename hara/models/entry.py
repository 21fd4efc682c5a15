"""Check-in entry models

Entries are validated at the entry store boundary so everything downstream
works with one of two known shapes, told apart by ``mode``.

``will_ignore`` keeps an empty answer as ``""``: a check-in that showed the
question but got no answer still counts as a decision, unlike an entry that
never carried the field (``None``).
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

GutFeeling = Literal["yes", "no", "pause"]
WillIgnore = Literal["yes", "no", "not-sure", ""]

# Keys left out of blank normalization
DISCRIMINATOR_KEYS = ("mode",)
WILL_IGNORE_KEYS = ("will_ignore", "willIgnore")


class BaseEntry(BaseModel):
    """Fields shared by tap and voice check-ins"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: datetime
    gut_feeling: Optional[GutFeeling] = None
    will_ignore: Optional[WillIgnore] = None  # "no" means the gut was honored
    body_sensation: Optional[str] = None
    decision: Optional[str] = None
    consequence: Optional[str] = None
    consequence_date: Optional[datetime] = None
    xp: int = 0

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str) and not value.strip() and key not in DISCRIMINATOR_KEYS:
                value = "" if key in WILL_IGNORE_KEYS else None
            cleaned[key] = value
        return cleaned

    @field_validator("timestamp", "consequence_date")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def honored(self) -> bool:
        return self.will_ignore == "no"

    @property
    def answered_ignore(self) -> bool:
        """True when the entry carries a will-ignore answer, even an empty one"""
        return self.will_ignore is not None

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TapEntry(BaseEntry):
    """Structured check-in answered with taps"""
    mode: Literal["tap"] = "tap"
    context: Optional[str] = None
    custom_note: Optional[str] = None
    description: Optional[str] = None
    needs_follow_up: bool = False

    @property
    def label(self) -> Optional[str]:
        return self.gut_feeling

    @property
    def narrative(self) -> Optional[str]:
        return self.description


class VoiceEntry(BaseEntry):
    """Check-in recorded by voice; the transcript comes from an external service"""
    mode: Literal["voice"] = "voice"
    transcript: Optional[str] = None
    label: Optional[str] = None
    wants_response: Optional[bool] = None
    ai_insights: Optional[Any] = None

    @property
    def narrative(self) -> Optional[str]:
        return self.transcript


CheckInEntry = Annotated[Union[TapEntry, VoiceEntry], Field(discriminator="mode")]

check_in_entry_adapter: TypeAdapter = TypeAdapter(CheckInEntry)


@dataclass(frozen=True)
class EntryStats:
    """Counts derived from the entry log that achievements depend on"""
    honored_count: int = 0
    decisions_tracked: int = 0
    consequences_logged: int = 0

    @classmethod
    def from_entries(cls, entries: Iterable[BaseEntry]) -> "EntryStats":
        honored = decisions = consequences = 0
        for entry in entries:
            if entry.honored:
                honored += 1
            if entry.decision:
                decisions += 1
            if entry.consequence:
                consequences += 1
        return cls(
            honored_count=honored,
            decisions_tracked=decisions,
            consequences_logged=consequences,
        )
