"""
CheckInService - Check-in submission

Turns the answers collected by a tap or voice check-in into a typed
entry, appends it to the entry log and records it with the
gamification engine.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from hara.gamification.engine import GamificationEngine
from hara.gamification.xp_system import calculate_level_from_xp, get_xp_for_checkin
from hara.models.entry import BaseEntry
from hara.models.progression import AchievementGrant, ProgressionRecord
from hara.storage.entry_store import EntryStore, parse_entry
from hara.utils.clock import Clock

logger = logging.getLogger(__name__)


@dataclass
class CheckInResult:
    """Outcome of a submitted check-in"""
    entry: BaseEntry
    record: ProgressionRecord
    new_achievements: List[AchievementGrant] = field(default_factory=list)
    leveled_up: bool = False
    title: str = ""
    message: str = ""


class CheckInService:
    """
    Service for submitting check-ins.

    Responsibilities:
    - Entry construction and validation
    - XP award for the check-in (honored gut earns more)
    - Recording the check-in with the gamification engine
    """

    def __init__(self, entry_store: EntryStore, engine: GamificationEngine, clock: Clock):
        self.entry_store = entry_store
        self.engine = engine
        self.clock = clock

    def submit_tap(
        self,
        gut_feeling: Optional[str] = None,
        will_ignore: Optional[str] = None,
        decision: Optional[str] = None,
        context: Optional[str] = None,
        custom_note: Optional[str] = None,
        description: Optional[str] = None,
        body_sensation: Optional[str] = None,
    ) -> CheckInResult:
        """Submit a check-in answered with taps"""
        entry = parse_entry({
            "mode": "tap",
            "timestamp": self.clock.now(),
            "gut_feeling": gut_feeling,
            "will_ignore": will_ignore or "",
            "decision": decision,
            "context": context,
            "custom_note": custom_note,
            "description": description,
            "body_sensation": body_sensation,
            "xp": get_xp_for_checkin(will_ignore),
            "needs_follow_up": bool(decision and decision.strip()),
        })
        return self._submit(entry)

    def submit_voice(
        self,
        transcript: str,
        gut_feeling: Optional[str] = None,
        will_ignore: Optional[str] = None,
        label: Optional[str] = None,
        body_sensation: Optional[str] = None,
        wants_response: Optional[bool] = None,
        ai_insights: Optional[Any] = None,
    ) -> CheckInResult:
        """Submit a voice check-in from its transcript"""
        entry = parse_entry({
            "mode": "voice",
            "timestamp": self.clock.now(),
            "transcript": transcript,
            "gut_feeling": gut_feeling,
            "will_ignore": will_ignore or "",
            "label": label,
            "body_sensation": body_sensation,
            "wants_response": wants_response,
            "ai_insights": ai_insights,
            "xp": get_xp_for_checkin(will_ignore),
        })
        return self._submit(entry)

    def _submit(self, entry: BaseEntry) -> CheckInResult:
        before = self.engine.get_data()
        known_ids = {grant.id for grant in before.achievements}

        self.entry_store.append(entry)
        record = self.engine.record_check_in(entry.xp)

        new_achievements = [g for g in record.achievements if g.id not in known_ids]
        leveled_up = (
            calculate_level_from_xp(record.total_xp)["level"]
            > calculate_level_from_xp(before.total_xp)["level"]
        )

        logger.info(
            f"Submitted {entry.mode} check-in (+{entry.xp} XP, "
            f"{len(new_achievements)} new achievement(s))"
        )

        return CheckInResult(
            entry=entry,
            record=record,
            new_achievements=new_achievements,
            leveled_up=leveled_up,
            title=f"+{entry.xp} XP",
            message="Great choice honoring your gut!" if entry.honored else "You checked in.",
        )
