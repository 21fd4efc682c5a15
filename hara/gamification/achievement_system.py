"""
Achievement System

Static achievement definitions and the evaluator that unlocks them.

Each definition reads one metric and compares it against a target:
- checkins: total recorded check-ins
- streak: current daily streak
- decisions: entries with a tracked decision
- consequences: entries with a logged outcome
- honored: entries where the gut was honored

Features:
- Evaluation in a fixed order after every progression change
- One grant per achievement id, XP added exactly once
- Progress tracking for locked achievements
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List
import logging

from hara.models.entry import EntryStats
from hara.models.progression import AchievementGrant, ProgressionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementDefinition:
    """An unlockable achievement"""
    id: str
    name: str
    description: str
    xp: int
    icon: str
    metric: str
    target: int


# Evaluation order matters: grants are appended in this order
ACHIEVEMENTS = (
    AchievementDefinition(
        id="first_listen",
        name="First Listen",
        description="Completed your first check-in",
        xp=10,
        icon="Ear",
        metric="checkins",
        target=1,
    ),
    AchievementDefinition(
        id="streak_3",
        name="Consistent Listener",
        description="Maintained a 3-day check-in streak",
        xp=30,
        icon="Flame",
        metric="streak",
        target=3,
    ),
    AchievementDefinition(
        id="decision_tracker",
        name="Decision Tracker",
        description="Tracked your first decision",
        xp=30,
        icon="Target",
        metric="decisions",
        target=1,
    ),
    AchievementDefinition(
        id="pattern_master",
        name="Pattern Master",
        description="Logged outcomes for 5 decisions",
        xp=100,
        icon="Star",
        metric="consequences",
        target=5,
    ),
    AchievementDefinition(
        id="gut_honor",
        name="Gut Honor",
        description="Honored your gut feeling for the first time",
        xp=25,
        icon="Heart",
        metric="honored",
        target=1,
    ),
    AchievementDefinition(
        id="trust_builder",
        name="Trust Builder",
        description="Honored your gut 5 times",
        xp=50,
        icon="Shield",
        metric="honored",
        target=5,
    ),
    AchievementDefinition(
        id="intuition_master",
        name="Intuition Master",
        description="Honored your gut 15 times",
        xp=150,
        icon="Crown",
        metric="honored",
        target=15,
    ),
)


def get_metric_value(metric: str, record: ProgressionRecord, stats: EntryStats) -> int:
    """Current value of an achievement metric"""
    values = {
        "checkins": record.total_checkins,
        "streak": record.current_streak,
        "decisions": stats.decisions_tracked,
        "consequences": stats.consequences_logged,
        "honored": stats.honored_count,
    }
    return values.get(metric, 0)


def is_satisfied(definition: AchievementDefinition, value: int, exact: bool = False) -> bool:
    """
    Threshold semantics unlock once the value reaches the target, so a
    count that jumps past it (bulk edits, deleted entries re-added) still
    unlocks. Exact semantics require the value to equal the target.
    """
    if exact:
        return value == definition.target
    return value >= definition.target


def check_and_award_achievements(
    record: ProgressionRecord,
    stats: EntryStats,
    now: datetime,
    exact: bool = False
) -> List[AchievementGrant]:
    """
    Unlock every achievement whose condition now holds

    Mutates ``record``: grants are appended to ``record.achievements`` and
    their XP added to ``record.total_xp``. Achievements already present
    by id are skipped, so re-running never grants twice.

    Returns:
        List of newly unlocked grants (empty if none)
    """
    newly_unlocked = []

    for definition in ACHIEVEMENTS:
        # Skip if already unlocked
        if record.has_achievement(definition.id):
            continue

        value = get_metric_value(definition.metric, record, stats)
        if not is_satisfied(definition, value, exact):
            continue

        grant = AchievementGrant(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            xp=definition.xp,
            unlocked_at=now,
            icon=definition.icon,
        )
        record.achievements.append(grant)
        record.total_xp += definition.xp
        newly_unlocked.append(grant)

        logger.info(
            f"Unlocked achievement: {definition.id} "
            f"({definition.name}) +{definition.xp} XP"
        )

    return newly_unlocked


def get_achievement_progress(record: ProgressionRecord, stats: EntryStats) -> List[Dict[str, Any]]:
    """
    Progress toward every achievement, in definition order

    Returns:
        [
            {
                'id': str,
                'name': str,
                'description': str,
                'icon': str,
                'xp': int,
                'unlocked': bool,
                'progress': int,
                'target': int,
                'progress_percent': float (capped at 100)
            }
        ]
    """
    result = []
    for definition in ACHIEVEMENTS:
        value = get_metric_value(definition.metric, record, stats)
        result.append({
            "id": definition.id,
            "name": definition.name,
            "description": definition.description,
            "icon": definition.icon,
            "xp": definition.xp,
            "unlocked": record.has_achievement(definition.id),
            "progress": value,
            "target": definition.target,
            "progress_percent": min(value / definition.target * 100, 100),
        })
    return result


def get_recent_achievements(record: ProgressionRecord, limit: int = 3) -> List[AchievementGrant]:
    """Unlocked achievements, most recent first"""
    ordered = sorted(record.achievements, key=lambda grant: grant.unlocked_at, reverse=True)
    return ordered[:limit]
