"""Unit tests for Achievement System (hara/gamification/achievement_system.py)"""
import pytest
from datetime import datetime, timedelta, timezone

from hara.gamification.achievement_system import (
    ACHIEVEMENTS,
    check_and_award_achievements,
    get_achievement_progress,
    get_metric_value,
    get_recent_achievements,
    is_satisfied,
)
from hara.models.entry import EntryStats
from hara.models.progression import AchievementGrant, ProgressionRecord

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def _grant(achievement_id, unlocked_at=NOW, xp=10):
    return AchievementGrant(
        id=achievement_id,
        name=achievement_id.replace("_", " ").title(),
        description="",
        xp=xp,
        unlocked_at=unlocked_at,
        icon="Star",
    )


# ============================================================================
# Definition Tests
# ============================================================================

def test_definitions_order_and_rewards():
    """Test the seven achievements are evaluated in a fixed order"""
    assert [(a.id, a.xp, a.target) for a in ACHIEVEMENTS] == [
        ("first_listen", 10, 1),
        ("streak_3", 30, 3),
        ("decision_tracker", 30, 1),
        ("pattern_master", 100, 5),
        ("gut_honor", 25, 1),
        ("trust_builder", 50, 5),
        ("intuition_master", 150, 15),
    ]


def test_get_metric_value_reads_record_and_stats():
    """Test each metric maps to its counter"""
    record = ProgressionRecord(total_checkins=4, current_streak=2)
    stats = EntryStats(honored_count=3, decisions_tracked=2, consequences_logged=1)

    assert get_metric_value("checkins", record, stats) == 4
    assert get_metric_value("streak", record, stats) == 2
    assert get_metric_value("decisions", record, stats) == 2
    assert get_metric_value("consequences", record, stats) == 1
    assert get_metric_value("honored", record, stats) == 3
    assert get_metric_value("unknown", record, stats) == 0


def test_is_satisfied_threshold_and_exact():
    """Test threshold unlocks at or above target, exact only on target"""
    trust_builder = next(a for a in ACHIEVEMENTS if a.id == "trust_builder")

    assert not is_satisfied(trust_builder, 4)
    assert is_satisfied(trust_builder, 5)
    assert is_satisfied(trust_builder, 6)
    assert is_satisfied(trust_builder, 5, exact=True)
    assert not is_satisfied(trust_builder, 6, exact=True)


# ============================================================================
# Award Tests
# ============================================================================

def test_first_checkin_unlocks_first_listen():
    """Test first check-in unlocks first_listen and adds its XP"""
    record = ProgressionRecord(total_xp=5, total_checkins=1, current_streak=1)

    granted = check_and_award_achievements(record, EntryStats(), NOW)

    assert [g.id for g in granted] == ["first_listen"]
    assert record.total_xp == 15
    assert record.achievements[0].unlocked_at == NOW
    assert record.achievements[0].name == "First Listen"


def test_multiple_unlocks_follow_definition_order():
    """Test simultaneous unlocks are appended in definition order"""
    record = ProgressionRecord(total_xp=10, total_checkins=1, current_streak=1)
    stats = EntryStats(honored_count=1, decisions_tracked=1)

    granted = check_and_award_achievements(record, stats, NOW)

    assert [g.id for g in granted] == ["first_listen", "decision_tracker", "gut_honor"]
    assert record.total_xp == 10 + 10 + 30 + 25


def test_rerun_never_grants_twice():
    """Test evaluation is idempotent per achievement id"""
    record = ProgressionRecord(total_checkins=3, current_streak=3)
    check_and_award_achievements(record, EntryStats(), NOW)
    xp_after_first = record.total_xp

    granted = check_and_award_achievements(record, EntryStats(), NOW)

    assert granted == []
    assert record.total_xp == xp_after_first
    assert [g.id for g in record.achievements] == ["first_listen", "streak_3"]


def test_threshold_unlocks_after_jump_past_target():
    """Test a count that skipped the exact target still unlocks"""
    record = ProgressionRecord(total_checkins=10)
    stats = EntryStats(honored_count=7)

    granted = check_and_award_achievements(record, stats, NOW)

    assert "trust_builder" in [g.id for g in granted]
    assert "intuition_master" not in [g.id for g in granted]


def test_exact_mode_misses_jump_past_target():
    """Test exact mode only unlocks when the count equals the target"""
    record = ProgressionRecord(total_checkins=2)
    stats = EntryStats(honored_count=6)

    granted = check_and_award_achievements(record, stats, NOW, exact=True)

    assert [g.id for g in granted] == []


def test_existing_grant_is_left_untouched():
    """Test already unlocked achievements keep their original timestamp"""
    earlier = NOW - timedelta(days=3)
    record = ProgressionRecord(total_checkins=5, achievements=[_grant("first_listen", earlier)])

    check_and_award_achievements(record, EntryStats(), NOW)

    assert record.achievements[0].unlocked_at == earlier
    assert len([g for g in record.achievements if g.id == "first_listen"]) == 1


# ============================================================================
# Progress & Recent Tests
# ============================================================================

def test_get_achievement_progress():
    """Test progress reports value, target and capped percent"""
    record = ProgressionRecord(total_checkins=2, current_streak=2, achievements=[_grant("first_listen")])
    stats = EntryStats(honored_count=20, consequences_logged=2)

    progress = {p["id"]: p for p in get_achievement_progress(record, stats)}

    assert len(progress) == len(ACHIEVEMENTS)
    assert progress["first_listen"]["unlocked"] is True
    assert progress["first_listen"]["progress_percent"] == 100
    assert progress["streak_3"]["progress"] == 2
    assert progress["streak_3"]["progress_percent"] == pytest.approx(66.666, rel=1e-3)
    assert progress["pattern_master"]["progress_percent"] == pytest.approx(40.0)
    assert progress["intuition_master"]["progress_percent"] == 100
    assert progress["intuition_master"]["unlocked"] is False


def test_get_recent_achievements_newest_first():
    """Test recent achievements are sorted newest first and limited"""
    record = ProgressionRecord(achievements=[
        _grant("first_listen", NOW - timedelta(days=4)),
        _grant("streak_3", NOW - timedelta(days=1)),
        _grant("gut_honor", NOW - timedelta(days=3)),
        _grant("decision_tracker", NOW),
    ])

    recent = get_recent_achievements(record)

    assert [g.id for g in recent] == ["decision_tracker", "streak_3", "gut_honor"]
    assert len(get_recent_achievements(record, limit=10)) == 4
