"""Unit tests for trust score and weekly statistics"""
import pytest
from datetime import datetime, timedelta, timezone

from hara.models.entry import TapEntry
from hara.services.trust import trust_message, trust_score, week_stats
from hara.storage.entry_store import parse_entry

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def _entry(will_ignore=None, decision=None, days_ago=0):
    return TapEntry(timestamp=NOW - timedelta(days=days_ago), will_ignore=will_ignore, decision=decision)


# ============================================================================
# Trust Score Tests
# ============================================================================

def test_trust_score_empty():
    """Test no entries gives 0"""
    assert trust_score([]) == 0


def test_trust_score_without_answers():
    """Test entries without a will-ignore answer do not count"""
    assert trust_score([_entry(), _entry()]) == 0


def test_trust_score_three_of_five():
    """Test 3 honored out of 5 answered gives 60"""
    entries = [
        _entry("no"), _entry("no"), _entry("no"),
        _entry("yes"), _entry("not-sure"),
        _entry(None),
    ]

    assert trust_score(entries) == 60


def test_trust_score_counts_empty_answers():
    """Test stored check-ins with an empty will-ignore answer count as decisions"""
    raw = [
        {"mode": "tap", "timestamp": NOW.isoformat(), "willIgnore": answer}
        for answer in ("no", "no", "no", "", "")
    ]
    raw.append({"mode": "tap", "timestamp": NOW.isoformat()})

    entries = [parse_entry(item) for item in raw]

    assert trust_score(entries) == 60


def test_trust_score_rounds_half_up():
    """Test scores are rounded to the nearest integer"""
    assert trust_score([_entry("no"), _entry("yes"), _entry("yes")]) == 33
    assert trust_score([_entry("no"), _entry("no"), _entry("yes")]) == 67


@pytest.mark.parametrize("score,expected_start", [
    (100, "You're honoring"),
    (70, "You're honoring"),
    (69, "You're building"),
    (40, "You're building"),
    (39, "Every time"),
    (1, "Every time"),
    (0, "Start tracking"),
])
def test_trust_message_bands(score, expected_start):
    """Test each score band gets its message"""
    assert trust_message(score).startswith(expected_start)


# ============================================================================
# Week Stats Tests
# ============================================================================

def test_week_stats_counts_last_seven_days():
    """Test only the last 7 days are counted"""
    entries = [
        _entry("no", decision="Rest", days_ago=0),
        _entry("yes", days_ago=3),
        _entry("no", days_ago=6),
        _entry("no", decision="Old", days_ago=8),
    ]

    stats = week_stats(entries, NOW)

    assert stats == {"checkins": 3, "honored": 2, "decisions": 1}
