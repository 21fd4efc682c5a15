"""Unit tests for progression record persistence"""
import json
from datetime import date, datetime, timezone

from hara.gamification.progression_store import ProgressionStore
from hara.models.progression import AchievementGrant, ProgressionRecord
from hara.storage.kv_store import PROGRESSION_KEY, InMemoryStore

TODAY = date(2026, 10, 19)


def test_load_absent_returns_defaults(progression_store):
    """Test a missing record loads as all zeros"""
    record = progression_store.load(TODAY)

    assert record.total_xp == 0
    assert record.total_checkins == 0
    assert record.current_streak == 0
    assert record.last_check_in_date is None
    assert record.achievements == []


def test_load_corrupt_returns_defaults(memory_store):
    """Test unparseable data is treated as absent"""
    memory_store.set(PROGRESSION_KEY, "{not json")

    record = ProgressionStore(memory_store).load(TODAY)

    assert record == ProgressionRecord()


def test_load_negative_xp_returns_defaults(memory_store):
    """Test a record violating its invariants is treated as absent"""
    memory_store.set(PROGRESSION_KEY, json.dumps({"totalXP": -10, "totalCheckins": 1}))

    record = ProgressionStore(memory_store).load(TODAY)

    assert record.total_xp == 0


def test_save_then_load(progression_store):
    """Test a saved record loads back unchanged"""
    grant = AchievementGrant(
        id="first_listen",
        name="First Listen",
        description="Completed your first check-in",
        xp=10,
        unlocked_at=datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc),
        icon="Ear",
    )
    record = ProgressionRecord(
        total_xp=20,
        total_checkins=1,
        current_streak=1,
        last_check_in_date=TODAY,
        achievements=[grant],
    )

    progression_store.save(record)

    assert progression_store.load(TODAY) == record


def test_saved_layout_uses_camel_case(progression_store, memory_store):
    """Test the stored JSON keeps the app's field names"""
    progression_store.save(ProgressionRecord(total_xp=20, total_checkins=1, last_check_in_date=TODAY))

    stored = json.loads(memory_store.get(PROGRESSION_KEY))

    assert stored["totalXP"] == 20
    assert stored["totalCheckins"] == 1
    assert stored["currentStreak"] == 0
    assert stored["lastCheckInDate"] == "2026-10-19"
    assert stored["achievements"] == []


def test_load_legacy_date_string():
    """Test records written with a human readable date still load"""
    store = InMemoryStore({
        PROGRESSION_KEY: json.dumps({
            "totalXP": 55,
            "totalCheckins": 3,
            "currentStreak": 3,
            "lastCheckInDate": "Mon Oct 19 2026",
            "achievements": [],
        })
    })

    record = ProgressionStore(store).load(TODAY)

    assert record.last_check_in_date == TODAY
    assert record.current_streak == 3


def test_load_applies_decay_without_writing(progression_store, memory_store):
    """Test a lapsed streak reads as 0 but the stored value is kept"""
    progression_store.save(ProgressionRecord(total_checkins=4, current_streak=4, last_check_in_date=date(2026, 10, 15)))
    before = memory_store.get(PROGRESSION_KEY)

    record = progression_store.load(TODAY)

    assert record.current_streak == 0
    assert memory_store.get(PROGRESSION_KEY) == before


def test_load_keeps_yesterdays_streak(progression_store):
    """Test a streak from yesterday is still alive"""
    progression_store.save(ProgressionRecord(current_streak=2, last_check_in_date=date(2026, 10, 18)))

    assert progression_store.load(TODAY).current_streak == 2


def test_load_is_idempotent(progression_store):
    """Test repeated loads return equal records"""
    progression_store.save(ProgressionRecord(total_xp=40, current_streak=1, last_check_in_date=TODAY))

    assert progression_store.load(TODAY) == progression_store.load(TODAY)


def test_reset(progression_store, memory_store):
    """Test reset removes the stored record"""
    progression_store.save(ProgressionRecord(total_xp=40))

    progression_store.reset()

    assert memory_store.get(PROGRESSION_KEY) is None
    assert progression_store.load(TODAY).total_xp == 0
