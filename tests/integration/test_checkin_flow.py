"""
Integration tests for the check-in journey on a file-backed store

Covers a week of check-ins, outcome logging and app restarts, reading
everything back through fresh containers the way the app does on launch.
"""
import json
import pytest
from datetime import datetime, timezone

from hara.services.container import ServiceContainer
from hara.services.trust import trust_score, week_stats
from hara.storage.kv_store import ENTRIES_KEY, PROGRESSION_KEY, JsonFileStore
from hara.utils.clock import FixedClock


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "hara_store.json"


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc))


def _launch(store_path, clock):
    """Fresh container on the same file, as after an app restart"""
    return ServiceContainer(store=JsonFileStore(store_path), clock=clock)


def test_week_of_checkins_survives_restarts(store_path, clock):
    """Test progression and entries persist across restarts"""
    app = _launch(store_path, clock)
    app.checkin_service.submit_tap(gut_feeling="no", will_ignore="no", decision="Decline the loan")

    clock.advance(days=1)
    app = _launch(store_path, clock)
    app.checkin_service.submit_voice("Felt light about the trip", will_ignore="no")

    clock.advance(days=1)
    app = _launch(store_path, clock)
    result = app.checkin_service.submit_tap(gut_feeling="yes", will_ignore="yes", decision="Lend the car")

    assert [g.id for g in result.new_achievements] == ["streak_3"]
    # 10 + 10 + 30 + 25 | 10 | 5 + 30
    assert result.record.total_xp == 120
    assert result.leveled_up is True

    app = _launch(store_path, clock)
    outcome = app.outcome_service.log_consequence(2, "Car came back scratched, I regret it")

    assert outcome.xp_change == -5
    assert app.engine.get_data().total_xp == 115
    assert app.engine.get_level_info()["level_name"] == "The Aware"

    entries = app.entry_store.get_all()
    assert trust_score(entries) == 67
    assert week_stats(entries, clock.now()) == {"checkins": 3, "honored": 2, "decisions": 2}


def test_stored_layout(store_path, clock):
    """Test the file keeps each slot as a JSON string"""
    app = _launch(store_path, clock)
    app.checkin_service.submit_tap(gut_feeling="pause", will_ignore="not-sure")

    slots = json.loads(store_path.read_text())
    progression = json.loads(slots[PROGRESSION_KEY])
    entries = json.loads(slots[ENTRIES_KEY])

    assert progression["totalXP"] == 15
    assert progression["totalCheckins"] == 1
    assert progression["lastCheckInDate"] == "2026-10-19"
    assert progression["achievements"][0]["id"] == "first_listen"
    assert entries[0]["mode"] == "tap"
    assert entries[0]["willIgnore"] == "not-sure"


def test_streak_decays_after_absence(store_path, clock):
    """Test a streak shows 0 after missed days and restarts at 1"""
    app = _launch(store_path, clock)
    app.checkin_service.submit_tap(gut_feeling="no", will_ignore="no")
    clock.advance(days=1)
    app.checkin_service.submit_tap(gut_feeling="no", will_ignore="no")

    clock.advance(days=4)
    app = _launch(store_path, clock)

    assert app.engine.get_data().current_streak == 0
    assert json.loads(json.loads(store_path.read_text())[PROGRESSION_KEY])["currentStreak"] == 2

    result = app.checkin_service.submit_tap(gut_feeling="no", will_ignore="no")

    assert result.record.current_streak == 1


def test_clear_all_data(store_path, clock):
    app = _launch(store_path, clock)
    app.checkin_service.submit_tap(gut_feeling="no", will_ignore="no")

    app.clear_all_data()
    app = _launch(store_path, clock)

    assert app.engine.get_data().total_xp == 0
    assert app.entry_store.get_all() == []
