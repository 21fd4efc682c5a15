"""Global test fixtures and utilities for hara tests"""
import pytest
from datetime import datetime, timezone

from hara.gamification.engine import GamificationEngine
from hara.gamification.progression_store import ProgressionStore
from hara.models.entry import TapEntry
from hara.services.checkin_service import CheckInService
from hara.services.outcome_service import OutcomeService
from hara.storage.entry_store import EntryStore
from hara.storage.kv_store import InMemoryStore
from hara.utils.clock import FixedClock


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def frozen_now():
    """Fixed 'now' for deterministic date logic"""
    return datetime(2026, 10, 19, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(frozen_now):
    """Clock pinned to frozen_now"""
    return FixedClock(frozen_now)


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def memory_store():
    """Empty in-memory key-value store"""
    return InMemoryStore()


@pytest.fixture
def entry_store(memory_store):
    """Entry log on the in-memory store"""
    return EntryStore(memory_store)


@pytest.fixture
def progression_store(memory_store):
    """Progression record persistence on the in-memory store"""
    return ProgressionStore(memory_store)


@pytest.fixture
def make_entry(clock):
    """Factory for tap entries stamped with the current clock time"""
    def _make(**kwargs):
        kwargs.setdefault("timestamp", clock.now())
        return TapEntry(**kwargs)
    return _make


# ============================================================================
# Engine & Service Fixtures
# ============================================================================

@pytest.fixture
def engine(progression_store, entry_store, clock):
    """Gamification engine with threshold achievement semantics"""
    return GamificationEngine(progression_store, entry_store, clock)


@pytest.fixture
def checkin_service(entry_store, engine, clock):
    return CheckInService(entry_store, engine, clock)


@pytest.fixture
def outcome_service(entry_store, engine, clock, memory_store):
    return OutcomeService(entry_store, engine, clock, cache_store=memory_store)
