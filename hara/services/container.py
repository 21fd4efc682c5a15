"""
Service Container - Dependency Injection Container

Wires the stores, clock, gamification engine and services together.
Services are lazy-loaded on first access.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from hara import config
from hara.storage.kv_store import JsonFileStore, KeyValueStore
from hara.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Infrastructure dependencies (store, clock, gateway client) are injected.
    Without a gateway client the insights service is unavailable.
    """

    store: KeyValueStore
    clock: Clock
    gut_coach_client: Optional[object] = None
    exact_achievements: bool = False

    _entry_store: Optional[object] = field(default=None, init=False, repr=False)
    _engine: Optional[object] = field(default=None, init=False, repr=False)
    _checkin_service: Optional[object] = field(default=None, init=False, repr=False)
    _outcome_service: Optional[object] = field(default=None, init=False, repr=False)
    _insights_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def entry_store(self):
        """Get EntryStore instance (lazy-loaded)"""
        if self._entry_store is None:
            from hara.storage.entry_store import EntryStore
            self._entry_store = EntryStore(self.store)
        return self._entry_store

    @property
    def engine(self):
        """Get GamificationEngine instance (lazy-loaded)"""
        if self._engine is None:
            from hara.gamification.engine import GamificationEngine
            from hara.gamification.progression_store import ProgressionStore
            self._engine = GamificationEngine(
                ProgressionStore(self.store),
                self.entry_store,
                self.clock,
                exact_achievements=self.exact_achievements
            )
            logger.debug("GamificationEngine instantiated")
        return self._engine

    @property
    def checkin_service(self):
        """Get CheckInService instance (lazy-loaded)"""
        if self._checkin_service is None:
            from hara.services.checkin_service import CheckInService
            self._checkin_service = CheckInService(self.entry_store, self.engine, self.clock)
            logger.debug("CheckInService instantiated")
        return self._checkin_service

    @property
    def outcome_service(self):
        """Get OutcomeService instance (lazy-loaded)"""
        if self._outcome_service is None:
            from hara.services.outcome_service import OutcomeService
            self._outcome_service = OutcomeService(
                self.entry_store,
                self.engine,
                self.clock,
                cache_store=self.store
            )
            logger.debug("OutcomeService instantiated")
        return self._outcome_service

    @property
    def insights_service(self):
        """Get InsightsService instance (lazy-loaded), or None without a gateway"""
        if self._insights_service is None and self.gut_coach_client is not None:
            from hara.services.insights_service import InsightsService
            self._insights_service = InsightsService(
                self.entry_store,
                self.store,
                self.gut_coach_client,
                self.clock
            )
            logger.debug("InsightsService instantiated")
        return self._insights_service

    def clear_all_data(self) -> None:
        """Wipe every slot; the next read starts from defaults"""
        self.store.clear()
        logger.info("All local data cleared")


def create_container() -> ServiceContainer:
    """Build a container from environment configuration"""
    config.validate_config()

    client = None
    if config.GUT_COACH_URL:
        from hara.services.insights_service import GutCoachClient
        client = GutCoachClient(
            config.GUT_COACH_URL,
            api_key=config.GUT_COACH_API_KEY,
            timeout=config.GUT_COACH_TIMEOUT
        )
    else:
        logger.info("GUT_COACH_URL not set, AI insights disabled")

    return ServiceContainer(
        store=JsonFileStore(config.store_path()),
        clock=SystemClock(config.get_timezone()),
        gut_coach_client=client,
        exact_achievements=config.ACHIEVEMENT_MATCH_MODE == "exact"
    )
