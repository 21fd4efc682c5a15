"""
Service Layer Package

Flows that sit on top of the gamification engine:
- CheckInService: tap and voice check-in submission
- OutcomeService: decision outcome logging and entry removal
- InsightsService: AI pattern, trust and guidance analyses
- trust: trust score and weekly statistics
"""

from hara.services.container import ServiceContainer, create_container
from hara.services.checkin_service import CheckInService, CheckInResult
from hara.services.outcome_service import OutcomeService, OutcomeResult, is_bad_outcome
from hara.services.insights_service import InsightsService, GutCoachClient
from hara.services.trust import trust_score, trust_message, week_stats

__all__ = [
    "ServiceContainer",
    "create_container",
    "CheckInService",
    "CheckInResult",
    "OutcomeService",
    "OutcomeResult",
    "is_bad_outcome",
    "InsightsService",
    "GutCoachClient",
    "trust_score",
    "trust_message",
    "week_stats",
]
