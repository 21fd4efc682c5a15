"""
InsightsService - AI pattern narration over the entry log

Sends structured summaries of recent check-ins to the gut coach gateway
(an external text-generation service) and caches the analyses until a
newer entry arrives. Nothing in the gamification engine depends on what
comes back.
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

import httpx

from hara.exceptions import GutCoachError, wrap_external_exception
from hara.models.entry import BaseEntry, TapEntry, VoiceEntry
from hara.resilience.retry import BASE_DELAY, MAX_RETRIES, retry_with_backoff
from hara.storage.entry_store import EntryStore
from hara.storage.kv_store import (
    ANALYSIS_CACHE_KEYS,
    CACHED_PATTERNS_KEY,
    CACHED_PATTERNS_TIME_KEY,
    CACHED_SIGNALS_KEY,
    CACHED_SIGNALS_TIME_KEY,
    CACHED_TONE_KEY,
    CACHED_TONE_TIME_KEY,
    CACHED_TRUST_KEY,
    CACHED_TRUST_TIME_KEY,
    LAST_DAILY_GUIDANCE_KEY,
    KeyValueStore,
)
from hara.utils.clock import Clock

logger = logging.getLogger(__name__)

MIN_ENTRIES_FOR_PATTERNS = 3
PATTERN_SAMPLE_SIZE = 10
GUIDANCE_SAMPLE_SIZE = 7


class GutCoachClient:
    """
    HTTP client for the gut coach gateway

    Each request posts ``{messages, type, userName}`` and retries
    transient failures with backoff.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_retries: int = MAX_RETRIES,
        retry_base_delay: float = BASE_DELAY
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = httpx.Timeout(timeout, connect=10.0)
        self.transport = transport
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    async def request(self, analysis_type: str, content: str, user_name: Optional[str] = None) -> httpx.Response:
        """
        Send one analysis request

        Raises:
            GutCoachError: On timeouts, HTTP errors or exhausted retries
        """
        payload: Dict[str, Any] = {
            "messages": [{"role": "user", "content": content}],
            "type": analysis_type,
        }
        if user_name:
            payload["userName"] = user_name

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async def _post_analysis() -> httpx.Response:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.base_url, json=payload, headers=headers)
                response.raise_for_status()
                return response

        try:
            response = await retry_with_backoff(
                _post_analysis,
                max_retries=self.max_retries,
                base_delay=self.retry_base_delay
            )
        except httpx.HTTPError as e:
            raise wrap_external_exception(
                e,
                operation=f"gut_coach_{analysis_type}",
                context={"url": self.base_url}
            )

        logger.debug(f"Gut coach answered {analysis_type} with {response.status_code}")
        return response

    async def analyze(self, analysis_type: str, content: str, user_name: Optional[str] = None) -> Any:
        """Request a structured (JSON) analysis"""
        response = await self.request(analysis_type, content, user_name)
        try:
            return response.json()
        except ValueError as e:
            raise GutCoachError(
                f"Gut coach returned non-JSON body for {analysis_type}",
                operation=f"gut_coach_{analysis_type}",
                cause=e
            )

    async def generate_text(self, analysis_type: str, content: str, user_name: Optional[str] = None) -> str:
        """Request free text"""
        response = await self.request(analysis_type, content, user_name)
        return response.text


def summarize_entries(entries: Sequence[BaseEntry], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Compact view of the most recent ``limit`` entries for the gateway"""
    selected = list(entries)[-limit:] if limit else list(entries)
    return [
        {
            "timestamp": entry.timestamp.isoformat(),
            "mode": entry.mode,
            "label": entry.label or entry.gut_feeling,
            "transcript": entry.narrative,
            "bodySensation": entry.body_sensation,
            "honored": entry.honored,
            "aiInsights": getattr(entry, "ai_insights", None),
        }
        for entry in selected
    ]


def summarize_trust(entries: Sequence[BaseEntry]) -> List[Dict[str, Any]]:
    """Honored flag, decision and outcome for every entry that answered the ignore question"""
    return [
        {
            "honored": entry.honored,
            "consequence": entry.consequence,
            "decision": entry.decision,
        }
        for entry in entries
        if entry.answered_ignore
    ]


def summarize_signals(entries: Sequence[BaseEntry]) -> List[Dict[str, Any]]:
    """Body sensation of each tap check-in with how trusting it turned out"""
    return [
        {
            "sensation": entry.body_sensation,
            "gutFeeling": entry.gut_feeling,
            "honored": entry.honored,
            "consequence": entry.consequence,
        }
        for entry in entries
        if isinstance(entry, TapEntry) and entry.body_sensation
    ]


def summarize_tone(entries: Sequence[BaseEntry]) -> List[Dict[str, Any]]:
    return [
        {
            "transcript": entry.transcript,
            "label": entry.label,
            "aiInsights": entry.ai_insights,
        }
        for entry in entries
        if isinstance(entry, VoiceEntry)
    ]


class InsightsService:
    """Service for AI pattern, trust, signal, tone and daily guidance analyses"""

    def __init__(
        self,
        entry_store: EntryStore,
        cache_store: KeyValueStore,
        client: GutCoachClient,
        clock: Clock
    ):
        self.entry_store = entry_store
        self.cache_store = cache_store
        self.client = client
        self.clock = clock

    async def get_patterns(self, user_name: str = "the user", refresh: bool = False) -> Optional[Any]:
        """
        2-3 patterns across recent check-ins

        Returns None until there are at least 3 entries.
        """
        entries = self.entry_store.get_all()
        if len(entries) < MIN_ENTRIES_FOR_PATTERNS:
            return None

        if not refresh:
            cached = self._read_cache(CACHED_PATTERNS_KEY, CACHED_PATTERNS_TIME_KEY, entries[-1].timestamp)
            if cached is not None:
                return cached

        summary = summarize_entries(entries, PATTERN_SAMPLE_SIZE)
        content = (
            f"Analyze {user_name}'s entries and return 2-3 patterns. "
            f"Return ONLY the JSON array, nothing else:\n\n{json.dumps(summary, indent=2)}"
        )
        patterns = await self.client.analyze("pattern_analysis", content, user_name)
        self._write_cache(CACHED_PATTERNS_KEY, CACHED_PATTERNS_TIME_KEY, patterns)
        return patterns

    async def get_trust_analysis(self, refresh: bool = False) -> Any:
        """
        How outcomes differ when the gut is honored vs ignored

        Returns ``{"insufficient": True}`` when no entry answered the
        ignore question.
        """
        entries = self.entry_store.get_all()
        summary = summarize_trust(entries)
        if not summary:
            return {"insufficient": True}

        if not refresh:
            cached = self._read_cache(CACHED_TRUST_KEY, CACHED_TRUST_TIME_KEY, entries[-1].timestamp)
            if cached is not None:
                return cached

        content = (
            "Analyze trust patterns - when user honors vs ignores gut:\n\n"
            f"{json.dumps(summary, indent=2)}"
        )
        analysis = await self.client.analyze("trust_analysis", content)
        self._write_cache(CACHED_TRUST_KEY, CACHED_TRUST_TIME_KEY, analysis)
        return analysis

    async def get_signals_analysis(self, refresh: bool = False) -> Any:
        """
        Which body sensations have been reliable signals

        Returns ``{"insufficient": True}`` until a tap check-in records a
        body sensation.
        """
        entries = self.entry_store.get_all()
        summary = summarize_signals(entries)
        if not summary:
            return {"insufficient": True}

        if not refresh:
            cached = self._read_cache(CACHED_SIGNALS_KEY, CACHED_SIGNALS_TIME_KEY, entries[-1].timestamp)
            if cached is not None:
                return cached

        content = (
            "Analyze these body sensations and their reliability:\n\n"
            f"{json.dumps(summary, indent=2)}"
        )
        analysis = await self.client.analyze("signals_analysis", content)
        self._write_cache(CACHED_SIGNALS_KEY, CACHED_SIGNALS_TIME_KEY, analysis)
        return analysis

    async def get_tone_analysis(self, refresh: bool = False) -> Any:
        """Tone patterns across voice check-ins; insufficient without any"""
        entries = self.entry_store.get_all()
        summary = summarize_tone(entries)
        if not summary:
            return {"insufficient": True}

        if not refresh:
            cached = self._read_cache(CACHED_TONE_KEY, CACHED_TONE_TIME_KEY, entries[-1].timestamp)
            if cached is not None:
                return cached

        content = f"Analyze voice tone patterns:\n\n{json.dumps(summary, indent=2)}"
        analysis = await self.client.analyze("tone_analysis", content)
        self._write_cache(CACHED_TONE_KEY, CACHED_TONE_TIME_KEY, analysis)
        return analysis

    async def get_daily_guidance(self, user_name: str = "you") -> str:
        """Personal guidance text from the last week of check-ins"""
        self.cache_store.set(LAST_DAILY_GUIDANCE_KEY, self.clock.today().isoformat())

        entries = self.entry_store.get_all()
        if entries:
            summary = summarize_entries(entries, GUIDANCE_SAMPLE_SIZE)
            content = (
                f"Provide personalized guidance based on {user_name}'s recent check-ins:\n\n"
                f"{json.dumps(summary, indent=2)}"
            )
        else:
            content = (
                f"{user_name} is just beginning their intuition journey. Provide welcoming "
                "guidance to help them start connecting with their gut feelings."
            )
        return await self.client.generate_text("daily_guidance", content, user_name)

    def has_seen_guidance_today(self) -> bool:
        last_seen = self.cache_store.get(LAST_DAILY_GUIDANCE_KEY)
        if not last_seen:
            return False
        try:
            return date.fromisoformat(last_seen) == self.clock.today()
        except ValueError:
            return False

    def invalidate_cache(self) -> None:
        for key in ANALYSIS_CACHE_KEYS:
            self.cache_store.delete(key)
        logger.debug("Cleared cached analyses")

    def _read_cache(self, key: str, time_key: str, latest_entry: datetime) -> Optional[Any]:
        """Cached analysis, if it was made after the newest entry"""
        cached = self.cache_store.get(key)
        cached_time = self.cache_store.get(time_key)
        if not cached or not cached_time:
            return None
        try:
            made_at = datetime.fromisoformat(cached_time)
            value = json.loads(cached)
        except ValueError:
            logger.warning(f"Discarding unreadable cache in slot {key}")
            return None
        if made_at.tzinfo is None or made_at < latest_entry:
            return None
        logger.debug(f"Using cached analysis from slot {key}")
        return value

    def _write_cache(self, key: str, time_key: str, value: Any) -> None:
        self.cache_store.set(key, json.dumps(value))
        self.cache_store.set(time_key, self.clock.now().isoformat())
