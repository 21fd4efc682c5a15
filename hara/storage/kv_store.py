"""Local key-value persistence

Every piece of persisted state (progression record, entry log, cached
analyses) lives in a named slot holding a string. ``InMemoryStore`` backs
tests; ``JsonFileStore`` keeps all slots in one JSON file on disk.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from hara.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)

# Slot names
PROGRESSION_KEY = "gamification_data"
ENTRIES_KEY = "gutEntries"
CACHED_PATTERNS_KEY = "cachedPatterns"
CACHED_PATTERNS_TIME_KEY = "cachedPatternsTimestamp"
CACHED_TRUST_KEY = "cachedTrust"
CACHED_TRUST_TIME_KEY = "cachedTrustTime"
CACHED_SIGNALS_KEY = "cachedSignals"
CACHED_SIGNALS_TIME_KEY = "cachedSignalsTime"
CACHED_TONE_KEY = "cachedTone"
CACHED_TONE_TIME_KEY = "cachedToneTime"
LAST_DAILY_GUIDANCE_KEY = "lastDailyGuidance"

ANALYSIS_CACHE_KEYS = (
    CACHED_PATTERNS_KEY,
    CACHED_PATTERNS_TIME_KEY,
    CACHED_TRUST_KEY,
    CACHED_TRUST_TIME_KEY,
    CACHED_SIGNALS_KEY,
    CACHED_SIGNALS_TIME_KEY,
    CACHED_TONE_KEY,
    CACHED_TONE_TIME_KEY,
)


class KeyValueStore(Protocol):
    """Minimal string slot storage"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryStore:
    """Dict-backed store (not persisted)"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value
        logger.debug(f"Saved slot {key} to memory store")

    def delete(self, key: str) -> None:
        self._slots.pop(key, None)

    def clear(self) -> None:
        self._slots.clear()


class JsonFileStore:
    """All slots in a single JSON object file

    Writes go to a temp file that atomically replaces the original, so a
    crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise wrap_external_exception(e, operation="read_store", context={"path": str(self.path)})

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            logger.warning(f"Store file {self.path} is corrupt, treating as empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold an object, treating as empty")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, slots: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(slots, fh)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise wrap_external_exception(e, operation="write_store", context={"path": str(self.path)})

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        slots = self._read_all()
        slots[key] = value
        self._write_all(slots)
        logger.debug(f"Saved slot {key} to {self.path}")

    def delete(self, key: str) -> None:
        slots = self._read_all()
        if slots.pop(key, None) is not None:
            self._write_all(slots)

    def clear(self) -> None:
        self._write_all({})
        logger.info(f"Cleared all data in {self.path}")
