"""
Entry Store

Append-only log of check-in entries, kept as a JSON list in one slot.
The gamification engine only ever reads it; appends, removals and
consequence edits come from the check-in and outcome flows.
"""

import json
import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple

import pydantic

from hara.exceptions import EntryNotFoundError, ValidationError
from hara.models.entry import BaseEntry, EntryStats, check_in_entry_adapter
from hara.storage.kv_store import ENTRIES_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def _infer_mode(item: dict) -> dict:
    """Entries saved before ``mode`` was recorded are voice if they carry a transcript"""
    if item.get("mode"):
        return item
    inferred = "voice" if (item.get("transcript") or item.get("aiInsights")) else "tap"
    return {**item, "mode": inferred}


def parse_entry(item: Any) -> BaseEntry:
    """
    Validate raw entry data into a TapEntry or VoiceEntry

    Raises:
        ValidationError: If the data matches neither shape
    """
    if isinstance(item, BaseEntry):
        return item
    if not isinstance(item, dict):
        raise ValidationError("Entry must be an object", field="entry", value=type(item).__name__)
    try:
        return check_in_entry_adapter.validate_python(_infer_mode(item))
    except pydantic.ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ValidationError(
            first.get("msg", "Invalid check-in entry"),
            field=field,
            value=first.get("input"),
            cause=e
        )


class EntryStore:
    """
    Check-in log persisted in a key-value store

    Items that fail validation are hidden from reads but kept in the slot;
    writes edit the stored list in place so they survive.
    """

    def __init__(self, store: KeyValueStore, key: str = ENTRIES_KEY):
        self.store = store
        self.key = key

    def _load_raw(self) -> List[Any]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Entry log in slot {self.key} is not valid JSON, ignoring it")
            return []
        if not isinstance(data, list):
            logger.warning(f"Entry log in slot {self.key} is not a list, ignoring it")
            return []
        return data

    def _save(self, raw: List[Any]) -> None:
        self.store.set(self.key, json.dumps(raw))

    @staticmethod
    def _readable(raw: List[Any]) -> List[Tuple[int, BaseEntry]]:
        """Stored position and parsed entry for every item that validates"""
        readable = []
        for position, item in enumerate(raw):
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object entry at position {position}")
                continue
            try:
                readable.append((position, check_in_entry_adapter.validate_python(_infer_mode(item))))
            except pydantic.ValidationError as e:
                logger.warning(f"Skipping invalid entry at position {position}: {e.error_count()} error(s)")
        return readable

    def _locate(self, index: int) -> Tuple[List[Any], int, BaseEntry]:
        raw = self._load_raw()
        readable = self._readable(raw)
        self._check_index(readable, index)
        position, entry = readable[index]
        return raw, position, entry

    def get_all(self) -> List[BaseEntry]:
        """All valid entries in insertion order; invalid items are skipped"""
        return [entry for _, entry in self._readable(self._load_raw())]

    def get(self, index: int) -> BaseEntry:
        _, _, entry = self._locate(index)
        return entry

    def append(self, entry: Any) -> BaseEntry:
        """Validate and append one entry"""
        parsed = parse_entry(entry)
        raw = self._load_raw()
        raw.append(parsed.to_storage())
        self._save(raw)
        logger.debug(f"Appended {parsed.mode} entry, log now holds {len(raw)} item(s)")
        return parsed

    def remove(self, index: int) -> BaseEntry:
        raw, position, removed = self._locate(index)
        del raw[position]
        self._save(raw)
        logger.info(f"Removed entry {index} ({removed.mode})")
        return removed

    def update_consequence(self, index: int, consequence: str, when: datetime) -> BaseEntry:
        """Record the observed outcome of an entry's decision"""
        raw, position, entry = self._locate(index)
        updated = entry.model_copy(
            update={"consequence": consequence.strip() or None, "consequence_date": when}
        )
        raw[position] = updated.to_storage()
        self._save(raw)
        return updated

    def clear_consequence(self, index: int) -> BaseEntry:
        raw, position, entry = self._locate(index)
        updated = entry.model_copy(update={"consequence": None, "consequence_date": None})
        raw[position] = updated.to_storage()
        self._save(raw)
        return updated

    def clear(self) -> None:
        self.store.delete(self.key)
        logger.info("Cleared entry log")

    def stats(self) -> EntryStats:
        return EntryStats.from_entries(self.get_all())

    def latest_timestamp(self) -> Optional[datetime]:
        entries = self.get_all()
        return entries[-1].timestamp if entries else None

    @staticmethod
    def _check_index(readable: List[Any], index: int) -> None:
        if not 0 <= index < len(readable):
            raise EntryNotFoundError(
                f"No entry at index {index} (log holds {len(readable)})",
                index=index
            )
