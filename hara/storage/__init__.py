"""Local persistence: key-value slots and the check-in entry log"""

from hara.storage.kv_store import KeyValueStore, InMemoryStore, JsonFileStore
from hara.storage.entry_store import EntryStore, parse_entry

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "EntryStore",
    "parse_entry",
]
