"""Filter state persistence and URL synchronisation."""

from storage.filter_state_store import FilterStateStore
from storage.persistence import InMemoryPersistence, JSONFilePersistence, PersistenceAdapter
from storage.query_string import InMemoryQueryString, QueryStringAdapter

__all__ = [
    "FilterStateStore",
    "InMemoryPersistence",
    "InMemoryQueryString",
    "JSONFilePersistence",
    "PersistenceAdapter",
    "QueryStringAdapter",
]
