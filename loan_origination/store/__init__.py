"""Record stores and the entity repository."""

from loan_origination.store.kv import InMemoryStore, JsonFileStore, KeyValueStore, build_store
from loan_origination.store.repository import LoanOriginationRepository

__all__ = ["InMemoryStore", "JsonFileStore", "KeyValueStore", "LoanOriginationRepository", "build_store"]
