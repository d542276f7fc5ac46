"""Persistence: the Store protocol and its implementations."""

from opendydns.store.base import AliasRecord, Store, UserRecord, normalize_email
from opendydns.store.memory import InMemoryStore
from opendydns.store.sql import SqlStore

__all__ = [
    "AliasRecord",
    "InMemoryStore",
    "SqlStore",
    "Store",
    "UserRecord",
    "normalize_email",
]
