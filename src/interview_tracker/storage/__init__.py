"""Document storage seam."""

from .base import (
    ACTIVITY,
    ASCENDING,
    DESCENDING,
    ROLES,
    SESSIONS,
    Document,
    DocumentStore,
)
from .memory import InMemoryDocumentStore, matches

__all__ = [
    "ACTIVITY",
    "ASCENDING",
    "DESCENDING",
    "ROLES",
    "SESSIONS",
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "matches",
]
