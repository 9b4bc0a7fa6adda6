"""Document store interface consumed by the pipeline."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]

ASCENDING = 1
DESCENDING = -1

SESSIONS = "interview_sessions"
ACTIVITY = "activity_logs"
ROLES = "interview_roles"


class DocumentStore(ABC):
    """
    Minimal Mongo-style document store.

    Filters use Mongo query syntax (equality, ``$gte``/``$lte``/``$gt``/``$lt``,
    ``$in``, ``$ne``, ``$regex``, ``$or``). Aggregation pipelines support
    ``$match``, ``$group`` and ``$sort``.
    """

    @abstractmethod
    async def insert_one(self, collection: str, document: Document) -> Document:
        """Insert a document and return the stored copy."""

    @abstractmethod
    async def find_one(self, collection: str, filter: Document) -> Optional[Document]:
        """Return the first matching document or None."""

    @abstractmethod
    async def find(
        self,
        collection: str,
        filter: Document,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Return matching documents, sorted and paginated."""

    @abstractmethod
    async def count_documents(self, collection: str, filter: Document) -> int:
        """Count matching documents."""

    @abstractmethod
    async def aggregate(self, collection: str, pipeline: List[Document]) -> List[Document]:
        """Run an aggregation pipeline."""

    @abstractmethod
    async def replace_one(self, collection: str, filter: Document, document: Document) -> bool:
        """Replace the first matching document. Returns True if one matched."""

    @abstractmethod
    async def update_one(self, collection: str, filter: Document, update: Document) -> Optional[Document]:
        """Apply a ``$set`` update and return the updated document."""

    @abstractmethod
    async def delete_one(self, collection: str, filter: Document) -> bool:
        """Delete the first matching document. Returns True if one matched."""
