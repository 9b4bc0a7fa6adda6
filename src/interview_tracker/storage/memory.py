"""In-memory document store for development and testing."""

import copy
import re
from collections import OrderedDict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from interview_tracker.storage.base import Document, DocumentStore, SortSpec
from interview_tracker.utils.logging import get_logger

logger = get_logger(__name__)

_MISSING = object()

_DATE_PARTS: Dict[str, Callable[[Any], int]] = {
    "$year": lambda d: d.year,
    "$month": lambda d: d.month,
}


def _normalize(value: Any) -> Any:
    """Store enums by value and detach nested containers from the caller."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_normalize(v) for v in value]
    return value


def _get_path(document: Document, path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _regex_matches(value: Any, pattern: "re.Pattern[str]") -> bool:
    if isinstance(value, list):
        return any(_regex_matches(v, pattern) for v in value)
    return isinstance(value, str) and pattern.search(value) is not None


def _equals(value: Any, expected: Any) -> bool:
    expected = _normalize(expected)
    if isinstance(expected, re.Pattern):
        return _regex_matches(value, expected)
    if isinstance(value, list) and not isinstance(expected, list):
        return expected in value
    if value is _MISSING:
        return expected is None
    return value == expected


def _compare(value: Any, bound: Any, op: Callable[[Any, Any], bool]) -> bool:
    if value is _MISSING or value is None:
        return False
    return op(value, _normalize(bound))


def _is_operator_dict(condition: Any) -> bool:
    return isinstance(condition, dict) and bool(condition) and all(k.startswith("$") for k in condition)


def _match_condition(value: Any, condition: Any) -> bool:
    if not _is_operator_dict(condition):
        return _equals(value, condition)

    for op, arg in condition.items():
        if op == "$eq":
            ok = _equals(value, arg)
        elif op == "$ne":
            ok = not _equals(value, arg)
        elif op == "$gt":
            ok = _compare(value, arg, lambda a, b: a > b)
        elif op == "$gte":
            ok = _compare(value, arg, lambda a, b: a >= b)
        elif op == "$lt":
            ok = _compare(value, arg, lambda a, b: a < b)
        elif op == "$lte":
            ok = _compare(value, arg, lambda a, b: a <= b)
        elif op == "$in":
            ok = any(_equals(value, candidate) for candidate in arg)
        elif op == "$nin":
            ok = not any(_equals(value, candidate) for candidate in arg)
        elif op == "$exists":
            ok = (value is not _MISSING) == bool(arg)
        elif op == "$regex":
            flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
            pattern = arg if isinstance(arg, re.Pattern) else re.compile(arg, flags)
            ok = _regex_matches(value, pattern)
        elif op == "$options":
            continue
        else:
            raise ValueError(f"Unsupported query operator: {op}")
        if not ok:
            return False
    return True


def matches(document: Document, filter: Document) -> bool:
    """Return True if ``document`` satisfies the Mongo-style ``filter``."""
    for key, condition in filter.items():
        if key == "$or":
            if not any(matches(document, sub) for sub in condition):
                return False
        elif key == "$and":
            if not all(matches(document, sub) for sub in condition):
                return False
        elif not _match_condition(_get_path(document, key), condition):
            return False
    return True


def _sort_documents(documents: List[Document], sort: SortSpec) -> List[Document]:
    result = list(documents)
    # Stable sorts applied from the least significant key
    for field, direction in reversed(list(sort)):
        def sort_key(doc: Document, field: str = field) -> Any:
            value = _get_path(doc, field)
            missing = value is _MISSING or value is None
            return (0, 0) if missing else (1, value)
        result.sort(key=sort_key, reverse=direction < 0)
    return result


def _evaluate(expression: Any, document: Document) -> Any:
    if isinstance(expression, str) and expression.startswith("$"):
        value = _get_path(document, expression[1:])
        return None if value is _MISSING else value
    if isinstance(expression, dict):
        if len(expression) == 1:
            op, arg = next(iter(expression.items()))
            if op in _DATE_PARTS:
                value = _evaluate(arg, document)
                return None if value is None else _DATE_PARTS[op](value)
            if op.startswith("$"):
                raise ValueError(f"Unsupported expression operator: {op}")
        return {k: _evaluate(v, document) for k, v in expression.items()}
    return expression


def _accumulate(op: str, values: List[Any]) -> Any:
    present = [v for v in values if v is not None]
    if op == "$sum":
        return sum(v for v in present if isinstance(v, (int, float)))
    if op == "$avg":
        numeric = [v for v in present if isinstance(v, (int, float))]
        return sum(numeric) / len(numeric) if numeric else None
    if op == "$max":
        return max(present) if present else None
    if op == "$min":
        return min(present) if present else None
    raise ValueError(f"Unsupported accumulator: {op}")


def _group(documents: List[Document], spec: Document) -> List[Document]:
    groups: "OrderedDict[Any, Dict[str, Any]]" = OrderedDict()
    accumulators = {field: acc for field, acc in spec.items() if field != "_id"}

    for doc in documents:
        group_id = _evaluate(spec["_id"], doc)
        key = _freeze(group_id)
        if key not in groups:
            groups[key] = {"_id": group_id, "values": {field: [] for field in accumulators}}
        for field, acc in accumulators.items():
            (_op, expr), = acc.items()
            groups[key]["values"][field].append(_evaluate(expr, doc))

    results = []
    for group in groups.values():
        row: Document = {"_id": group["_id"]}
        for field, acc in accumulators.items():
            (op, _expr), = acc.items()
            row[field] = _accumulate(op, group["values"][field])
        results.append(row)
    return results


class InMemoryDocumentStore(DocumentStore):
    """
    Document store kept in process memory.

    Documents are normalized (enums stored by value) and deep-copied on the
    way in and out, so callers never share state with the store.
    """

    def __init__(self):
        self._collections: Dict[str, List[Document]] = {}
        self.logger = logger.bind(component="memory_store")

    def _collection(self, name: str) -> List[Document]:
        return self._collections.setdefault(name, [])

    async def insert_one(self, collection: str, document: Document) -> Document:
        stored = _normalize(document)
        self._collection(collection).append(stored)
        self.logger.debug("Document inserted", collection=collection, document_id=stored.get("id"))
        return copy.deepcopy(stored)

    async def find_one(self, collection: str, filter: Document) -> Optional[Document]:
        for doc in self._collection(collection):
            if matches(doc, filter):
                return copy.deepcopy(doc)
        return None

    async def find(
        self,
        collection: str,
        filter: Document,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Document]:
        found = [doc for doc in self._collection(collection) if matches(doc, filter)]
        if sort:
            found = _sort_documents(found, sort)
        found = found[skip:]
        if limit is not None:
            found = found[:limit]
        return copy.deepcopy(found)

    async def count_documents(self, collection: str, filter: Document) -> int:
        return sum(1 for doc in self._collection(collection) if matches(doc, filter))

    async def aggregate(self, collection: str, pipeline: List[Document]) -> List[Document]:
        documents = copy.deepcopy(self._collection(collection))
        for stage in pipeline:
            (name, spec), = stage.items()
            if name == "$match":
                documents = [doc for doc in documents if matches(doc, spec)]
            elif name == "$group":
                documents = _group(documents, spec)
            elif name == "$sort":
                documents = _sort_documents(documents, list(spec.items()))
            else:
                raise ValueError(f"Unsupported aggregation stage: {name}")
        return documents

    async def replace_one(self, collection: str, filter: Document, document: Document) -> bool:
        docs = self._collection(collection)
        for index, doc in enumerate(docs):
            if matches(doc, filter):
                docs[index] = _normalize(document)
                return True
        return False

    async def update_one(self, collection: str, filter: Document, update: Document) -> Optional[Document]:
        changes = update.get("$set", {})
        for doc in self._collection(collection):
            if matches(doc, filter):
                doc.update(_normalize(changes))
                return copy.deepcopy(doc)
        return None

    async def delete_one(self, collection: str, filter: Document) -> bool:
        docs = self._collection(collection)
        for index, doc in enumerate(docs):
            if matches(doc, filter):
                del docs[index]
                return True
        return False
