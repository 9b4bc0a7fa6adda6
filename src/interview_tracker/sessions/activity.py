"""Append-only activity log of session lifecycle events."""

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from interview_tracker.core.errors import ValidationError
from interview_tracker.core.models import (
    ActionStat,
    ActivityAction,
    ActivityPage,
    ActivityRecord,
    ActivityStatistics,
    Pagination,
)
from interview_tracker.storage.base import ACTIVITY, DESCENDING, DocumentStore
from interview_tracker.utils.logging import get_logger

logger = get_logger(__name__)

RECENT_ACTIVITY_DAYS = 7

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def check_pagination(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("Page must be at least 1", [{"field": "page", "value": page}])
    if limit < 1:
        raise ValidationError("Limit must be at least 1", [{"field": "limit", "value": limit}])


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class ActivityLog:
    """Records one entry per session lifecycle event. Entries are never changed."""

    def __init__(self, store: DocumentStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or utc_now
        self.logger = logger.bind(component="activity_log")

    async def record(
        self,
        user_id: str,
        session_id: str,
        action: ActivityAction,
        details: Optional[Dict[str, Any]] = None,
    ) -> ActivityRecord:
        entry = ActivityRecord(
            user_id=user_id,
            session_id=session_id,
            action=action,
            details=details or {},
            timestamp=self.clock(),
        )
        await self.store.insert_one(ACTIVITY, entry.model_dump())

        self.logger.info("Activity recorded", user_id=user_id, session_id=session_id, action=entry.action.value)
        return entry

    async def count_recent(self, user_id: str, days: int = RECENT_ACTIVITY_DAYS) -> int:
        """Count a user's activity records from the last ``days`` days."""
        since = self.clock() - timedelta(days=days)
        return await self.store.count_documents(ACTIVITY, {"user_id": user_id, "timestamp": {"$gte": since}})

    async def action_stats(self, user_id: str) -> List[ActionStat]:
        rows = await self.store.aggregate(ACTIVITY, [
            {"$match": {"user_id": user_id}},
            {"$group": {"_id": "$action", "count": {"$sum": 1}}},
            {"$sort": {"count": DESCENDING, "_id": 1}},
        ])
        return [ActionStat(action=row["_id"], count=row["count"]) for row in rows]

    async def list_activities(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 20,
        action: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> ActivityPage:
        """
        List a user's activity, newest first, with statistics.

        Args:
            user_id: Owner of the activity
            page: 1-based page number
            limit: Page size
            action: Optional action filter
            start_date: Optional inclusive lower bound on timestamp
            end_date: Optional inclusive upper bound on timestamp

        Returns:
            The requested page plus per-action counts and the 7-day count
        """
        check_pagination(page, limit)

        query: Dict[str, Any] = {"user_id": user_id}
        if action:
            try:
                query["action"] = ActivityAction(action).value
            except ValueError as e:
                raise ValidationError(f"Invalid action: {action}", [{"field": "action", "value": action}]) from e

        if start_date or end_date:
            query["timestamp"] = {}
            if start_date:
                query["timestamp"]["$gte"] = as_utc(start_date)
            if end_date:
                query["timestamp"]["$lte"] = as_utc(end_date)

        documents = await self.store.find(
            ACTIVITY,
            query,
            sort=[("timestamp", DESCENDING)],
            skip=(page - 1) * limit,
            limit=limit,
        )
        total = await self.store.count_documents(ACTIVITY, query)

        return ActivityPage(
            activities=[ActivityRecord.model_validate(doc) for doc in documents],
            pagination=build_pagination(page, limit, total),
            statistics=ActivityStatistics(
                action_stats=await self.action_stats(user_id),
                recent_activity_count=await self.count_recent(user_id),
                total_activities=total,
            ),
        )
