"""Tests for the session activity log."""

from datetime import datetime, timedelta, timezone

import pytest

from interview_tracker.core.errors import ValidationError
from interview_tracker.core.models import ActivityAction, ActivityRecord
from interview_tracker.sessions.activity import ActivityLog
from interview_tracker.storage.base import ACTIVITY
from interview_tracker.storage.memory import InMemoryDocumentStore

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestActivityLog:
    """Test cases for ActivityLog recording and listing."""

    @pytest.fixture
    def store(self):
        return InMemoryDocumentStore()

    @pytest.fixture
    def activity_log(self, store):
        return ActivityLog(store, clock=lambda: NOW)

    async def insert_at(self, store, action, timestamp, user_id="user-1"):
        record = ActivityRecord(user_id=user_id, session_id="s1", action=action, timestamp=timestamp)
        await store.insert_one(ACTIVITY, record.model_dump())

    @pytest.mark.asyncio
    async def test_record_uses_clock(self, activity_log, store):
        record = await activity_log.record("user-1", "s1", ActivityAction.CREATED, {"role": "Data Scientist"})

        assert record.timestamp == NOW
        stored = await store.find_one(ACTIVITY, {"id": record.id})
        assert stored["action"] == "created"
        assert stored["details"] == {"role": "Data Scientist"}

    @pytest.mark.asyncio
    async def test_count_recent_uses_seven_day_window(self, activity_log, store):
        await self.insert_at(store, ActivityAction.CREATED, NOW - timedelta(days=1))
        await self.insert_at(store, ActivityAction.UPDATED, NOW - timedelta(days=7))
        await self.insert_at(store, ActivityAction.UPDATED, NOW - timedelta(days=8))
        await self.insert_at(store, ActivityAction.UPDATED, NOW, user_id="someone-else")

        assert await activity_log.count_recent("user-1") == 2
        assert await activity_log.count_recent("user-1", days=30) == 3

    @pytest.mark.asyncio
    async def test_list_newest_first_with_statistics(self, activity_log, store):
        await self.insert_at(store, ActivityAction.CREATED, NOW - timedelta(days=20))
        await self.insert_at(store, ActivityAction.UPDATED, NOW - timedelta(days=2))
        await self.insert_at(store, ActivityAction.UPDATED, NOW - timedelta(days=1))

        page = await activity_log.list_activities("user-1", page=1, limit=2)

        assert [a.timestamp for a in page.activities] == [NOW - timedelta(days=1), NOW - timedelta(days=2)]
        assert page.pagination.total == 3
        assert page.pagination.pages == 2
        assert page.statistics.total_activities == 3
        assert page.statistics.recent_activity_count == 2
        assert [(s.action, s.count) for s in page.statistics.action_stats] == [("updated", 2), ("created", 1)]

    @pytest.mark.asyncio
    async def test_filter_by_action_and_dates(self, activity_log, store):
        await self.insert_at(store, ActivityAction.CREATED, NOW - timedelta(days=20))
        await self.insert_at(store, ActivityAction.UPDATED, NOW - timedelta(days=10))
        await self.insert_at(store, ActivityAction.UPDATED, NOW - timedelta(days=1))

        page = await activity_log.list_activities(
            "user-1",
            action="updated",
            start_date=(NOW - timedelta(days=15)).replace(tzinfo=None),
            end_date=NOW - timedelta(days=5),
        )

        assert len(page.activities) == 1
        assert page.activities[0].timestamp == NOW - timedelta(days=10)

    @pytest.mark.asyncio
    async def test_invalid_action_rejected(self, activity_log):
        with pytest.raises(ValidationError):
            await activity_log.list_activities("user-1", action="exploded")

    @pytest.mark.asyncio
    async def test_invalid_pagination_rejected(self, activity_log):
        with pytest.raises(ValidationError):
            await activity_log.list_activities("user-1", page=0)

    @pytest.mark.asyncio
    async def test_empty_log(self, activity_log):
        page = await activity_log.list_activities("nobody")
        assert page.activities == []
        assert page.pagination.pages == 0
        assert page.statistics.action_stats == []
