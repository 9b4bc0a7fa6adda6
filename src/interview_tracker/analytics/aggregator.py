"""Progress analytics over a user's interview sessions."""

import calendar
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from interview_tracker.analytics.insights import WEAKNESS_THRESHOLD, InsightGenerator
from interview_tracker.core.models import (
    AnalyticsReport,
    CategoryPerformance,
    GroupStat,
    Overview,
    ProgressPoint,
    RecentSession,
    RolePerformance,
    ScoreStats,
    SessionStatus,
    WeakCategory,
)
from interview_tracker.sessions.activity import ActivityLog, Clock, utc_now
from interview_tracker.storage.base import ASCENDING, DESCENDING, SESSIONS, DocumentStore
from interview_tracker.utils.logging import get_logger
from interview_tracker.utils.numbers import percentage, round_half_up

logger = get_logger(__name__)

PROGRESS_MONTHS = 6
RECENT_SESSION_DAYS = 30
RECENT_SESSION_LIMIT = 10
WEAK_CATEGORY_IMPROVEMENT = "Focus more on this area"


def subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping the day to the target month's length."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _group_stats(rows: List[Dict[str, Any]]) -> List[GroupStat]:
    return [GroupStat(key=row["_id"], avg_score=row["avg_score"], count=row["count"]) for row in rows]


class AnalyticsAggregator:
    """
    Reduces a user's sessions into an AnalyticsReport.

    Score statistics cover completed sessions only. Means stay unrounded until
    the report is assembled, so the insight rules see exact values.
    """

    def __init__(
        self,
        store: DocumentStore,
        activity_log: Optional[ActivityLog] = None,
        insight_generator: Optional[InsightGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.clock = clock or utc_now
        self.activity_log = activity_log or ActivityLog(store, clock=self.clock)
        self.insight_generator = insight_generator or InsightGenerator()
        self.logger = logger.bind(component="analytics_aggregator")

    async def compute_analytics(self, user_id: str) -> AnalyticsReport:
        """
        Compute the full analytics report for one user.

        Args:
            user_id: Owner of the sessions

        Returns:
            Overview, per-category and per-role performance, monthly progress,
            weak categories, recent sessions and textual insights
        """
        now = self.clock()
        completed_filter = {"user_id": user_id, "status": SessionStatus.COMPLETED.value}

        total = await self.store.count_documents(SESSIONS, {"user_id": user_id})
        completed = await self.store.count_documents(SESSIONS, completed_filter)

        score_stats = await self._score_stats(completed_filter)
        category_stats = await self._grouped(completed_filter, "$category", {"avg_score": DESCENDING, "_id": ASCENDING})
        role_stats = await self._grouped(completed_filter, "$role", {"count": DESCENDING, "_id": ASCENDING})
        progress = await self._progress(completed_filter, subtract_months(now, PROGRESS_MONTHS))
        recent_sessions = await self._recent_sessions(user_id, now - timedelta(days=RECENT_SESSION_DAYS))
        recent_activity = await self.activity_log.count_recent(user_id)

        weak_categories = [
            WeakCategory(
                category=stat.key,
                avg_score=round_half_up(stat.avg_score),
                improvement=WEAK_CATEGORY_IMPROVEMENT,
            )
            for stat in category_stats
            if stat.avg_score < WEAKNESS_THRESHOLD
        ]

        insights = self.insight_generator.generate_insights(
            total_interviews=total,
            completed_interviews=completed,
            score_stats=score_stats,
            category_stats=category_stats,
            role_stats=role_stats,
            weak_categories=weak_categories,
        )

        report = AnalyticsReport(
            overview=Overview(
                total_interviews=total,
                completed_interviews=completed,
                completion_rate=percentage(completed, total),
                avg_score=round_half_up(score_stats.avg_score) if score_stats else None,
                highest_score=round_half_up(score_stats.max_score) if score_stats else None,
                lowest_score=round_half_up(score_stats.min_score) if score_stats else None,
                recent_activity_count=recent_activity,
            ),
            category_performance=[
                CategoryPerformance(category=s.key, avg_score=round_half_up(s.avg_score), interviews_count=s.count)
                for s in category_stats
            ],
            role_performance=[
                RolePerformance(role=s.key, avg_score=round_half_up(s.avg_score), interviews_count=s.count)
                for s in role_stats
            ],
            progress_over_time=progress,
            weak_categories=weak_categories,
            recent_sessions=recent_sessions,
            insights=insights,
        )

        self.logger.info(
            "Analytics computed",
            user_id=user_id,
            total_interviews=total,
            completed_interviews=completed,
            weak_categories=len(weak_categories),
        )
        return report

    async def _score_stats(self, completed_filter: Dict[str, Any]) -> Optional[ScoreStats]:
        rows = await self.store.aggregate(SESSIONS, [
            {"$match": completed_filter},
            {"$group": {
                "_id": None,
                "avg_score": {"$avg": "$total_score"},
                "max_score": {"$max": "$total_score"},
                "min_score": {"$min": "$total_score"},
            }},
        ])
        if not rows:
            return None
        row = rows[0]
        return ScoreStats(avg_score=row["avg_score"], max_score=row["max_score"], min_score=row["min_score"])

    async def _grouped(
        self, completed_filter: Dict[str, Any], key: str, sort: Dict[str, int]
    ) -> List[GroupStat]:
        rows = await self.store.aggregate(SESSIONS, [
            {"$match": completed_filter},
            {"$group": {"_id": key, "avg_score": {"$avg": "$total_score"}, "count": {"$sum": 1}}},
            {"$sort": sort},
        ])
        return _group_stats(rows)

    async def _progress(self, completed_filter: Dict[str, Any], since: datetime) -> List[ProgressPoint]:
        rows = await self.store.aggregate(SESSIONS, [
            {"$match": {**completed_filter, "created_at": {"$gte": since}}},
            {"$group": {
                "_id": {"year": {"$year": "$created_at"}, "month": {"$month": "$created_at"}},
                "avg_score": {"$avg": "$total_score"},
                "count": {"$sum": 1},
            }},
            {"$sort": {"_id.year": ASCENDING, "_id.month": ASCENDING}},
        ])
        return [
            ProgressPoint(
                month=f"{row['_id']['year']:04d}-{row['_id']['month']:02d}",
                avg_score=round_half_up(row["avg_score"]),
                interviews_count=row["count"],
            )
            for row in rows
        ]

    async def _recent_sessions(self, user_id: str, since: datetime) -> List[RecentSession]:
        documents = await self.store.find(
            SESSIONS,
            {"user_id": user_id, "created_at": {"$gte": since}},
            sort=[("created_at", DESCENDING)],
            limit=RECENT_SESSION_LIMIT,
        )
        return [
            RecentSession(
                id=doc["id"],
                role=doc["role"],
                category=doc["category"],
                status=doc["status"],
                total_score=doc["total_score"],
                created_at=doc["created_at"],
            )
            for doc in documents
        ]
