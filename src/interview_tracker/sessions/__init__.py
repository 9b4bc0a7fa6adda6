"""Interview session lifecycle, scoring and activity log."""

from .activity import ActivityLog, build_pagination, check_pagination, utc_now
from .scoring import mean_score, recompute_score
from .service import SessionService

__all__ = [
    "ActivityLog",
    "SessionService",
    "build_pagination",
    "check_pagination",
    "mean_score",
    "recompute_score",
    "utc_now",
]
