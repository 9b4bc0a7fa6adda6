"""Core data models for Interview Tracker."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model that serializes with camelCase aliases and accepts both forms."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionCategory(str, Enum):
    """Category of a single answered question."""
    TECHNICAL = "Technical"
    BEHAVIORAL = "Behavioral"
    SYSTEM_DESIGN = "System Design"
    DSA = "DSA"
    GENERAL = "General"


class SessionCategory(str, Enum):
    """Category of a whole interview session."""
    TECHNICAL = "Technical"
    BEHAVIORAL = "Behavioral"
    SYSTEM_DESIGN = "System Design"
    DSA = "DSA"
    MIXED = "Mixed"


class Difficulty(str, Enum):
    """Question difficulty."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class SessionStatus(str, Enum):
    """Lifecycle status of an interview session."""
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class JobRole(str, Enum):
    """Job roles a user can practice for."""
    FRONTEND_DEVELOPER = "Frontend Developer"
    BACKEND_DEVELOPER = "Backend Developer"
    FULL_STACK_DEVELOPER = "Full Stack Developer"
    DEVOPS_ENGINEER = "DevOps Engineer"
    DATA_SCIENTIST = "Data Scientist"
    PRODUCT_MANAGER = "Product Manager"
    UI_UX_DESIGNER = "UI/UX Designer"
    SOFTWARE_ENGINEER = "Software Engineer"


class ActivityAction(str, Enum):
    """Session lifecycle events recorded in the activity log."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    COMPLETED = "completed"
    STARTED = "started"


class EvaluationSource(str, Enum):
    """Which evaluator produced a result."""
    AI = "ai"
    HEURISTIC = "heuristic"


class QuestionEvaluation(CamelModel):
    """One answered, scored question inside a session."""
    model_config = ConfigDict(frozen=True)

    question_text: str = Field(..., min_length=1, description="Question as asked")
    user_answer: str = Field(..., min_length=1, description="Candidate's answer")
    score: int = Field(..., ge=0, le=100, description="Score (0-100)")
    feedback: str = Field(..., min_length=1, description="Feedback on the answer")
    category: QuestionCategory = Field(..., description="Question category")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Question difficulty")


class SessionInsights(CamelModel):
    """Qualitative summary attached to a completed session."""
    strengths: List[str] = Field(default_factory=list, description="Categories answered well")
    weaknesses: List[str] = Field(default_factory=list, description="Categories needing work")
    recommendations: List[str] = Field(default_factory=list, description="Practice tips")
    overall_feedback: str = Field("", description="Overall verdict")


class InterviewSession(CamelModel):
    """One interview practice attempt."""
    id: str = Field(default_factory=_new_id, description="Session identifier")
    user_id: str = Field(..., description="Owner identifier")
    role: JobRole = Field(..., description="Target job role")
    category: SessionCategory = Field(..., description="Session category")
    status: SessionStatus = Field(SessionStatus.IN_PROGRESS, description="Lifecycle status")
    duration: int = Field(..., description="Duration in minutes")
    questions: List[QuestionEvaluation] = Field(default_factory=list, description="Answered questions")
    total_score: int = Field(0, ge=0, le=100, description="Aggregate score (0-100)")
    insights: Optional[SessionInsights] = Field(None, description="Insights computed at completion")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    created_at: datetime = Field(default_factory=_utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=_utcnow, description="Last persistence timestamp")


class ActivityRecord(CamelModel):
    """Append-only record of a session lifecycle event."""
    id: str = Field(default_factory=_new_id, description="Record identifier")
    user_id: str = Field(..., description="Acting user")
    session_id: str = Field(..., description="Session the event concerns")
    action: ActivityAction = Field(..., description="Lifecycle event")
    details: Dict[str, Any] = Field(default_factory=dict, description="Event details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Event timestamp")


class RoleCategory(CamelModel):
    """A question category offered for a role, with its generation prompt."""
    id: str = Field(default_factory=_new_id, description="Category identifier")
    name: str = Field(..., min_length=1, description="Category name")
    description: Optional[str] = Field(None, description="Category description")
    ai_prompt: str = Field(..., min_length=1, description="Guidance for question generation")


class RoleDefinition(CamelModel):
    """A role users can practice for, with its question categories."""
    id: str = Field(default_factory=_new_id, description="Role identifier")
    name: str = Field(..., min_length=1, description="Unique role name")
    description: str = Field(..., description="Role description")
    categories: List[RoleCategory] = Field(default_factory=list, description="Question categories")
    created_by: Optional[str] = Field(None, description="Creating user")
    is_active: bool = Field(True, description="Whether the role is offered")
    created_at: datetime = Field(default_factory=_utcnow, description="Creation timestamp")

    def get_category(self, category_id: str) -> Optional[RoleCategory]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def find_category(self, name: str) -> Optional[RoleCategory]:
        for category in self.categories:
            if category.name.lower() == name.lower():
                return category
        return None


class EvaluationResult(CamelModel):
    """Outcome of evaluating one answer."""
    score: int = Field(..., ge=0, le=100, description="Score (0-100)")
    feedback: str = Field(..., min_length=1, description="Feedback on the answer")
    strengths: List[str] = Field(default_factory=list, description="What the answer did well")
    improvements: List[str] = Field(default_factory=list, description="What to improve")
    suggested_answer: str = Field("", description="Model answer for comparison")
    source: EvaluationSource = Field(EvaluationSource.AI, description="Evaluator provenance")

    @field_validator("feedback", mode="before")
    @classmethod
    def strip_feedback(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class QuestionSpec(CamelModel):
    """A generated interview question."""
    question: str = Field(..., min_length=1, description="Question text")
    type: str = Field("technical", description="technical or behavioral")
    difficulty: str = Field("medium", description="easy, medium or hard")
    time_limit: int = Field(300, ge=0, description="Suggested time limit in seconds")
    sample_answer: str = Field("", description="Outline of a good answer")


class RecordedAnswer(CamelModel):
    """A session after an answer was evaluated and appended to it."""
    session: InterviewSession
    evaluation: EvaluationResult


# Aggregation results

class ScoreStats(CamelModel):
    """Unrounded score statistics over completed sessions."""
    avg_score: float
    max_score: float
    min_score: float


class GroupStat(CamelModel):
    """Unrounded mean score and count for one category or role."""
    key: str
    avg_score: float
    count: int


class WeakCategory(CamelModel):
    """A session category whose mean score falls below 60."""
    category: str
    avg_score: int
    improvement: str


class Overview(CamelModel):
    total_interviews: int
    completed_interviews: int
    completion_rate: int
    avg_score: Optional[int] = None
    highest_score: Optional[int] = None
    lowest_score: Optional[int] = None
    recent_activity_count: int = 0


class CategoryPerformance(CamelModel):
    category: str
    avg_score: int
    interviews_count: int


class RolePerformance(CamelModel):
    role: str
    avg_score: int
    interviews_count: int


class ProgressPoint(CamelModel):
    month: str = Field(..., description="Bucket in YYYY-MM form")
    avg_score: int
    interviews_count: int


class RecentSession(CamelModel):
    id: str
    role: str
    category: str
    status: str
    total_score: int
    created_at: datetime


class AnalyticsReport(CamelModel):
    """Progress analytics for one user."""
    overview: Overview
    category_performance: List[CategoryPerformance] = Field(default_factory=list)
    role_performance: List[RolePerformance] = Field(default_factory=list)
    progress_over_time: List[ProgressPoint] = Field(default_factory=list)
    weak_categories: List[WeakCategory] = Field(default_factory=list)
    recent_sessions: List[RecentSession] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)


# Listings

class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class SessionPage(CamelModel):
    items: List[InterviewSession]
    pagination: Pagination


class ActionStat(CamelModel):
    action: str
    count: int


class ActivityStatistics(CamelModel):
    action_stats: List[ActionStat] = Field(default_factory=list)
    recent_activity_count: int = 0
    total_activities: int = 0


class ActivityPage(CamelModel):
    activities: List[ActivityRecord]
    pagination: Pagination
    statistics: ActivityStatistics
