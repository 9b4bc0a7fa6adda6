"""Interview session lifecycle: creation, answers, status changes, deletion."""

import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from interview_tracker.analytics.insights import InsightGenerator
from interview_tracker.core.errors import AuthorizationError, NotFoundError, ValidationError
from interview_tracker.core.models import (
    ActivityAction,
    Difficulty,
    InterviewSession,
    JobRole,
    QuestionCategory,
    QuestionEvaluation,
    RecordedAnswer,
    SessionCategory,
    SessionPage,
    SessionStatus,
)
from interview_tracker.evaluation.service import AnswerEvaluationService
from interview_tracker.sessions.activity import ActivityLog, Clock, build_pagination, check_pagination, utc_now
from interview_tracker.sessions.scoring import recompute_score
from interview_tracker.storage.base import ASCENDING, DESCENDING, SESSIONS, DocumentStore
from interview_tracker.utils.logging import get_logger, log_session_state

logger = get_logger(__name__)

MIN_DURATION = 15
MAX_DURATION = 180

SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "totalScore": "total_score",
    "role": "role",
    "category": "category",
    "status": "status",
    "duration": "duration",
}

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_type: Type[E], value: Any, field: str) -> E:
    try:
        return enum_type(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {value}", [{"field": field, "value": value}]) from e


def _parse_questions(questions: Iterable[Any]) -> List[QuestionEvaluation]:
    parsed = []
    for index, question in enumerate(questions):
        if isinstance(question, QuestionEvaluation):
            parsed.append(question)
            continue
        try:
            parsed.append(QuestionEvaluation.model_validate(question))
        except PydanticValidationError as e:
            errors = [
                {"field": f"questions.{index}." + ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise ValidationError(f"Invalid question at position {index}", errors) from e
    return parsed


def _sort_field(sort_by: str) -> str:
    if sort_by in SORTABLE_FIELDS:
        return SORTABLE_FIELDS[sort_by]
    if sort_by in SORTABLE_FIELDS.values():
        return sort_by
    raise ValidationError(f"Cannot sort by {sort_by}", [{"field": "sortBy", "value": sort_by}])


class SessionService:
    """
    Owns every write path of an interview session.

    Each persistence re-derives the total score from the questions, and the
    transition into ``completed`` attaches per-session insights once.
    """

    def __init__(
        self,
        store: DocumentStore,
        evaluation_service: Optional[AnswerEvaluationService] = None,
        activity_log: Optional[ActivityLog] = None,
        insight_generator: Optional[InsightGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.clock = clock or utc_now
        self.evaluation_service = evaluation_service or AnswerEvaluationService()
        self.activity_log = activity_log or ActivityLog(store, clock=self.clock)
        self.insight_generator = insight_generator or InsightGenerator()
        self.logger = logger.bind(component="session_service")

    async def create_session(
        self,
        user_id: str,
        role: Any,
        category: Any,
        duration: int,
        questions: Optional[Iterable[Any]] = None,
        tags: Optional[List[str]] = None,
    ) -> InterviewSession:
        """Create an in-progress session, scoring any questions supplied up front."""
        job_role = _parse_enum(JobRole, role, "role")
        session_category = _parse_enum(SessionCategory, category, "category")
        if isinstance(duration, bool) or not isinstance(duration, int) or not MIN_DURATION <= duration <= MAX_DURATION:
            raise ValidationError(
                f"Duration must be between {MIN_DURATION} and {MAX_DURATION} minutes",
                [{"field": "duration", "value": duration}],
            )

        now = self.clock()
        session = InterviewSession(
            user_id=user_id,
            role=job_role,
            category=session_category,
            duration=duration,
            questions=_parse_questions(questions or []),
            tags=list(tags or []),
            total_score=0,
            created_at=now,
            updated_at=now,
        )
        session = recompute_score(session)
        await self.store.insert_one(SESSIONS, session.model_dump())

        await self.activity_log.record(
            user_id, session.id, ActivityAction.CREATED,
            {"role": job_role.value, "category": session_category.value},
        )
        self.logger.info("Interview session created", user_id=user_id, **log_session_state(session))
        return session

    async def get_session(self, session_id: str, user_id: str) -> InterviewSession:
        """Fetch a session owned by ``user_id``."""
        document = await self.store.find_one(SESSIONS, {"id": session_id})
        if document is None:
            raise NotFoundError("Interview session not found")

        session = InterviewSession.model_validate(document)
        if session.user_id != user_id:
            self.logger.warning("Session access denied", session_id=session_id, user_id=user_id)
            raise AuthorizationError("Not authorized to access this interview")
        return session

    async def list_sessions(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        role: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> SessionPage:
        """
        List a user's sessions.

        Args:
            user_id: Owner of the sessions
            page: 1-based page number
            limit: Page size
            role: Optional exact role filter
            category: Optional exact category filter
            status: Optional exact status filter
            search: Case-insensitive substring matched against role or tags
            sort_by: Field to sort on; newest first when omitted
            sort_order: ``asc`` or ``desc``

        Returns:
            One page of sessions with pagination metadata
        """
        check_pagination(page, limit)

        query: Dict[str, Any] = {"user_id": user_id}
        if role:
            query["role"] = _parse_enum(JobRole, role, "role").value
        if category:
            query["category"] = _parse_enum(SessionCategory, category, "category").value
        if status:
            query["status"] = _parse_enum(SessionStatus, status, "status").value
        if search:
            pattern = re.compile(re.escape(search), re.IGNORECASE)
            query["$or"] = [{"role": pattern}, {"tags": {"$in": [pattern]}}]

        if sort_by:
            sort = [(_sort_field(sort_by), DESCENDING if sort_order == "desc" else ASCENDING)]
        else:
            sort = [("created_at", DESCENDING)]

        documents = await self.store.find(SESSIONS, query, sort=sort, skip=(page - 1) * limit, limit=limit)
        total = await self.store.count_documents(SESSIONS, query)

        return SessionPage(
            items=[InterviewSession.model_validate(doc) for doc in documents],
            pagination=build_pagination(page, limit, total),
        )

    async def update_session(
        self,
        session_id: str,
        user_id: str,
        questions: Optional[Iterable[Any]] = None,
        status: Optional[Any] = None,
        tags: Optional[List[str]] = None,
    ) -> InterviewSession:
        """Replace questions, change status or retag a session."""
        session = await self.get_session(session_id, user_id)
        previous_status = session.status

        updates: Dict[str, Any] = {}
        if questions is not None:
            updates["questions"] = _parse_questions(questions)
        if status is not None:
            updates["status"] = _parse_enum(SessionStatus, status, "status")
        if tags is not None:
            updates["tags"] = list(tags)

        session = session.model_copy(update=updates)

        completing = session.status == SessionStatus.COMPLETED and previous_status != SessionStatus.COMPLETED
        rescored = session.status == SessionStatus.COMPLETED and questions is not None
        if (completing or rescored) and session.questions:
            session = session.model_copy(
                update={"insights": self.insight_generator.summarize(session.questions)}
            )

        session = await self._persist(session)

        if completing:
            action = ActivityAction.COMPLETED
        elif session.status == SessionStatus.IN_PROGRESS and previous_status != SessionStatus.IN_PROGRESS:
            action = ActivityAction.STARTED
        else:
            action = ActivityAction.UPDATED

        details: Dict[str, Any] = {"status": session.status.value}
        if questions is not None:
            details["questionsCount"] = len(session.questions)
        await self.activity_log.record(user_id, session.id, action, details)
        self.logger.info("Interview session updated", action=action.value, **log_session_state(session))
        return session

    async def record_answer(
        self,
        session_id: str,
        user_id: str,
        question_text: str,
        answer: str,
        category: Optional[Any] = None,
        difficulty: Any = Difficulty.MEDIUM,
    ) -> RecordedAnswer:
        """Evaluate an answer and append it to an in-progress session."""
        session = await self.get_session(session_id, user_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise ValidationError(
                "Only in-progress sessions accept answers",
                [{"field": "status", "value": session.status.value}],
            )
        if not answer or not answer.strip():
            raise ValidationError("Answer is required", [{"field": "answer"}])

        if category is None:
            category = (
                QuestionCategory.GENERAL
                if session.category == SessionCategory.MIXED
                else session.category.value
            )
        question_category = _parse_enum(QuestionCategory, category, "category")
        question_difficulty = _parse_enum(Difficulty, difficulty, "difficulty")

        evaluation = await self.evaluation_service.evaluate(
            question_text, answer, session.role, question_category
        )

        question = QuestionEvaluation(
            question_text=question_text,
            user_answer=answer,
            score=evaluation.score,
            feedback=evaluation.feedback,
            category=question_category,
            difficulty=question_difficulty,
        )
        session = session.model_copy(update={"questions": [*session.questions, question]})
        session = await self._persist(session)

        await self.activity_log.record(
            user_id, session.id, ActivityAction.UPDATED,
            {"questionsCount": len(session.questions), "evaluationSource": evaluation.source.value},
        )
        return RecordedAnswer(session=session, evaluation=evaluation)

    async def delete_session(self, session_id: str, user_id: str) -> None:
        session = await self.get_session(session_id, user_id)
        await self.store.delete_one(SESSIONS, {"id": session.id})

        await self.activity_log.record(
            user_id, session.id, ActivityAction.DELETED,
            {"role": session.role.value, "category": session.category.value},
        )
        self.logger.info("Interview session deleted", session_id=session.id, user_id=user_id)

    async def _persist(self, session: InterviewSession) -> InterviewSession:
        session = recompute_score(session)
        session = session.model_copy(update={"updated_at": self.clock()})
        await self.store.replace_one(SESSIONS, {"id": session.id}, session.model_dump())
        return session
