"""API routes for Interview Tracker."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from interview_tracker import __version__
from interview_tracker.analytics.aggregator import AnalyticsAggregator
from interview_tracker.api.models import (
    AnswerRequest,
    EvaluateAnswerRequest,
    GenerateQuestionsRequest,
    HealthCheck,
    RoleCreateRequest,
    RoleUpdateRequest,
    SessionCreateRequest,
    SessionResponse,
    SessionUpdateRequest,
    StatusResponse,
)
from interview_tracker.config import settings
from interview_tracker.core.errors import NotFoundError, ValidationError
from interview_tracker.core.models import (
    ActivityPage,
    AnalyticsReport,
    EvaluationResult,
    QuestionSpec,
    RecordedAnswer,
    RoleDefinition,
    SessionPage,
)
from interview_tracker.evaluation.service import AnswerEvaluationService
from interview_tracker.roles.service import RoleService
from interview_tracker.sessions.activity import ActivityLog
from interview_tracker.sessions.service import SessionService
from interview_tracker.storage.base import DocumentStore
from interview_tracker.utils.logging import get_logger

logger = get_logger(__name__)
security = HTTPBearer(auto_error=False)


@dataclass
class Services:
    """Services shared by all requests, built once at startup."""
    store: DocumentStore
    evaluation: AnswerEvaluationService
    activity: ActivityLog
    sessions: SessionService
    analytics: AnalyticsAggregator
    roles: RoleService


# Create routers
roles_router = APIRouter(prefix="/interview-roles", tags=["interview-roles"])
interviews_router = APIRouter(prefix="/interviews", tags=["interviews"])
activity_router = APIRouter(prefix="/activity", tags=["activity"])
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])
health_router = APIRouter(prefix="/health", tags=["health"])


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Services not initialized")
    return services


async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> str:
    """Resolve the caller's identity from the bearer token.

    Token verification belongs to the identity provider in front of this
    service; the token itself is taken as the user identifier.
    """
    if not credentials or not credentials.credentials.strip():
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials.strip()


# Interview roles

@roles_router.post("/evaluate-answer", response_model=EvaluationResult)
async def evaluate_answer(
    request: EvaluateAnswerRequest,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Score one answer; falls back to the heuristic evaluator when AI is unavailable."""
    logger.info("Answer evaluation requested", user_id=user_id, role=request.role, category=request.category)
    return await services.evaluation.evaluate(request.question, request.answer, request.role, request.category)


@roles_router.post("/generate-questions", response_model=List[QuestionSpec])
async def generate_questions(
    request: GenerateQuestionsRequest,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Generate questions for a role category."""
    if request.role_id:
        role = await services.roles.get_role(request.role_id)
        category = role.get_category(request.category_id) if request.category_id else None
        if category is None:
            raise NotFoundError("Interview category not found")
        role_name, category_name = role.name, category.name
    elif request.role and request.category:
        role = await services.roles.find_by_name(request.role)
        role_name, category_name = request.role, request.category
    else:
        raise ValidationError(
            "Either roleId and categoryId or role and category are required",
            [{"field": "roleId"}, {"field": "role"}],
        )

    logger.info("Question generation requested", user_id=user_id, role=role_name, category=category_name)
    return await services.evaluation.generate_questions(
        role_name, category_name, request.difficulty, request.count, role_definition=role
    )


@roles_router.get("", response_model=List[RoleDefinition])
async def list_roles(services: Services = Depends(get_services)):
    """List active interview roles."""
    return await services.roles.list_active_roles()


@roles_router.post("", response_model=RoleDefinition, status_code=201)
async def create_role(
    request: RoleCreateRequest,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return await services.roles.create_role(
        request.name,
        request.description,
        [category.model_dump() for category in request.categories],
        created_by=user_id,
    )


@roles_router.put("/{role_id}", response_model=RoleDefinition)
async def update_role(
    role_id: str,
    request: RoleUpdateRequest,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return await services.roles.update_role(
        role_id,
        name=request.name,
        description=request.description,
        categories=request.categories,
        is_active=request.is_active,
    )


@roles_router.delete("/{role_id}", response_model=StatusResponse)
async def delete_role(
    role_id: str,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Deactivate a role. Existing sessions are unaffected."""
    role = await services.roles.deactivate_role(role_id)
    return StatusResponse(status="success", message="Interview role deactivated", data={"id": role.id})


# Interviews

@interviews_router.get("", response_model=SessionPage)
async def list_interviews(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    role: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return await services.sessions.list_sessions(
        user_id,
        page=page,
        limit=limit if limit is not None else settings.default_page_size,
        role=role,
        category=category,
        status=status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@interviews_router.post("", response_model=SessionResponse, status_code=201)
async def create_interview(
    request: SessionCreateRequest,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    session = await services.sessions.create_session(
        user_id,
        request.role,
        request.category,
        request.duration,
        questions=request.questions,
        tags=request.tags,
    )
    return SessionResponse(message="Interview session created successfully", interview=session)


@interviews_router.get("/{session_id}", response_model=SessionResponse)
async def get_interview(
    session_id: str,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return SessionResponse(interview=await services.sessions.get_session(session_id, user_id))


@interviews_router.put("/{session_id}", response_model=SessionResponse)
async def update_interview(
    session_id: str,
    request: SessionUpdateRequest,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    session = await services.sessions.update_session(
        session_id,
        user_id,
        questions=request.questions,
        status=request.status,
        tags=request.tags,
    )
    return SessionResponse(message="Interview session updated successfully", interview=session)


@interviews_router.post("/{session_id}/answers", response_model=RecordedAnswer)
async def answer_question(
    session_id: str,
    request: AnswerRequest,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Evaluate an answer and append it to the session."""
    return await services.sessions.record_answer(
        session_id,
        user_id,
        request.question,
        request.answer,
        category=request.category,
        difficulty=request.difficulty,
    )


@interviews_router.delete("/{session_id}", response_model=StatusResponse)
async def delete_interview(
    session_id: str,
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    await services.sessions.delete_session(session_id, user_id)
    return StatusResponse(status="success", message="Interview session deleted successfully", data={"id": session_id})


# Activity and analytics

@activity_router.get("", response_model=ActivityPage)
async def list_activity(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    action: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return await services.activity.list_activities(
        user_id,
        page=page,
        limit=limit if limit is not None else settings.activity_page_size,
        action=action,
        start_date=start_date,
        end_date=end_date,
    )


@analytics_router.get("", response_model=AnalyticsReport)
async def get_analytics(
    user_id: str = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return await services.analytics.compute_analytics(user_id)


@health_router.get("", response_model=HealthCheck)
async def health_check(request: Request):
    """Health check endpoint."""
    services: Optional[Services] = getattr(request.app.state, "services", None)
    components = {
        "store": "healthy" if services else "unavailable",
        "ai_backend": "configured" if services and services.evaluation.gateway.backend else "fallback",
    }

    return HealthCheck(
        status="healthy" if services else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        components=components,
    )


all_routers = [
    roles_router,
    interviews_router,
    activity_router,
    analytics_router,
    health_router,
]
