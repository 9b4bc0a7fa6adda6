"""API models for request/response schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from interview_tracker.core.models import (
    CamelModel,
    Difficulty,
    InterviewSession,
    JobRole,
    QuestionCategory,
    QuestionEvaluation,
    RoleCategory,
    SessionCategory,
    SessionStatus,
)


class EvaluateAnswerRequest(CamelModel):
    """Request to score a single answer."""
    question: str = Field(..., min_length=1, description="Question text")
    answer: str = Field(..., description="Candidate's answer")
    role: str = Field(..., min_length=1, description="Target job role")
    category: str = Field(..., min_length=1, description="Question category")


class GenerateQuestionsRequest(CamelModel):
    """Request to generate questions, by role/category ids or by names."""
    role_id: Optional[str] = Field(None, description="Role definition identifier")
    category_id: Optional[str] = Field(None, description="Role category identifier")
    role: Optional[str] = Field(None, description="Role name when no id is given")
    category: Optional[str] = Field(None, description="Category name when no id is given")
    difficulty: str = Field("medium", description="easy, medium or hard")
    count: int = Field(5, ge=1, le=20, description="Number of questions")


class RoleCategoryInput(CamelModel):
    """Category supplied when creating or updating a role."""
    name: str = Field(..., min_length=1, description="Category name")
    description: Optional[str] = Field(None, description="Category description")
    ai_prompt: str = Field(..., min_length=1, description="Guidance for question generation")


class RoleCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Unique role name")
    description: str = Field(..., description="Role description")
    categories: List[RoleCategoryInput] = Field(default_factory=list, description="Question categories")


class RoleUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, description="New role name")
    description: Optional[str] = Field(None, description="New description")
    categories: Optional[List[RoleCategory]] = Field(None, description="Replacement categories")
    is_active: Optional[bool] = Field(None, description="Whether the role is offered")


class SessionCreateRequest(CamelModel):
    """Request to start an interview session."""
    role: JobRole = Field(..., description="Target job role")
    category: SessionCategory = Field(..., description="Session category")
    duration: int = Field(..., description="Duration in minutes (15-180)")
    questions: List[QuestionEvaluation] = Field(default_factory=list, description="Already answered questions")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")


class SessionUpdateRequest(CamelModel):
    """Partial update of a session."""
    questions: Optional[List[QuestionEvaluation]] = Field(None, description="Replacement questions")
    status: Optional[SessionStatus] = Field(None, description="New status")
    tags: Optional[List[str]] = Field(None, description="Replacement tags")


class AnswerRequest(CamelModel):
    """An answer to evaluate and append to a session."""
    question: str = Field(..., min_length=1, description="Question text")
    answer: str = Field(..., description="Candidate's answer")
    category: Optional[QuestionCategory] = Field(None, description="Question category")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Question difficulty")


class SessionResponse(CamelModel):
    """Envelope for a single session."""
    success: bool = True
    message: Optional[str] = None
    interview: InterviewSession


class HealthCheck(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Check timestamp")
    version: str = Field(..., description="Service version")
    components: Dict[str, str] = Field(..., description="Component status")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error timestamp")


class StatusResponse(BaseModel):
    """Generic status response."""
    status: str = Field(..., description="Operation status")
    message: str = Field(..., description="Status message")
    data: Optional[Dict[str, Any]] = Field(None, description="Additional data")
