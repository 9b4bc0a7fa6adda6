"""Error taxonomy for the evaluation and analytics pipeline."""

from enum import Enum
from typing import Any, Dict, List, Optional


class InterviewTrackerError(Exception):
    """Base class for all Interview Tracker errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecoverableEvaluationError(InterviewTrackerError):
    """An evaluator could not produce a result; the next evaluator may try."""


class GatewayErrorCause(str, Enum):
    """Why a call through the AI gateway failed."""
    TRANSPORT = "transport"
    NO_JSON_FOUND = "no-json-found"
    PARSE_ERROR = "parse-error"


class GatewayError(RecoverableEvaluationError):
    """Failure talking to, or understanding, the remote text-generation service."""

    def __init__(self, cause: GatewayErrorCause, message: str = ""):
        super().__init__(message or cause.value)
        self.cause = cause

    def __repr__(self) -> str:
        return f"GatewayError(cause={self.cause.value!r}, message={self.message!r})"


class ValidationError(InterviewTrackerError):
    """Caller-supplied data violates score, enum or range constraints."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(InterviewTrackerError):
    """The requested document does not exist."""


class AuthorizationError(InterviewTrackerError):
    """The caller does not own the requested document."""
