"""Structured logging configuration using structlog."""

import logging
from typing import Any, Dict

import structlog
from rich.logging import RichHandler

from interview_tracker.config import settings


def configure_logging() -> None:
    """Configure structured logging with rich output."""

    level = getattr(logging, settings.log_level.upper())

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[RichHandler(rich_tracebacks=True, markup=True)],
    )

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_function_call(func_name: str, **kwargs: Any) -> Dict[str, Any]:
    """Create a log context for function calls."""
    return {
        "function": func_name,
        "parameters": {k: v for k, v in kwargs.items() if not k.startswith("_")},
    }


def log_session_state(session: Any) -> Dict[str, Any]:
    """Create a log context for an interview session."""
    return {
        "session_state": {
            "session_id": getattr(session, "id", None),
            "status": getattr(getattr(session, "status", None), "value", None),
            "questions_count": len(getattr(session, "questions", []) or []),
            "total_score": getattr(session, "total_score", None),
        }
    }
