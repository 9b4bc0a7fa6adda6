"""Main FastAPI application for Interview Tracker."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from interview_tracker import __version__
from interview_tracker.analytics.aggregator import AnalyticsAggregator
from interview_tracker.analytics.insights import InsightGenerator
from interview_tracker.api.models import ErrorResponse
from interview_tracker.api.routes import Services, all_routers
from interview_tracker.config import AIProviderConfig, settings
from interview_tracker.core.errors import (
    AuthorizationError,
    InterviewTrackerError,
    NotFoundError,
    RecoverableEvaluationError,
    ValidationError,
)
from interview_tracker.evaluation.gateway import AIGateway
from interview_tracker.evaluation.service import AnswerEvaluationService
from interview_tracker.roles.service import RoleService
from interview_tracker.sessions.activity import ActivityLog, Clock, utc_now
from interview_tracker.sessions.service import SessionService
from interview_tracker.storage.base import DocumentStore
from interview_tracker.storage.memory import InMemoryDocumentStore
from interview_tracker.utils.logging import configure_logging, get_logger

# Configure logging
configure_logging()
logger = get_logger(__name__)


def build_services(
    store: DocumentStore,
    evaluation_service: Optional[AnswerEvaluationService] = None,
    clock: Optional[Clock] = None,
) -> Services:
    """Wire the services around one store, sharing a clock and activity log."""
    clock = clock or utc_now
    if evaluation_service is None:
        gateway = AIGateway.from_config(AIProviderConfig.from_settings(settings))
        evaluation_service = AnswerEvaluationService(gateway=gateway)

    activity = ActivityLog(store, clock=clock)
    insights = InsightGenerator()
    return Services(
        store=store,
        evaluation=evaluation_service,
        activity=activity,
        sessions=SessionService(
            store,
            evaluation_service=evaluation_service,
            activity_log=activity,
            insight_generator=insights,
            clock=clock,
        ),
        analytics=AnalyticsAggregator(store, activity_log=activity, insight_generator=insights, clock=clock),
        roles=RoleService(store),
    )


def create_app(
    store: Optional[DocumentStore] = None,
    evaluation_service: Optional[AnswerEvaluationService] = None,
    clock: Optional[Clock] = None,
    seed_roles: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Document store; an in-memory store when omitted
        evaluation_service: Evaluation pipeline; built from settings when omitted
        clock: Time source shared by the services
        seed_roles: Whether to create the default interview roles at startup

    Returns:
        The configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("Starting Interview Tracker API")

        try:
            services = build_services(store or InMemoryDocumentStore(), evaluation_service, clock)
            if seed_roles:
                await services.roles.seed_default_roles()
            app.state.services = services

            logger.info(
                "Application startup completed successfully",
                ai_backend=services.evaluation.gateway.backend is not None,
            )
        except Exception as e:
            logger.error("Application startup failed", error=str(e))
            raise

        yield

        # Shutdown
        logger.info("Shutting down Interview Tracker API")
        app.state.services = None

    app = FastAPI(
        title="Interview Tracker API",
        description="Interview practice with AI answer evaluation and progress analytics",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    for router in all_routers:
        app.include_router(router, prefix="/api/v1")

    # Add root endpoint
    @app.get("/")
    async def root():
        return {
            "name": "Interview Tracker API",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else "disabled"
        }

    return app


def setup_middleware(app: FastAPI) -> None:
    """Setup application middleware."""

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = asyncio.get_event_loop().time()

        logger.info(
            "Request started",
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            duration = asyncio.get_event_loop().time() - start_time
            logger.info(
                "Request completed",
                method=request.method,
                url=str(request.url),
                status_code=response.status_code,
                duration_seconds=duration
            )
            return response

        except Exception as e:
            duration = asyncio.get_event_loop().time() - start_time
            logger.error(
                "Request failed",
                method=request.method,
                url=str(request.url),
                error=str(e),
                duration_seconds=duration
            )
            raise


def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=ErrorResponse(
            error=error,
            message=message,
            details=details,
            timestamp=datetime.now(timezone.utc)
        ).model_dump(mode="json")
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(ValidationError)
    async def domain_validation_handler(request: Request, exc: ValidationError):
        logger.warning("Validation error", message=exc.message, errors=exc.errors, url=str(request.url))
        return _error_response(400, "ValidationError", exc.message, {"errors": exc.errors})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        logger.warning("Resource not found", message=exc.message, url=str(request.url))
        return _error_response(404, "NotFound", exc.message)

    @app.exception_handler(AuthorizationError)
    async def authorization_handler(request: Request, exc: AuthorizationError):
        logger.warning("Access denied", message=exc.message, url=str(request.url))
        return _error_response(403, "Forbidden", exc.message)

    @app.exception_handler(RecoverableEvaluationError)
    async def evaluation_unavailable_handler(request: Request, exc: RecoverableEvaluationError):
        logger.error("No evaluator produced a result", message=exc.message, url=str(request.url))
        return _error_response(503, "EvaluationUnavailable", "Answer evaluation is currently unavailable")

    @app.exception_handler(InterviewTrackerError)
    async def tracker_error_handler(request: Request, exc: InterviewTrackerError):
        logger.error("Interview tracker error", message=exc.message, error_type=type(exc).__name__)
        return _error_response(500, type(exc).__name__, exc.message)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            url=str(request.url)
        )
        return _error_response(exc.status_code, "HTTPException", str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Request validation error",
            errors=exc.errors(),
            url=str(request.url)
        )
        errors = [
            {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "message": err["msg"]}
            for err in exc.errors()
        ]
        return _error_response(400, "ValidationError", "Request validation failed", {"errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.error(
            "Starlette HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            url=str(request.url)
        )
        return _error_response(exc.status_code, "StarletteHTTPException", exc.detail or "Internal server error")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            url=str(request.url)
        )
        return _error_response(
            500,
            "InternalServerError",
            "An unexpected error occurred",
            {"error_type": type(exc).__name__} if settings.debug else None,
        )


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "interview_tracker.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None  # Use our custom logging
    )
