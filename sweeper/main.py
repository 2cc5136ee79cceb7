"""Judol Sweeper API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sweeper.config import get_settings
from sweeper.core.context import get_request_id
from sweeper.core.logging import configure_structlog, get_logger
from sweeper.core.middleware import RequestContextMiddleware
from sweeper.health.router import router as health_router
from sweeper.moderation.dependencies import error_extras, error_status
from sweeper.moderation.keywords import JsonKeywordSource
from sweeper.moderation.router import router as moderation_router
from sweeper.moderation.service import ModerationError, ModerationService
from sweeper.moderation.youtube import YouTubeClient


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    youtube_client = None
    if settings.youtube_configured:
        youtube_client = YouTubeClient(
            settings.youtube_api_key or "",
            base_url=settings.youtube_api_base_url,
            timeout=settings.youtube_request_timeout,
        )
        logger.info("youtube_client_initialized")
    else:
        logger.warning(
            "youtube_client_skipped",
            message="YOUTUBE_API_KEY not set - moderation endpoints will return 503",
        )

    app.state.moderation_service = ModerationService(
        youtube_client,
        JsonKeywordSource(settings.spam_keywords_path),
        page_size=settings.youtube_page_size,
        logger=get_logger("sweeper.moderation"),
    )
    logger.info("moderation_service_initialized")

    yield

    # Shutdown
    logger.info("shutting_down_application")
    if youtube_client is not None:
        await youtube_client.aclose()


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    **extras: object,
) -> ORJSONResponse:
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    return ORJSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "message": message,
            "status_code": status_code,
            "request_id": request_id,
            **extras,
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # debug stays off so Starlette never renders stack traces in responses
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="YouTube comment spam moderation API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    @app.exception_handler(ModerationError)
    async def moderation_error_handler(
        request: Request, exc: ModerationError
    ) -> ORJSONResponse:
        """Map moderation errors to their HTTP status and envelope."""
        status_code = error_status(exc)
        log_method = (
            logger.error
            if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
            else logger.warning
        )
        log_method(
            "moderation_error",
            code=exc.code,
            status_code=status_code,
            error_message=exc.message,
            path=request.url.path,
        )
        return _error_response(request, status_code, exc.message, **error_extras(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )
        message = (
            str(exc.detail)
            if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
            else "Internal server error"
        )
        return _error_response(request, exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Malformed request bodies are caller errors (400)."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "Validation error",
            code="invalid_input",
            details=[
                {
                    "field": ".".join(str(loc) for loc in err.get("loc", [])),
                    "message": err.get("msg", "Invalid value"),
                }
                for err in exc.errors()
            ],
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        Details are logged internally, never returned to the caller.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred. Please try again later.",
            code="internal_error",
        )

    app.include_router(health_router)
    app.include_router(moderation_router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "Judol Sweeper API",
            "version": settings.app_version,
            "docs": f"{request.url}docs",
        }

    return app


app = create_app()
