"""FastAPI dependencies for moderation.

Provides dependency injection for:
- Moderation service
- Signed-in session (credential supplier)
- Error to HTTP status mapping
"""

from typing import Annotated, Any

from fastapi import Depends, Request, status

from sweeper.config.settings import Settings, get_settings
from sweeper.core.context import set_session_subject

from .credentials import Session, SessionCredentialSupplier
from .models import DeleteFailureReason
from .schemas import FailedDeleteResponse
from .service import (
    BatchDeleteFailedError,
    ModerationError,
    ModerationNotConfiguredError,
    ModerationService,
    RemoteUnavailableError,
    UnauthenticatedError,
)


async def get_moderation_service(request: Request) -> ModerationService:
    """Get moderation service from app state."""
    service = getattr(request.app.state, "moderation_service", None)
    if service is None:
        raise ModerationNotConfiguredError("Moderation service not available")
    return service


def get_session_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str | None:
    """Read the session token from the Bearer header or the session cookie."""
    auth_header = request.headers.get("Authorization")
    if auth_header:
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return request.cookies.get(settings.auth_cookie_name)


def get_credential_supplier(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionCredentialSupplier:
    return SessionCredentialSupplier(settings)


async def require_session(
    token: Annotated[str | None, Depends(get_session_token)],
    supplier: Annotated[SessionCredentialSupplier, Depends(get_credential_supplier)],
) -> Session:
    """Resolve the signed-in session or fail with 401."""
    session = supplier.resolve(token)
    if session is None:
        raise UnauthenticatedError()

    set_session_subject(session.subject)
    return session


# Type aliases for dependency injection
ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]
CurrentSession = Annotated[Session, Depends(require_session)]


# ==============================================================================
# Error mapping
# ==============================================================================

STATUS_MAP = {
    "invalid_input": status.HTTP_400_BAD_REQUEST,
    "invalid_reference": status.HTTP_400_BAD_REQUEST,
    "rate_limited": status.HTTP_429_TOO_MANY_REQUESTS,
    "not_configured": status.HTTP_503_SERVICE_UNAVAILABLE,
}

REMOTE_REASON_STATUS = {
    RemoteUnavailableError.COMMENTS_DISABLED: status.HTTP_400_BAD_REQUEST,
    RemoteUnavailableError.VIDEO_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

BATCH_FAILURE_STATUS = {
    DeleteFailureReason.AUTH: status.HTTP_401_UNAUTHORIZED,
    DeleteFailureReason.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
}


def error_status(error: ModerationError) -> int:
    """HTTP status code for a moderation error."""
    if isinstance(error, UnauthenticatedError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(error, RemoteUnavailableError):
        return REMOTE_REASON_STATUS.get(
            error.reason, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    if isinstance(error, BatchDeleteFailedError):
        primary = error.report.primary_failure
        reason = primary.reason if primary else None
        return BATCH_FAILURE_STATUS.get(reason, status.HTTP_400_BAD_REQUEST)
    return STATUS_MAP.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_extras(error: ModerationError) -> dict[str, Any]:
    """Structured detail attached to an error response."""
    extras: dict[str, Any] = {"code": error.code}
    if isinstance(error, RemoteUnavailableError):
        extras["reason"] = error.reason
        if error.details:
            extras["details"] = error.details
    if isinstance(error, BatchDeleteFailedError):
        extras["failed_deletes"] = [
            FailedDeleteResponse.from_outcome(o).model_dump()
            for o in error.report.failures
        ]
    return extras
