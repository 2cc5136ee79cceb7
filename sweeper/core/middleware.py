"""Request-scoped logging context.

Every request gets an ``X-Request-ID`` (echoed back on the response) and,
when the caller propagates one, a trace id. Both land in the contextvars
that the structlog processors read, so the events emitted by concurrent
delete tasks carry the id of the request that spawned them.
"""

import time
from collections.abc import Awaitable, Callable, Mapping

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from sweeper.core.context import clear_context, set_request_id, set_trace_id


logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Checked in order; the first present header wins
TRACE_HEADERS = ("X-Trace-ID", "X-B3-TraceId")
TRACEPARENT_HEADER = "traceparent"


def extract_traceparent(traceparent: str | None) -> str | None:
    """Trace id segment of a W3C ``traceparent`` header.

    Format: {version}-{trace-id}-{parent-id}-{trace-flags}
    """
    if not traceparent:
        return None
    parts = traceparent.split("-")
    return parts[1] if len(parts) >= 2 else None


def trace_id_from(headers: Mapping[str, str]) -> str | None:
    for name in TRACE_HEADERS:
        if value := headers.get(name):
            return value
    return extract_traceparent(headers.get(TRACEPARENT_HEADER))


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds request/trace ids for the lifetime of a request."""

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = tuple(exclude_paths or ["/health"])

    def _logged(self, path: str) -> bool:
        return self.log_requests and not path.startswith(self.exclude_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        if trace_id := trace_id_from(request.headers):
            set_trace_id(trace_id)
        request.state.request_id = request_id

        path = request.url.path
        logged = self._logged(path)
        started = time.perf_counter()
        if logged:
            logger.info("request_started", method=request.method, path=path)

        try:
            response = await call_next(request)
            if logged:
                (logger.warning if response.status_code >= 400 else logger.info)(
                    "request_completed",
                    method=request.method,
                    path=path,
                    status_code=response.status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        finally:
            clear_context()


__all__ = ["RequestContextMiddleware", "extract_traceparent", "trace_id_from"]
