# Core infrastructure
from sweeper.core.context import (
    clear_context,
    get_context,
    get_request_id,
    get_session_subject,
    get_trace_id,
    set_request_id,
    set_session_subject,
    set_trace_id,
)
from sweeper.core.logging import configure_structlog, get_logger
from sweeper.core.middleware import RequestContextMiddleware


__all__ = [
    "RequestContextMiddleware",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_session_subject",
    "get_trace_id",
    "set_request_id",
    "set_session_subject",
    "set_trace_id",
]
