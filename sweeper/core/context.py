"""Request-scoped context for log enrichment.

Every inbound request gets a request id (and, when the caller sends them,
a trace id and the signed-in session subject). Values live in contextvars so
concurrent delete tasks spawned inside a request inherit them automatically.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)
session_subject_var: ContextVar[str | None] = ContextVar(
    "session_subject", default=None
)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Incoming request ID. A new one is generated when missing.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def get_trace_id() -> str | None:
    """Get the current trace ID."""
    return trace_id_var.get()


def set_trace_id(trace_id: str | None) -> None:
    """Set the trace ID from distributed tracing headers."""
    trace_id_var.set(trace_id)


def get_session_subject() -> str | None:
    """Get the subject of the signed-in session, if any."""
    return session_subject_var.get()


def set_session_subject(subject: str | None) -> None:
    """Record who is acting in the current request."""
    session_subject_var.set(subject)


def get_context() -> dict[str, Any]:
    """Get the non-empty context values as a dictionary."""
    context: dict[str, Any] = {}

    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id

    trace_id = get_trace_id()
    if trace_id:
        context["trace_id"] = trace_id

    subject = get_session_subject()
    if subject:
        context["session_subject"] = subject

    return context


def clear_context() -> None:
    """Reset all context values at the end of a request."""
    request_id_var.set("")
    trace_id_var.set(None)
    session_subject_var.set(None)
