"""Tracing helpers for FastAPI.

Adds a request-level trace middleware that injects/propagates `X-Request-ID`
and a small audit event helper for write operations.
"""

from .config import get_settings
from .logging import configure_logging, set_request_id
from fastapi import Request, Response
from typing import Any, Callable, Awaitable, Dict
import uuid

_s = get_settings()
logger = configure_logging(_s.LOG_LEVEL, service=_s.SERVICE_NAME, env=_s.ENV)


async def trace_middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """ASGI middleware to attach a correlation id and echo it in the response.

    - Reads `X-Request-ID` from the incoming request or generates a UUIDv4.
    - Stores it in a ContextVar so logs include the same id, including the
      500 handler that runs after an exception leaves this middleware.
    - Sets the same header on the outgoing response.

    Args:
        request: Incoming FastAPI request.
        call_next: The next ASGI callable that returns a `Response`.

    Returns:
        The downstream response with `X-Request-ID` header set.
    """
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    set_request_id(rid)
    response = await call_next(request)
    response.headers["X-Request-ID"] = rid
    return response


def audit_event(actor_id: str, verb: str, obj: str, **extras: Any) -> Dict[str, Any]:
    """Log a structured audit event and return its payload.

    The payload rides on the record as `event`, which `JSONFormatter` emits
    as a nested object.

    Args:
        actor_id: Id of the user performing the action.
        verb: Action performed (e.g., "created", "deleted").
        obj: Object of the action (e.g., "post:<id>").
        **extras: Additional key/value fields.

    Returns:
        A dictionary containing the event payload.
    """
    event: Dict[str, Any] = {
        "actor": actor_id,
        "verb": verb,
        "object": obj,
        "extras": extras,
    }
    logger.info("audit %s %s", verb, obj, extra={"event": event})
    return event
