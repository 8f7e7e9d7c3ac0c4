"""Error taxonomy and JSON error envelope for FastAPI services.

Every failure leaves the service as `{"success": false, "message": "..."}`.
Handlers raise the tagged `ApiError` subclasses below; anything else is
reported as a generic 500 and only logged server-side.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from .logging import get_request_id

log = logging.getLogger(__name__)

SERVER_ERROR = "Server Error"


class ApiError(Exception):
    """Base class for errors that map to a fixed HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"


class Unauthenticated(ApiError):
    """No bearer credential, or the Authorization header is malformed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized to access this route - No token provided"


class InvalidToken(ApiError):
    """Signature mismatch, expiry, or a malformed payload."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized to access this route - Invalid token"


class UnknownUser(ApiError):
    """The token is valid but its subject no longer resolves to a user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "User not found"


class InvalidCredentials(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not authorized to access this route"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class NotAuthorized(ApiError):
    """The caller is authenticated but does not own the resource."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized to modify this resource"


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def validation_message(errors) -> str:
    """Flatten pydantic error dicts into one "field: reason" line."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(validation_message(exc.errors())),
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    rid = get_request_id()
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(SERVER_ERROR),
        headers={"X-Request-ID": rid} if rid else None,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the JSON error envelope handlers on `app`.

    Args:
        app: The FastAPI application to configure.
    """
    app.add_exception_handler(ApiError, _api_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)
