"""Exception handlers producing a uniform error envelope.

Every error response body is ``{"statusCode", "error", "message"}``.
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from backend.app.adapters.omdb import OmdbError
from backend.app.db.users import DuplicateUserError
from backend.app.security.jwt import AuthenticationError
from backend.app.security.sessions import InvalidResetTokenError, Unauthorized
from backend.app.services.watchlist import (
    DuplicateWatchEntryError,
    MediaItemNotFoundError,
    WatchEntryNotFoundError,
)

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "Error"
    return JSONResponse(
        status_code=status_code,
        content={"statusCode": status_code, "error": phrase, "message": message},
        headers=headers,
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for domain errors and framework errors."""

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        # Cause was logged where it happened; keep the outward message generic
        message = exc.message if isinstance(exc, Unauthorized) else "Invalid or expired token"
        return error_response(401, message, headers={"WWW-Authenticate": "Bearer"})

    @app.exception_handler(DuplicateUserError)
    async def handle_duplicate_user(request: Request, exc: DuplicateUserError):
        return error_response(409, "Email or username is already in use")

    @app.exception_handler(InvalidResetTokenError)
    async def handle_invalid_reset_token(request: Request, exc: InvalidResetTokenError):
        return error_response(400, "Invalid or expired reset token")

    @app.exception_handler(MediaItemNotFoundError)
    async def handle_media_not_found(request: Request, exc: MediaItemNotFoundError):
        return error_response(404, "Media item not found")

    @app.exception_handler(WatchEntryNotFoundError)
    async def handle_entry_not_found(request: Request, exc: WatchEntryNotFoundError):
        return error_response(404, "Item not found in watchlist")

    @app.exception_handler(DuplicateWatchEntryError)
    async def handle_duplicate_entry(request: Request, exc: DuplicateWatchEntryError):
        return error_response(409, "Item already in watchlist")

    @app.exception_handler(OmdbError)
    async def handle_omdb_error(request: Request, exc: OmdbError):
        logger.error(
            "OMDb error on %s %s: %s", request.method, request.url.path, exc.message
        )
        return error_response(502, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(400, _format_validation_errors(exc))

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        return error_response(exc.status_code, message, headers=exc.headers)
