"""Error taxonomy and FastAPI exception handlers.

Learn: Services raise NervError subclasses; handlers turn them into JSON
responses of the form {"detail": "..."}. Persistence failures are logged
with full detail and answered with a generic message.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class NervError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(NervError):
    status_code = 400
    message = "Invalid request"


class AuthRequired(NervError):
    status_code = 401
    message = "Authentication required"


class InvalidCredentials(NervError):
    status_code = 401
    message = "Invalid email or password"


class AuthInvalid(NervError):
    status_code = 403
    message = "Invalid or expired token"


class NotFoundOrNotOwned(NervError):
    """The record does not exist, or belongs to someone else.

    The two cases are deliberately indistinguishable to the caller.
    """

    status_code = 404
    message = "Not found"


class DuplicateEmail(NervError):
    status_code = 409
    message = "Email already registered"


class PersistenceError(NervError):
    status_code = 500
    message = "Database operation failed"


_AUTH_HEADERS = {"WWW-Authenticate": "Bearer"}


def _format_validation_errors(exc: RequestValidationError) -> str:
    """Render pydantic errors as "field: message; field: message"."""
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid request"


async def _nerv_error_handler(request: Request, exc: NervError) -> JSONResponse:
    if isinstance(exc, PersistenceError):
        logger.error(
            "persistence.error",
            path=request.url.path,
            method=request.method,
            error=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": PersistenceError.message},
        )

    headers = _AUTH_HEADERS if isinstance(exc, AuthRequired) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = _format_validation_errors(exc)
    logger.info("request.invalid", path=request.url.path, detail=message)
    return JSONResponse(status_code=400, content={"detail": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NervError, _nerv_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
