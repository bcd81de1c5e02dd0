"""
booking_api/core/errors.py - Error taxonomy and its JSON rendering.

Every error raised by the gate, the services or the collaborator adapters derives
from `BookingAPIError`, which carries its HTTP status. `register_exception_handlers`
installs the FastAPI handlers that turn them (and anything unexpected) into a
`{"error": ..., "message": ...}` body so no failure escapes as a bare traceback.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("booking.app")


class BookingAPIError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"

    def __init__(self, message: str = "An internal server error occurred"):
        super().__init__(message)
        self.message = message


class AuthenticationError(BookingAPIError):
    """No token, or a token that could not be verified."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Authentication failed"

    def __init__(self, message: str = "Invalid or missing credentials"):
        super().__init__(message)


class AuthorizationError(BookingAPIError):
    """Authenticated, but not entitled to the resource."""
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"

    def __init__(self, message: str = "You do not have permission to access this reservation"):
        super().__init__(message)


class NotFoundTreatedAsDenied(AuthorizationError):
    """A missing resource on a guarded path. Rendered exactly like a denial."""


class ValidationError(BookingAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class NotFoundError(BookingAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class UpstreamError(BookingAPIError):
    """Identity provider or document store failure; the message is passed through."""
    error = "Upstream Error"


def _error_body(error: str, message) -> dict:
    return {"error": error, "message": message}


async def _handle_booking_error(request: Request, exc: BookingAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.error, exc.message))


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=_error_body(ValidationError.error, "; ".join(details) or "Invalid request"),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal Server Error", "An internal server error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingAPIError, _handle_booking_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
