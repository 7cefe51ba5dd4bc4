"""
Error taxonomy and FastAPI exception handlers.

Services raise PortalError subclasses; the handlers registered here turn them
into JSON responses of the form {"detail": ..., "error_code": ...}.

Status mapping:
- 400 ValidationError (missing fields, malformed IDs, invalid enum values)
- 401 AuthenticationError (missing or invalid bearer token)
- 403 ForbiddenError (acting on behalf of someone else, not eligible, not admin)
- 404 NotFoundError (unknown posting or user)
- 409 ConflictError (duplicate application or registration)
- 500 anything else, logged with traceback, generic message returned
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PortalError(Exception):
    """Base exception for portal service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(PortalError):
    """Raised when a request payload or parameter is malformed."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class InvalidObjectIdError(ValidationError):
    """Raised when a path or body ID is not a valid ObjectId."""

    def __init__(self, kind: str):
        super().__init__(message=f"Invalid {kind} ID", error_code="INVALID_ID")


class DeadlinePassedError(ValidationError):
    def __init__(self):
        super().__init__(message="Application deadline has passed", error_code="DEADLINE_PASSED")


class InvalidStatusError(ValidationError):
    def __init__(self, allowed: list):
        super().__init__(
            message="Invalid status. Must be one of: " + ", ".join(allowed),
            error_code="INVALID_STATUS",
        )


class AuthenticationError(PortalError):
    """Raised when the bearer token is missing or cannot be verified."""

    def __init__(self, message: str = "Unauthorized", error_code: str = "NOT_AUTHENTICATED"):
        super().__init__(message=message, error_code=error_code, status_code=401)


class ForbiddenError(PortalError):
    def __init__(self, message: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(message=message, error_code=error_code, status_code=403)


class IdentityMismatchError(ForbiddenError):
    """Raised when the body email differs from the authenticated caller."""

    def __init__(self, message: str = "Cannot act on behalf of another user"):
        super().__init__(message=message, error_code="IDENTITY_MISMATCH")


class NotEligibleError(ForbiddenError):
    def __init__(self):
        super().__init__(
            message="You are not eligible for this job application",
            error_code="NOT_ELIGIBLE",
        )


class NotFoundError(PortalError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="NOT_FOUND", status_code=404)


class ConflictError(PortalError):
    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class ServiceUnavailableError(PortalError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="SERVICE_UNAVAILABLE", status_code=503)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code},
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed payloads are client errors (400), not 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Invalid request payload",
            "error_code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(
                [{"loc": e.get("loc"), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]
            ),
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
