import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Base class for errors that map onto an HTTP response"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed input"""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Bad credentials or a missing, expired or revoked session"""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    """Unknown task or item id"""
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Unique constraint violated, e.g. an email registered twice"""
    status_code = status.HTTP_409_CONFLICT


def _field_label(loc) -> str:
    # loc looks like ("body", "email") or ("query", "date")
    names = [str(part) for part in loc if part not in ("body", "query", "path")]
    if not names:
        return "Request body"
    return names[-1][:1].upper() + names[-1][1:]


def first_validation_message(exc: RequestValidationError) -> str:
    """Collapse FastAPI's validation error list into one readable message"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    label = _field_label(error.get("loc", ()))
    if error.get("type") == "missing":
        return f"{label} is required."
    if error.get("type") in ("value_error", "json_invalid", "model_attributes_type"):
        return error.get("msg", "Invalid request")
    return f"{label}: {error.get('msg', 'invalid value')}"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": first_validation_message(exc)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_MESSAGE},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on the app"""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
