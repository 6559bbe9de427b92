"""Error taxonomy and the JSON envelope rendering for failures."""

import enum
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from amper_tracker.core.config import settings

logger = logging.getLogger(__name__)


class ValidationReason(str, enum.Enum):
    """Which input rule a request violated."""

    MISSING_FIELD = "MissingField"
    INVALID_USERNAME = "InvalidUsername"
    INVALID_AMPER = "InvalidAmper"
    INVALID_PRODUCT_ID = "InvalidProductId"
    INVALID_PRODUCT_NAME = "InvalidProductName"
    UNKNOWN_SENSOR = "UnknownSensor"
    INVALID_QUERY = "InvalidQuery"


class AmperTrackerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AmperTrackerError):
    """Malformed, missing or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: ValidationReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class NotFoundError(AmperTrackerError):
    """A referenced record does not exist."""

    def __init__(self, message: str, status_code: int = status.HTTP_404_NOT_FOUND) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreError(AmperTrackerError):
    """The underlying database failed."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)


def error_body(message: str, detail: str | None = None, **extra: object) -> dict:
    """Build the failure envelope; ``detail`` is dropped in production."""
    body: dict = {"success": False, "message": message, **extra}
    if detail is not None and not settings.is_production:
        body["error"] = detail
    return body


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, reason=exc.reason.value),
    )


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def _store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Store failure on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"status_code": status.HTTP_500_INTERNAL_SERVER_ERROR},
    )
    cause = exc.__cause__ if isinstance(exc, StoreError) and exc.__cause__ else exc
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", detail=str(cause)),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"status_code": status.HTTP_500_INTERNAL_SERVER_ERROR},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", detail=str(exc)),
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            f"Invalid request: {problems}", reason=ValidationReason.INVALID_QUERY.value
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope-rendering handlers to ``app``."""
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(StoreError, _store_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
