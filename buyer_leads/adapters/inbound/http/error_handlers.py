"""Map domain exceptions to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from buyer_leads.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    BatchTooLargeError,
    BatchValidationError,
    NotFoundError,
    PersistenceError,
    RateLimitExceeded,
    ValidationError,
)
from buyer_leads.infrastructure.logging.logger import logger

INTERNAL_ERROR_MESSAGE = "Internal server error"
PERSISTENCE_ERROR_MESSAGE = "Failed to save changes"


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation failed",
            "errors": [{"field": error.field, "message": error.message} for error in exc.errors],
        },
    )


async def _batch_validation_error_handler(
    request: Request, exc: BatchValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation failed",
            "rowErrors": [
                {"row": row_error.row, "errors": row_error.messages()}
                for row_error in exc.row_errors
            ],
        },
    )


async def _batch_too_large_handler(request: Request, exc: BatchTooLargeError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)})


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"message": str(exc) or "Not found"}
    )


async def _authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"message": str(exc) or "Authentication required"},
    )


async def _authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN, content={"message": str(exc) or "Forbidden"}
    )


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS, content={"message": str(exc)}
    )


async def _persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    # The adapter already logged the underlying database error
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": PERSISTENCE_ERROR_MESSAGE},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register domain exception handlers on the application.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(BatchValidationError, _batch_validation_error_handler)
    app.add_exception_handler(BatchTooLargeError, _batch_too_large_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(AuthenticationError, _authentication_error_handler)
    app.add_exception_handler(AuthorizationError, _authorization_error_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(PersistenceError, _persistence_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
