from fastapi import FastAPI, Request, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone
import logging
from typing import Any, Dict, Optional
import traceback
import uuid

from app.core.constants import ErrorCodes, ErrorMessages

logger = logging.getLogger(__name__)


# =============================================================================
# Application error taxonomy
# =============================================================================

class AppError(Exception):
    """
    Base class for every failure the service layer reports to its callers.

    Each subclass carries the HTTP status and error code the API layer should
    answer with, so routers never have to translate errors by hand.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCodes.INTERNAL_ERROR
    default_message = ErrorMessages.INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "error_code": self.error_code, **self.details}


class DomainError(AppError):
    """A request the domain rules refuse; always recoverable by the caller"""


class NotFoundError(DomainError):
    """Referenced region, poll, option or comment does not exist"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCodes.RESOURCE_NOT_FOUND
    default_message = "Resource not found"


class ForbiddenError(DomainError):
    """The actor is not the owner of the resource"""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCodes.INSUFFICIENT_PERMISSIONS
    default_message = "Not authorized to modify this resource"


class AlreadyVotedError(DomainError):
    """A second ballot for the same user and poll"""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCodes.ALREADY_VOTED
    default_message = ErrorMessages.ALREADY_VOTED


class InputValidationError(DomainError):
    """Empty or insufficient input (blank text, too few options, ...)"""
    status_code = 422
    error_code = ErrorCodes.VALIDATION_ERROR
    default_message = ErrorMessages.VALIDATION_ERROR


class StorageError(AppError):
    """The database failed underneath an operation; not a domain rule violation"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCodes.DATABASE_ERROR
    default_message = ErrorMessages.DATABASE_ERROR


# =============================================================================
# Exception handlers
# =============================================================================

def _error_context(request: Request) -> Dict[str, str]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": str(request.url.path),
        "request_id": str(uuid.uuid4())[:8],
    }


async def app_exception_handler(request: Request, exc: AppError):
    """Translate service-layer errors into JSON responses"""
    context = _error_context(request)

    if isinstance(exc, StorageError):
        logger.error(
            f"Storage error [ID: {context['request_id']}] - "
            f"Path: {request.url.path} - "
            f"Error: {exc.message} - "
            f"Cause: {exc.__cause__!r}"
        )
    else:
        logger.warning(
            f"{type(exc).__name__} [ID: {context['request_id']}] - "
            f"Path: {request.url.path} - "
            f"Status: {exc.status_code} - "
            f"Message: {exc.message}"
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({**exc.to_dict(), **context})
    )


async def validation_exception_handler(request: Request, exc: Exception):
    """
    Custom handler for request and Pydantic validation errors
    """
    context = _error_context(request)
    client_ip = request.client.host if request.client else "unknown"
    errors = exc.errors()

    logger.warning(
        f"Validation error [ID: {context['request_id']}] - "
        f"Path: {request.url.path} - "
        f"IP: {client_ip} - "
        f"Errors: {len(errors)} - "
        f"Details: {errors}"
    )

    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({
            "message": ErrorMessages.VALIDATION_ERROR,
            "error_code": ErrorCodes.VALIDATION_ERROR,
            "errors": errors,
            **context
        })
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Enhanced HTTP exception handler
    """
    context = _error_context(request)
    client_ip = request.client.host if request.client else "unknown"

    # Enhanced logging based on error severity
    if exc.status_code >= 500:
        logger.error(
            f"Server error [ID: {context['request_id']}] - "
            f"Status: {exc.status_code} - "
            f"Path: {request.url.path} - "
            f"IP: {client_ip} - "
            f"Detail: {exc.detail}"
        )
    elif exc.status_code >= 400:
        logger.warning(
            f"Client error [ID: {context['request_id']}] - "
            f"Status: {exc.status_code} - "
            f"Path: {request.url.path} - "
            f"IP: {client_ip}"
        )

    # Format response based on detail type
    if isinstance(exc.detail, dict):
        response_content = {**exc.detail, **context}
    else:
        response_content = {
            "message": str(exc.detail),
            "error_code": "HTTP_ERROR",
            **context
        }

    return JSONResponse(
        status_code=exc.status_code,
        content=response_content,
        headers=getattr(exc, "headers", None)
    )


async def database_exception_handler(request: Request, exc: Exception):
    """
    Handler for database errors that escaped the service layer (mostly reads)
    """
    context = _error_context(request)

    logger.error(
        f"Database error [ID: {context['request_id']}] - "
        f"Path: {request.url.path} - "
        f"Error: {str(exc)} - "
        f"Type: {type(exc).__name__}"
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": ErrorMessages.DATABASE_ERROR,
            "error_code": ErrorCodes.DATABASE_ERROR,
            "hint": "Please try again later or contact support",
            **context
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    """
    Catch-all exception handler for unexpected errors
    """
    context = _error_context(request)

    # Get full traceback for debugging
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    logger.critical(
        f"Unexpected error [ID: {context['request_id']}] - "
        f"Path: {request.url.path} - "
        f"Error: {str(exc)} - "
        f"Type: {type(exc).__name__} - "
        f"Traceback: {tb_str}"
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": ErrorMessages.INTERNAL_ERROR,
            "error_code": ErrorCodes.INTERNAL_ERROR,
            **context
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every handler above to an application instance"""
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
