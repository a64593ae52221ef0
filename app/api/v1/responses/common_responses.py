"""
Common reusable response definitions for FastAPI endpoints.

This module contains response configurations that are shared across multiple endpoints,
promoting consistency and reducing duplication in OpenAPI documentation.
"""

from app.schemas.error import (
    ValidationErrorResponse,
    AuthErrorResponse,
    ForbiddenErrorResponse,
    NotFoundErrorResponse,
    ConflictErrorResponse,
    ServerErrorResponse
)

# Constants for common values
CONTENT_TYPE_JSON = "application/json"
EXAMPLE_TIMESTAMP = "2024-01-01T12:00:00Z"
EXAMPLE_REQUEST_ID = "1a2b3c4d"
EXAMPLE_API_PATH = "/api/v1/endpoint"
VALIDATION_FAILED_MESSAGE = "Validation failed"
VALIDATION_ERROR_CODE = "VALIDATION_ERROR"


# Common authentication error response
AUTH_ERROR_RESPONSE = {
    "description": "Authentication required",
    "model": AuthErrorResponse,
    "content": {
        CONTENT_TYPE_JSON: {
            "example": {
                "message": "Not authenticated",
                "error_code": "HTTP_ERROR",
                "timestamp": EXAMPLE_TIMESTAMP,
                "path": EXAMPLE_API_PATH,
                "request_id": EXAMPLE_REQUEST_ID
            }
        }
    }
}


def get_validation_error_response(message: str = VALIDATION_FAILED_MESSAGE, path: str = EXAMPLE_API_PATH):
    """Generate validation error response with context-specific message and path."""
    return {
        "description": "Validation error",
        "model": ValidationErrorResponse,
        "content": {
            CONTENT_TYPE_JSON: {
                "example": {
                    "message": message,
                    "error_code": VALIDATION_ERROR_CODE,
                    "timestamp": EXAMPLE_TIMESTAMP,
                    "path": path,
                    "request_id": EXAMPLE_REQUEST_ID
                }
            }
        }
    }


def get_not_found_response(message: str = "Resource not found", path: str = EXAMPLE_API_PATH, **ids):
    """Generate not found response for a specific resource type."""
    return {
        "description": message,
        "model": NotFoundErrorResponse,
        "content": {
            CONTENT_TYPE_JSON: {
                "example": {
                    "message": message,
                    "error_code": "RESOURCE_NOT_FOUND",
                    **ids,
                    "timestamp": EXAMPLE_TIMESTAMP,
                    "path": path,
                    "request_id": EXAMPLE_REQUEST_ID
                }
            }
        }
    }


def get_forbidden_response(message: str, path: str = EXAMPLE_API_PATH, **ids):
    """Generate ownership error response."""
    return {
        "description": "Caller is not the owner of the resource",
        "model": ForbiddenErrorResponse,
        "content": {
            CONTENT_TYPE_JSON: {
                "example": {
                    "message": message,
                    "error_code": "INSUFFICIENT_PERMISSIONS",
                    **ids,
                    "timestamp": EXAMPLE_TIMESTAMP,
                    "path": path,
                    "request_id": EXAMPLE_REQUEST_ID
                }
            }
        }
    }


def get_conflict_response(message: str, path: str = EXAMPLE_API_PATH, **ids):
    """Generate duplicate ballot response."""
    return {
        "description": "Conflicting request",
        "model": ConflictErrorResponse,
        "content": {
            CONTENT_TYPE_JSON: {
                "example": {
                    "message": message,
                    "error_code": "ALREADY_VOTED",
                    **ids,
                    "timestamp": EXAMPLE_TIMESTAMP,
                    "path": path,
                    "request_id": EXAMPLE_REQUEST_ID
                }
            }
        }
    }


# Common server error response
def get_server_error_response(error_code: str = "INTERNAL_ERROR", path: str = EXAMPLE_API_PATH):
    """Generate server error response with context-specific error code and path."""
    return {
        "description": "Internal server error",
        "model": ServerErrorResponse,
        "content": {
            CONTENT_TYPE_JSON: {
                "example": {
                    "message": "Database operation failed" if error_code == "DATABASE_ERROR" else "An unexpected error occurred",
                    "error_code": error_code,
                    "timestamp": EXAMPLE_TIMESTAMP,
                    "path": path,
                    "request_id": EXAMPLE_REQUEST_ID
                }
            }
        }
    }


# Shorthand references for common responses
VALIDATION_ERROR_RESPONSE = get_validation_error_response()
SERVER_ERROR_RESPONSE = get_server_error_response()
