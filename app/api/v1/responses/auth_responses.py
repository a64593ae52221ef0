"""
Authentication, user and region response definitions for FastAPI endpoints.
"""

from app.core.constants import ErrorMessages
from app.schemas.error import AuthErrorResponse, ValidationErrorResponse
from .common_responses import (
    AUTH_ERROR_RESPONSE,
    CONTENT_TYPE_JSON,
    EXAMPLE_TIMESTAMP,
    EXAMPLE_REQUEST_ID,
    get_not_found_response,
    get_server_error_response,
)

# Constants for paths
REGISTER_PATH = "/api/v1/auth/register"
TOKEN_PATH = "/api/v1/auth/token"
REGIONS_PATH = "/api/v1/regions"
SELECTED_REGION_PATH = "/api/v1/users/me/selected-region"


def get_registration_responses():
    """Response set for user registration."""
    return {
        400: {
            "description": "Email or username already registered",
            "model": ValidationErrorResponse,
            "content": {
                CONTENT_TYPE_JSON: {
                    "example": {
                        "message": ErrorMessages.DUPLICATE_EMAIL,
                        "error_code": "DUPLICATE_RESOURCE",
                        "timestamp": EXAMPLE_TIMESTAMP,
                        "path": REGISTER_PATH,
                        "request_id": EXAMPLE_REQUEST_ID
                    }
                }
            }
        },
        500: get_server_error_response("DATABASE_ERROR", REGISTER_PATH),
    }


def get_token_responses():
    """Response set for issuing an access token."""
    return {
        401: {
            "description": "Invalid credentials",
            "model": AuthErrorResponse,
            "content": {
                CONTENT_TYPE_JSON: {
                    "example": {
                        "message": ErrorMessages.INVALID_CREDENTIALS,
                        "error_code": "INVALID_CREDENTIALS",
                        "timestamp": EXAMPLE_TIMESTAMP,
                        "path": TOKEN_PATH,
                        "request_id": EXAMPLE_REQUEST_ID
                    }
                }
            }
        },
    }


def get_region_responses():
    """Response set for reading one region."""
    return {
        404: get_not_found_response(ErrorMessages.REGION_NOT_FOUND, f"{REGIONS_PATH}/999", region_id=999),
    }


def get_selected_region_responses():
    """Response set for the user's selected region."""
    return {
        401: AUTH_ERROR_RESPONSE,
        404: get_not_found_response(ErrorMessages.REGION_NOT_FOUND, SELECTED_REGION_PATH, region_id=999),
        500: get_server_error_response("DATABASE_ERROR", SELECTED_REGION_PATH),
    }
