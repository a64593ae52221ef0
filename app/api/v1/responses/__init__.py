"""
Response definitions for FastAPI endpoints.

This module provides centralized response configurations for OpenAPI documentation,
promoting reusability and maintainability across all API endpoints.
"""

from .common_responses import (
    AUTH_ERROR_RESPONSE,
    VALIDATION_ERROR_RESPONSE,
    SERVER_ERROR_RESPONSE,
    get_validation_error_response,
    get_not_found_response,
    get_forbidden_response,
    get_conflict_response,
    get_server_error_response,
)

from .poll_responses import (
    get_poll_list_responses,
    get_single_poll_responses,
    get_poll_create_responses,
    get_poll_update_responses,
    get_poll_delete_responses,
    get_poll_vote_responses,
    get_poll_like_responses,
    get_comment_list_responses,
    get_comment_create_responses,
    get_comment_delete_responses,
)

from .auth_responses import (
    get_registration_responses,
    get_token_responses,
    get_region_responses,
    get_selected_region_responses,
)

__all__ = [
    # Common responses
    "AUTH_ERROR_RESPONSE",
    "VALIDATION_ERROR_RESPONSE",
    "SERVER_ERROR_RESPONSE",
    "get_validation_error_response",
    "get_not_found_response",
    "get_forbidden_response",
    "get_conflict_response",
    "get_server_error_response",

    # Poll, ballot, like and comment responses
    "get_poll_list_responses",
    "get_single_poll_responses",
    "get_poll_create_responses",
    "get_poll_update_responses",
    "get_poll_delete_responses",
    "get_poll_vote_responses",
    "get_poll_like_responses",
    "get_comment_list_responses",
    "get_comment_create_responses",
    "get_comment_delete_responses",

    # Auth, user and region responses
    "get_registration_responses",
    "get_token_responses",
    "get_region_responses",
    "get_selected_region_responses",
]
