"""
Poll-specific response definitions for FastAPI endpoints.

This module contains response configurations specific to poll, ballot, like
and comment operations, building upon common responses for maximum reusability.
"""

from app.core.constants import ErrorMessages
from .common_responses import (
    AUTH_ERROR_RESPONSE,
    get_validation_error_response,
    get_not_found_response,
    get_forbidden_response,
    get_conflict_response,
    get_server_error_response,
)

# Constants for poll paths
POLLS_BASE_PATH = "/api/v1/polls/"
POLL_PATH = "/api/v1/polls/1"
POLL_VOTES_PATH = "/api/v1/polls/1/votes"
POLL_LIKE_PATH = "/api/v1/polls/1/like"
POLL_COMMENTS_PATH = "/api/v1/polls/1/comments"
COMMENT_PATH = "/api/v1/comments/1"

POLL_NOT_FOUND_RESPONSE = get_not_found_response(ErrorMessages.POLL_NOT_FOUND, POLL_PATH, poll_id=1)


def get_poll_list_responses():
    """Response set for the region poll listing."""
    return {
        404: get_not_found_response(ErrorMessages.REGION_NOT_FOUND, POLLS_BASE_PATH, region_id=999),
        422: get_validation_error_response(ErrorMessages.REGION_REQUIRED, POLLS_BASE_PATH),
        500: get_server_error_response("DATABASE_ERROR", POLLS_BASE_PATH),
    }


def get_single_poll_responses():
    """Response set for fetching one poll."""
    return {
        404: POLL_NOT_FOUND_RESPONSE,
        500: get_server_error_response("DATABASE_ERROR", POLL_PATH),
    }


def get_poll_create_responses():
    """Response set for poll creation."""
    return {
        401: AUTH_ERROR_RESPONSE,
        404: get_not_found_response(ErrorMessages.REGION_NOT_FOUND, POLLS_BASE_PATH, region_id=999),
        422: get_validation_error_response(ErrorMessages.TOO_FEW_OPTIONS, POLLS_BASE_PATH),
        500: get_server_error_response("DATABASE_ERROR", POLLS_BASE_PATH),
    }


def get_poll_update_responses():
    """Response set for replacing a poll's question and options."""
    return {
        401: AUTH_ERROR_RESPONSE,
        403: get_forbidden_response(ErrorMessages.NOT_AUTHORIZED_UPDATE, POLL_PATH, poll_id=1),
        404: POLL_NOT_FOUND_RESPONSE,
        422: get_validation_error_response(ErrorMessages.TOO_FEW_OPTIONS, POLL_PATH),
        500: get_server_error_response("DATABASE_ERROR", POLL_PATH),
    }


def get_poll_delete_responses():
    """Response set for poll deletion."""
    return {
        401: AUTH_ERROR_RESPONSE,
        403: get_forbidden_response(ErrorMessages.NOT_AUTHORIZED_DELETE, POLL_PATH, poll_id=1),
        404: POLL_NOT_FOUND_RESPONSE,
        500: get_server_error_response("DATABASE_ERROR", POLL_PATH),
    }


def get_poll_vote_responses():
    """Response set for casting a ballot."""
    return {
        401: AUTH_ERROR_RESPONSE,
        404: get_not_found_response(ErrorMessages.OPTION_NOT_IN_POLL, POLL_VOTES_PATH, poll_id=1, option_id=7),
        409: get_conflict_response(ErrorMessages.ALREADY_VOTED, POLL_VOTES_PATH, poll_id=1),
        500: get_server_error_response("DATABASE_ERROR", POLL_VOTES_PATH),
    }


def get_poll_like_responses():
    """Response set for toggling a like."""
    return {
        401: AUTH_ERROR_RESPONSE,
        404: get_not_found_response(ErrorMessages.POLL_NOT_FOUND, POLL_LIKE_PATH, poll_id=1),
        500: get_server_error_response("DATABASE_ERROR", POLL_LIKE_PATH),
    }


def get_comment_list_responses():
    """Response set for listing a poll's comments."""
    return {
        404: get_not_found_response(ErrorMessages.POLL_NOT_FOUND, POLL_COMMENTS_PATH, poll_id=1),
    }


def get_comment_create_responses():
    """Response set for adding a comment."""
    return {
        401: AUTH_ERROR_RESPONSE,
        404: get_not_found_response(ErrorMessages.POLL_NOT_FOUND, POLL_COMMENTS_PATH, poll_id=1),
        422: get_validation_error_response(ErrorMessages.COMMENT_REQUIRED, POLL_COMMENTS_PATH),
        500: get_server_error_response("DATABASE_ERROR", POLL_COMMENTS_PATH),
    }


def get_comment_delete_responses():
    """Response set for deleting a comment."""
    return {
        401: AUTH_ERROR_RESPONSE,
        403: get_forbidden_response(ErrorMessages.NOT_AUTHORIZED_DELETE_COMMENT, COMMENT_PATH, comment_id=1),
        404: get_not_found_response(ErrorMessages.COMMENT_NOT_FOUND, COMMENT_PATH, comment_id=1),
        500: get_server_error_response("DATABASE_ERROR", COMMENT_PATH),
    }
