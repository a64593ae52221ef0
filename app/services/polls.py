"""
Poll lifecycle: creation and owner-only replacement or deletion.

Update and delete each run as a single transaction; a database failure rolls
the session back so a poll is never left without its options.
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import func

from app.models.polls import Poll, PollOption
from app.core.constants import BusinessLimits, ErrorMessages
from app.core.exception import NotFoundError, ForbiddenError, InputValidationError, StorageError
from app.services.regions import get_region

logger = logging.getLogger(__name__)


def _clean_question(question: Optional[str]) -> str:
    question = (question or "").strip()
    if not question:
        raise InputValidationError(ErrorMessages.QUESTION_REQUIRED)
    if len(question) > BusinessLimits.MAX_POLL_QUESTION_LENGTH:
        raise InputValidationError(ErrorMessages.QUESTION_TOO_LONG)
    return question


def _clean_options(option_texts: Optional[List[str]]) -> List[str]:
    """Trim option texts and drop blank ones, then check the option count"""
    options = [text.strip() for text in (option_texts or []) if text and text.strip()]

    if len(options) < BusinessLimits.MIN_POLL_OPTIONS:
        raise InputValidationError(ErrorMessages.TOO_FEW_OPTIONS, option_count=len(options))
    if len(options) > BusinessLimits.MAX_POLL_OPTIONS:
        raise InputValidationError(ErrorMessages.TOO_MANY_OPTIONS, option_count=len(options))
    if any(len(text) > BusinessLimits.MAX_POLL_OPTION_LENGTH for text in options):
        raise InputValidationError(ErrorMessages.OPTION_TOO_LONG)

    return options


def _as_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    # Timestamps are stored as naive UTC, like the database-side defaults
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def get_poll(db: Session, poll_id: int) -> Poll:
    poll = db.query(Poll).filter(Poll.id == poll_id).first()
    if poll is None:
        raise NotFoundError(ErrorMessages.POLL_NOT_FOUND, poll_id=poll_id)
    return poll


def _require_owner(poll: Poll, user_id: int, message: str) -> None:
    if poll.creator_id != user_id:
        logger.warning(f"User {user_id} attempted to modify poll {poll.id} owned by user {poll.creator_id}")
        raise ForbiddenError(message, poll_id=poll.id)


def create_poll(
    db: Session,
    creator_id: int,
    question: str,
    option_texts: List[str],
    region_id: int,
    is_active: bool = True,
    ends_at: Optional[datetime] = None
) -> Poll:
    """Create a poll together with its options (all counters start at zero)"""
    question = _clean_question(question)
    options = _clean_options(option_texts)
    get_region(db, region_id)

    poll = Poll(
        question=question,
        creator_id=creator_id,
        region_id=region_id,
        is_active=is_active,
        ends_at=_as_utc_naive(ends_at)
    )
    poll.options = [PollOption(text=text, vote_count=0) for text in options]

    try:
        db.add(poll)
        db.commit()
        db.refresh(poll)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating poll for user {creator_id}: {e}")
        raise StorageError() from e

    logger.info(f"Poll created: ID {poll.id}, region {region_id}, {len(options)} options, creator {creator_id}")
    return poll


def update_poll(
    db: Session,
    poll_id: int,
    requesting_user_id: int,
    new_question: str,
    new_option_texts: List[str]
) -> Poll:
    """
    Replace the question and the whole option set of a poll.

    This is a destructive overwrite: every existing option, its counter and
    every ballot cast on the poll are discarded, and the new options start at
    zero votes.
    """
    poll = get_poll(db, poll_id)
    _require_owner(poll, requesting_user_id, ErrorMessages.NOT_AUTHORIZED_UPDATE)

    question = _clean_question(new_question)
    options = _clean_options(new_option_texts)

    try:
        poll.question = question
        poll.votes.clear()
        poll.options = [PollOption(text=text, vote_count=0) for text in options]
        poll.updated_at = func.now()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating poll {poll_id}, changes rolled back: {e}")
        raise StorageError(poll_id=poll_id) from e

    db.refresh(poll)
    logger.info(f"Poll updated: ID {poll_id}, {len(options)} options now")
    return poll


def delete_poll(db: Session, poll_id: int, requesting_user_id: int) -> None:
    """Delete a poll with its options, ballots, comments and likes"""
    poll = get_poll(db, poll_id)
    _require_owner(poll, requesting_user_id, ErrorMessages.NOT_AUTHORIZED_DELETE)

    try:
        db.delete(poll)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error deleting poll {poll_id}, changes rolled back: {e}")
        raise StorageError(poll_id=poll_id) from e

    logger.info(f"Poll deleted: ID {poll_id}, by user {requesting_user_id}")
