"""
Ballot casting.

A ballot is inserted before anything else; the unique (poll_id, user_id)
constraint on the votes table turns a second ballot (including one racing in
from a concurrent request) into AlreadyVotedError. The counter increment is a
single ``vote_count = vote_count + 1`` statement in the same transaction.
"""

from typing import Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.models.polls import PollOption, Vote
from app.core.constants import ErrorMessages
from app.core.exception import NotFoundError, AlreadyVotedError, StorageError
from app.services.polls import get_poll

logger = logging.getLogger(__name__)


def get_user_vote_option(db: Session, user_id: int, poll_id: int) -> Optional[int]:
    """Option the user picked in the poll, or None if they have not voted"""
    row = db.query(Vote.option_id).filter(Vote.user_id == user_id, Vote.poll_id == poll_id).first()
    return row[0] if row else None


def has_user_voted(db: Session, user_id: int, poll_id: int) -> bool:
    return get_user_vote_option(db, user_id, poll_id) is not None


def cast_vote(db: Session, user_id: int, poll_id: int, option_id: int) -> Vote:
    """Record the user's only ballot for the poll and bump the option counter by one"""
    get_poll(db, poll_id)

    option = db.query(PollOption).filter(PollOption.id == option_id).first()
    if option is None:
        raise NotFoundError(ErrorMessages.POLL_OPTION_NOT_FOUND, poll_id=poll_id, option_id=option_id)
    if option.poll_id != poll_id:
        logger.warning(f"Option {option_id} does not belong to poll {poll_id}, belongs to poll {option.poll_id}")
        raise NotFoundError(ErrorMessages.OPTION_NOT_IN_POLL, poll_id=poll_id, option_id=option_id)

    vote = Vote(user_id=user_id, poll_id=poll_id, option_id=option_id)

    try:
        db.add(vote)
        db.flush()

        db.query(PollOption).filter(PollOption.id == option_id).update(
            {PollOption.vote_count: PollOption.vote_count + 1},
            synchronize_session=False
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if has_user_voted(db, user_id, poll_id):
            logger.warning(f"User {user_id} attempted to vote again on poll {poll_id}")
            raise AlreadyVotedError(poll_id=poll_id) from e
        logger.error(f"Integrity error recording vote on poll {poll_id}, option {option_id}: {e}")
        raise StorageError(poll_id=poll_id, option_id=option_id) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error recording vote on poll {poll_id}, option {option_id}: {e}")
        raise StorageError(poll_id=poll_id, option_id=option_id) from e

    db.refresh(vote)
    logger.info(f"Vote recorded: ID {vote.id}, poll {poll_id}, option {option_id}, user {user_id}")
    return vote
