"""Comments and likes on polls."""

from dataclasses import dataclass
from typing import List
import logging

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.models.polls import Poll, Comment, Like
from app.core.constants import BusinessLimits, ErrorMessages
from app.core.exception import NotFoundError, ForbiddenError, InputValidationError, StorageError
from app.services.polls import get_poll

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeToggle:
    liked: bool
    likes_count: int


def add_comment(db: Session, poll_id: int, user_id: int, text: str) -> Comment:
    get_poll(db, poll_id)

    content = (text or "").strip()
    if not content:
        raise InputValidationError(ErrorMessages.COMMENT_REQUIRED, poll_id=poll_id)
    if len(content) > BusinessLimits.MAX_COMMENT_LENGTH:
        raise InputValidationError(ErrorMessages.COMMENT_TOO_LONG, poll_id=poll_id)

    comment = Comment(poll_id=poll_id, user_id=user_id, content=content)
    try:
        db.add(comment)
        db.commit()
        db.refresh(comment)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error adding comment to poll {poll_id}: {e}")
        raise StorageError(poll_id=poll_id) from e

    logger.info(f"Comment created: ID {comment.id}, poll {poll_id}, user {user_id}")
    return comment


def delete_comment(db: Session, comment_id: int, user_id: int) -> None:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if comment is None:
        raise NotFoundError(ErrorMessages.COMMENT_NOT_FOUND, comment_id=comment_id)
    if comment.user_id != user_id:
        logger.warning(f"User {user_id} attempted to delete comment {comment_id} written by user {comment.user_id}")
        raise ForbiddenError(ErrorMessages.NOT_AUTHORIZED_DELETE_COMMENT, comment_id=comment_id)

    try:
        db.delete(comment)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error deleting comment {comment_id}: {e}")
        raise StorageError(comment_id=comment_id) from e

    logger.info(f"Comment deleted: ID {comment_id}, by user {user_id}")


def list_poll_comments(db: Session, poll_id: int) -> List[Comment]:
    """Comments on a poll with their authors, newest first"""
    get_poll(db, poll_id)
    return (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.poll_id == poll_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


def list_user_comments(db: Session, user_id: int) -> List[Comment]:
    """Everything a user has written, with the poll (and its region) each comment is on"""
    return (
        db.query(Comment)
        .options(
            joinedload(Comment.user),
            joinedload(Comment.poll).joinedload(Poll.region)
        )
        .filter(Comment.user_id == user_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


def count_likes(db: Session, poll_id: int) -> int:
    return db.query(Like).filter(Like.poll_id == poll_id).count()


def has_user_liked(db: Session, user_id: int, poll_id: int) -> bool:
    return db.query(Like.id).filter(Like.user_id == user_id, Like.poll_id == poll_id).first() is not None


def toggle_like(db: Session, user_id: int, poll_id: int) -> LikeToggle:
    """
    Like the poll if the user has not liked it yet, otherwise remove the like.

    The insert is guarded by the unique (poll_id, user_id) constraint: when a
    concurrent toggle inserted the like first, the poll simply stays liked.
    """
    get_poll(db, poll_id)

    try:
        removed = db.query(Like).filter(
            Like.user_id == user_id,
            Like.poll_id == poll_id
        ).delete(synchronize_session=False)

        if removed:
            liked = False
        else:
            db.add(Like(user_id=user_id, poll_id=poll_id))
            db.flush()
            liked = True

        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent like by user {user_id} on poll {poll_id}; keeping the existing like")
        liked = True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error toggling like on poll {poll_id}: {e}")
        raise StorageError(poll_id=poll_id) from e

    likes_count = count_likes(db, poll_id)
    logger.info(f"User {user_id} {'liked' if liked else 'unliked'} poll {poll_id} ({likes_count} likes)")
    return LikeToggle(liked=liked, likes_count=likes_count)
