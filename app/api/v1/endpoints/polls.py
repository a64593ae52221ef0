from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import List, Optional
import logging

from app.db.database import get_db
from app.models.user import User
from app.schemas.poll import (
    PollCreate,
    PollUpdate,
    PollView,
    VoteCreate,
    VoteRead,
    VoteResponse,
    LikeToggleResponse,
    MessageResponse
)
from app.schemas.comment import CommentCreate, CommentWithUser
from app.api.v1.endpoints.dependencies import get_current_user, get_current_user_optional
from app.core.constants import ErrorMessages, PollSort
from app.core.exception import InputValidationError
from app.services import aggregation
from app.services import polls as poll_service
from app.services import votes as vote_service
from app.services import engagement as engagement_service
from app.services.regions import get_selected_region

from app.api.v1.responses import (
    get_poll_list_responses,
    get_single_poll_responses,
    get_poll_create_responses,
    get_poll_update_responses,
    get_poll_delete_responses,
    get_poll_vote_responses,
    get_poll_like_responses,
    get_comment_list_responses,
    get_comment_create_responses
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/polls", tags=["polls"])


def _user_id(user: Optional[User]) -> Optional[int]:
    return user.id if user else None


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get(
    "/",
    response_model=List[PollView],
    summary="List polls visible from a region",
    description=(
        "Country level shows every poll, a province shows its own polls and those of its cities, "
        "a city shows only its own. Without region_id the signed-in user's selected region is used."
    ),
    responses=get_poll_list_responses()
)
def list_polls(
    region_id: Optional[int] = Query(None, gt=0, description="Region the user is browsing"),
    search: Optional[str] = Query(None, description="Case-insensitive match on question or option text"),
    sort_by: Optional[PollSort] = Query(None, description="participants, newest or oldest"),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    if region_id is None and current_user is not None:
        selected = get_selected_region(db, current_user.id)
        region_id = selected.id if selected else None

    if region_id is None:
        raise InputValidationError(ErrorMessages.REGION_REQUIRED)

    logger.info(f"Listing polls for region {region_id} (user: {_user_id(current_user)}, sort: {sort_by})")
    return aggregation.list_polls_for_region(
        db,
        region_id,
        user_id=_user_id(current_user),
        search=search,
        sort_by=sort_by
    )


@router.get(
    "/{poll_id}",
    response_model=PollView,
    summary="Get a poll",
    responses=get_single_poll_responses()
)
def get_poll(
    poll_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    return aggregation.get_poll_view(db, poll_id, _user_id(current_user))


@router.post(
    "/",
    response_model=PollView,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new poll",
    description="Create a poll with its options in a region. The authenticated user becomes the creator.",
    responses=get_poll_create_responses()
)
def create_poll(
    poll: PollCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} attempting to create poll in region {poll.region_id}")
    created = poll_service.create_poll(
        db,
        creator_id=current_user.id,
        question=poll.question,
        option_texts=poll.options,
        region_id=poll.region_id,
        is_active=poll.is_active,
        ends_at=poll.ends_at
    )
    return aggregation.get_poll_view(db, created.id, current_user.id)


@router.put(
    "/{poll_id}",
    response_model=PollView,
    summary="Replace a poll's question and options",
    description=(
        "Only the creator may update a poll. Every existing option and every ballot is discarded; "
        "the new options start at zero votes."
    ),
    responses=get_poll_update_responses()
)
def update_poll(
    poll_id: int,
    poll_update: PollUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} attempting to update poll {poll_id}")
    poll_service.update_poll(
        db,
        poll_id,
        requesting_user_id=current_user.id,
        new_question=poll_update.question,
        new_option_texts=poll_update.options
    )
    return aggregation.get_poll_view(db, poll_id, current_user.id)


@router.delete(
    "/{poll_id}",
    response_model=MessageResponse,
    summary="Delete a poll",
    description="Only the creator may delete a poll. Options, ballots, comments and likes go with it.",
    responses=get_poll_delete_responses()
)
def delete_poll(
    poll_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} attempting to delete poll {poll_id}")
    poll_service.delete_poll(db, poll_id, current_user.id)
    return MessageResponse(
        message="Poll deleted successfully",
        poll_id=poll_id,
        timestamp=_timestamp()
    )


@router.post(
    "/{poll_id}/votes",
    response_model=VoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Vote on a poll",
    description="Cast the caller's single ballot on the poll. A second ballot is rejected with 409.",
    responses=get_poll_vote_responses()
)
def vote_on_poll(
    poll_id: int,
    vote_data: VoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    vote = vote_service.cast_vote(db, current_user.id, poll_id, vote_data.option_id)
    return VoteResponse(
        message="Vote recorded successfully",
        vote=VoteRead.model_validate(vote),
        poll=aggregation.get_poll_view(db, poll_id, current_user.id)
    )


@router.post(
    "/{poll_id}/like",
    response_model=LikeToggleResponse,
    summary="Like or unlike a poll",
    responses=get_poll_like_responses()
)
def toggle_like(
    poll_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = engagement_service.toggle_like(db, current_user.id, poll_id)
    return LikeToggleResponse(liked=result.liked, likes_count=result.likes_count)


@router.get(
    "/{poll_id}/comments",
    response_model=List[CommentWithUser],
    summary="List a poll's comments",
    description="Comments with their authors, newest first.",
    responses=get_comment_list_responses()
)
def list_comments(poll_id: int, db: Session = Depends(get_db)):
    return engagement_service.list_poll_comments(db, poll_id)


@router.post(
    "/{poll_id}/comments",
    response_model=CommentWithUser,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a poll",
    responses=get_comment_create_responses()
)
def add_comment(
    poll_id: int,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return engagement_service.add_comment(db, poll_id, current_user.id, comment.text)
