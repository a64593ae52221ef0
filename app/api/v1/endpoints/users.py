from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.db.database import get_db
from app.models.user import User
from app.schemas.user import UserRead
from app.schemas.region import RegionRead, SelectedRegionUpdate
from app.schemas.comment import CommentWithPoll
from app.services import regions as region_service
from app.services import engagement as engagement_service
from app.api.v1.endpoints.dependencies import get_current_user
from app.api.v1.responses import AUTH_ERROR_RESPONSE, get_selected_region_responses

# Setup logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead, responses={401: AUTH_ERROR_RESPONSE})
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return current_user


@router.get(
    "/me/selected-region",
    response_model=Optional[RegionRead],
    summary="Get the region the user browses",
    description="Returns null when the user has not picked a region yet.",
    responses={401: AUTH_ERROR_RESPONSE}
)
def get_selected_region(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return region_service.get_selected_region(db, current_user.id)


@router.put(
    "/me/selected-region",
    response_model=RegionRead,
    summary="Select the region the user browses",
    responses=get_selected_region_responses()
)
def set_selected_region(
    selection: SelectedRegionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} selecting region {selection.region_id}")
    return region_service.set_selected_region(db, current_user.id, selection.region_id)


@router.get(
    "/me/comments",
    response_model=List[CommentWithPoll],
    summary="List the user's comments",
    description="Every comment the user wrote, newest first, with the poll and region it belongs to.",
    responses={401: AUTH_ERROR_RESPONSE}
)
def get_my_comments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return engagement_service.list_user_comments(db, current_user.id)
