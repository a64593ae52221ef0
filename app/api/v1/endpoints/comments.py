from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from app.db.database import get_db
from app.models.user import User
from app.services import engagement as engagement_service
from app.api.v1.endpoints.dependencies import get_current_user
from app.api.v1.responses import get_comment_delete_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    description="Only the author may delete a comment.",
    responses=get_comment_delete_responses()
)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} attempting to delete comment {comment_id}")
    engagement_service.delete_comment(db, comment_id, current_user.id)
