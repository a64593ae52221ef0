from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

from app.core.constants import BusinessLimits
from app.schemas.user import UserSummary
from app.schemas.region import RegionRead


class CommentCreate(BaseModel):
    text: str = Field(
        ...,
        max_length=BusinessLimits.MAX_COMMENT_LENGTH,
        description=f"Comment text (1-{BusinessLimits.MAX_COMMENT_LENGTH} characters)",
        json_schema_extra={"example": "The market would be great for local vendors."}
    )


class CommentRead(BaseModel):
    id: int
    poll_id: int
    user_id: int
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentWithUser(CommentRead):
    user: UserSummary


class CommentPollSummary(BaseModel):
    id: int
    question: str
    region: RegionRead

    model_config = ConfigDict(from_attributes=True)


class CommentWithPoll(CommentWithUser):
    """A comment listed on its author's profile, with the poll it belongs to"""
    poll: CommentPollSummary
