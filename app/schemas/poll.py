from pydantic import BaseModel, Field, field_validator, ConfigDict
from datetime import datetime
from typing import Optional, List

from app.core.constants import BusinessLimits
from app.schemas.user import UserSummary
from app.schemas.region import RegionRead


def _normalize_text(value: str) -> str:
    # Collapse runs of whitespace; emptiness is judged by the service layer
    return ' '.join(value.split())


# Schema for creating a new poll
class PollCreate(BaseModel):
    question: str = Field(
        ...,
        max_length=BusinessLimits.MAX_POLL_QUESTION_LENGTH,
        description=f'Poll question (max {BusinessLimits.MAX_POLL_QUESTION_LENGTH} characters)',
        json_schema_extra={"example": "Should the city open a night market downtown?"}
    )
    region_id: int = Field(..., gt=0, description="Region the poll is published in")
    is_active: bool = Field(True, description="Whether the poll is active")
    ends_at: Optional[datetime] = Field(None, description="Closing time; omit for an open-ended poll")
    options: List[str] = Field(
        ...,
        description=f"Option texts ({BusinessLimits.MIN_POLL_OPTIONS}-{BusinessLimits.MAX_POLL_OPTIONS})",
        json_schema_extra={"example": ["Yes", "No"]}
    )

    @field_validator('question')
    def validate_question(cls, v):
        return _normalize_text(v)

    @field_validator('options')
    def validate_options(cls, v):
        return [_normalize_text(option) for option in v]


# Schema for replacing a poll's question and options
class PollUpdate(BaseModel):
    question: str = Field(..., max_length=BusinessLimits.MAX_POLL_QUESTION_LENGTH)
    options: List[str] = Field(
        ...,
        description="New option texts; existing options and their ballots are discarded"
    )

    @field_validator('question')
    def validate_question(cls, v):
        return _normalize_text(v)

    @field_validator('options')
    def validate_options(cls, v):
        return [_normalize_text(option) for option in v]


class PollOptionView(BaseModel):
    """An option together with its share of the poll's ballots"""
    id: int
    poll_id: int
    text: str
    vote_count: int = Field(default=0, description="Number of ballots for this option")
    percentage: int = Field(
        default=0,
        description="Rounded share of all ballots; shares are rounded independently and may not sum to 100"
    )

    model_config = ConfigDict(from_attributes=True)


class PollView(BaseModel):
    """Aggregated read model of a poll as seen by one (possibly anonymous) user"""
    id: int
    question: str
    creator: UserSummary
    region: RegionRead
    options: List[PollOptionView]
    total_votes: int
    has_user_voted: bool = False
    user_voted_option_id: Optional[int] = None
    comments_count: int = 0
    likes_count: int = 0
    has_user_liked: bool = False
    is_active: bool
    ends_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "question": "Should the city open a night market downtown?",
                "creator": {"id": 7, "username": "minji", "full_name": None},
                "region": {"id": 20, "name": "Gangnam-gu", "level": "city", "parent_id": 2},
                "options": [
                    {"id": 1, "poll_id": 1, "text": "Yes", "vote_count": 3, "percentage": 75},
                    {"id": 2, "poll_id": 1, "text": "No", "vote_count": 1, "percentage": 25}
                ],
                "total_votes": 4,
                "has_user_voted": True,
                "user_voted_option_id": 1,
                "comments_count": 2,
                "likes_count": 5,
                "has_user_liked": False,
                "is_active": True,
                "ends_at": None,
                "created_at": "2024-01-01T12:00:00Z",
                "updated_at": None
            }
        }
    )


# Vote Schemas
class VoteCreate(BaseModel):
    """Body of a ballot request"""
    option_id: int = Field(..., gt=0, description="ID of the option to vote for")


class VoteRead(BaseModel):
    """Schema for reading vote data"""
    id: int
    user_id: int = Field(..., description="ID of the user who voted")
    poll_id: int = Field(..., description="ID of the poll being voted on")
    option_id: int = Field(..., description="ID of the poll option voted for")
    created_at: datetime = Field(..., description="When the vote was cast")

    model_config = ConfigDict(from_attributes=True)


class VoteResponse(BaseModel):
    """Schema for vote creation response"""
    message: str = Field(..., description="Success message")
    vote: VoteRead = Field(..., description="The recorded vote")
    poll: PollView = Field(..., description="The poll with refreshed tallies")


class LikeToggleResponse(BaseModel):
    """Result of toggling a like"""
    liked: bool = Field(..., description="True if the poll is now liked by the caller")
    likes_count: int = Field(..., description="Likes on the poll after the toggle")


class MessageResponse(BaseModel):
    """Plain acknowledgment of a mutation"""
    message: str
    poll_id: Optional[int] = None
    timestamp: str
