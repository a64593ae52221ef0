from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional

from app.core.constants import AuthConfig, BusinessLimits

# Define a schema for creating a new user
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(
        ...,
        min_length=AuthConfig.MIN_PASSWORD_LENGTH,
        max_length=AuthConfig.MAX_PASSWORD_LENGTH
    )
    full_name: Optional[str] = Field(None, max_length=BusinessLimits.MAX_FULL_NAME_LENGTH)
    username: str = Field(
        ...,
        min_length=BusinessLimits.MIN_USERNAME_LENGTH,
        max_length=BusinessLimits.MAX_USERNAME_LENGTH
    )
    is_active: bool = True

# Define a schema for reading user data
class UserRead(BaseModel):
    id: int
    email: EmailStr
    full_name: Optional[str] = None
    username: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

# Public view of a user embedded in polls and comments (no email)
class UserSummary(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
