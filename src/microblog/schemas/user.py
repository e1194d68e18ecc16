"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from microblog.models.user import UserStatus
from microblog.schemas.post import PostOut


class UserOut(BaseModel):
    """Public view of a local account."""

    id: int
    username: str
    status: UserStatus
    is_provisional: bool
    member_since: datetime
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UsernameRequest(BaseModel):
    """Schema for choosing the permanent username."""

    username: str = Field(..., description="Desired username (1-32 characters)")


class LocalAuthRequest(BaseModel):
    """Username-only registration or login, when enabled."""

    username: str = Field(..., description="Username to register or log in as")


class AuthResponse(BaseModel):
    """Session token plus where the client should go next."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
    is_provisional: bool = Field(..., description="True until a username is chosen")
    next: Literal["/", "/username"] = Field(..., description="Suggested next page")
    user: UserOut


class ProfileResponse(BaseModel):
    """The caller's account and their own posts."""

    user: UserOut
    posts: list[PostOut]
