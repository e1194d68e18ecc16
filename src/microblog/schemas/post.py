# src/microblog/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new post.

    Emptiness and length are checked by the service layer so the rejection
    carries a specific reason code.
    """

    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body text")


class PostUpdate(BaseModel):
    """Schema for replacing a post's title and content."""

    title: str = Field(..., description="New title")
    content: str = Field(..., description="New body text")


class PostOut(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    content: str
    author: str
    author_id: int
    timestamp: datetime
    edited: bool
    like_count: int

    model_config = ConfigDict(from_attributes=True)


class LikeResponse(BaseModel):
    """Result of a successful like."""

    post_id: int
    like_count: int
