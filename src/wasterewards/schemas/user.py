"""Pydantic schemas for user registration."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Incoming payload for registering a user."""

    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=2, max_length=255)


class UserRead(BaseModel):
    """Lightweight projection of user details."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    email: str
    name: str
    created_at: datetime
