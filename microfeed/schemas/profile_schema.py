from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
import uuid

HANDLE_PATTERN = r"^[A-Za-z0-9_]+$"

class ProfileBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    bio: str = Field("", max_length=500)
    avatar_url: Optional[str] = None

class ProfileCreate(ProfileBase):
    handle: str = Field(..., min_length=3, max_length=30, pattern=HANDLE_PATTERN)

class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = None

class ProfileResponse(ProfileBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    handle: str
    is_admin: bool = False
    created_at: datetime
    updated_at: datetime

class ProfileWithStats(ProfileResponse):
    follower_count: int = 0
    following_count: int = 0
    you_follow: bool = False
