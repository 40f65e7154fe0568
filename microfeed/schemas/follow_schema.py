from pydantic import BaseModel, ConfigDict
from datetime import datetime
import uuid

class FollowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    follower_id: uuid.UUID
    following_id: uuid.UUID
    created_at: datetime

class FollowStatus(BaseModel):
    follower_id: uuid.UUID
    following_id: uuid.UUID
    following: bool

class FollowStats(BaseModel):
    user_id: uuid.UUID
    follower_count: int
    following_count: int
