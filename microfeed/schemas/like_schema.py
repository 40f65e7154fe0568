from pydantic import BaseModel, ConfigDict
from datetime import datetime
import uuid

class LikeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    post_id: uuid.UUID
    created_at: datetime

class LikeState(BaseModel):
    post_id: uuid.UUID
    like_count: int
    liked: bool
