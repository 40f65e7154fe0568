from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
import uuid

class PostBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=280)
    image_url: Optional[str] = None

class PostCreate(PostBase):
    pass

class PostInDB(PostBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime

class DeletedPost(PostInDB):
    is_deleted: bool
    deleted_by: Optional[uuid.UUID] = None
    deleted_at: Optional[datetime] = None
