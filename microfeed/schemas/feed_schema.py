from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime
import uuid

class AuthorInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    handle: str
    name: str
    avatar_url: Optional[str] = None

class LinkPreviewInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

class FeedPost(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    content: str
    image_url: Optional[str] = None
    created_at: datetime
    author: AuthorInfo
    like_count: int = 0
    liked: bool = False
    hashtags: List[str] = []
    link_previews: List[LinkPreviewInfo] = []

class FeedPage(BaseModel):
    posts: List[FeedPost]
    limit: int
    # created_at of the last post; pass back as ``cursor`` for the next page
    next_cursor: Optional[datetime] = None
    # A full page is assumed to have more; an exact-multiple last page
    # therefore reports True and the following request comes back empty.
    has_more: bool = False
