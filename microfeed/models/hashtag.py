from sqlalchemy import Column, ForeignKey, Text, Uuid
from microfeed.db.base import Base, BaseModel

class Hashtag(BaseModel):
    __tablename__ = "hashtags"

    # Stored lowercased, without the leading '#'
    tag = Column(Text, unique=True, index=True, nullable=False)

class PostHashtag(Base):
    __tablename__ = "post_hashtags"

    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    hashtag_id = Column(Uuid, ForeignKey("hashtags.id", ondelete="CASCADE"), primary_key=True)
