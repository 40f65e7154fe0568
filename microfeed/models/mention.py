from sqlalchemy import Column, ForeignKey, Uuid, Index
from microfeed.db.base import BaseModel

class Mention(BaseModel):
    __tablename__ = "mentions"

    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        Index('ix_mentions_post_id', 'post_id'),
        Index('ix_mentions_user_id', 'user_id'),
    )
