from sqlalchemy import Column, ForeignKey, Uuid, UniqueConstraint, Index
from microfeed.db.base import BaseModel

class Like(BaseModel):
    __tablename__ = "likes"

    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'post_id', name='unique_like'),
        Index('ix_likes_post_id', 'post_id'),
        Index('ix_likes_user_id', 'user_id'),
    )
