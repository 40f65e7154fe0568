from sqlalchemy import Column, ForeignKey, Uuid, UniqueConstraint, CheckConstraint, Index
from microfeed.db.base import BaseModel

class Follow(BaseModel):
    __tablename__ = "follows"

    follower_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    following_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint('follower_id', 'following_id', name='unique_follow'),
        CheckConstraint('follower_id != following_id', name='no_self_follow'),
        Index('ix_follows_follower_id', 'follower_id'),
        Index('ix_follows_following_id', 'following_id'),
    )
