from sqlalchemy import Column, Text, ForeignKey, Boolean, DateTime, Uuid, CheckConstraint, Index
from sqlalchemy.orm import relationship
from microfeed.db.base import BaseModel

class Post(BaseModel):
    __tablename__ = "posts"

    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(Text)

    # Moderation: hidden from every read but kept for audit
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_by = Column(Uuid, ForeignKey("profiles.id"), nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    author = relationship("Profile", foreign_keys=[user_id], lazy="joined")

    __table_args__ = (
        CheckConstraint(
            'length(content) > 0 AND length(content) <= 280',
            name='content_length'
        ),
        Index('ix_posts_user_id', 'user_id'),
        Index('ix_posts_created_at', 'created_at'),
        Index('ix_posts_is_deleted', 'is_deleted'),
    )
