from sqlalchemy import Column, String, Boolean, Text, DateTime, Uuid, CheckConstraint, Index
from microfeed.db.base import BaseModel, utcnow

class Profile(BaseModel):
    __tablename__ = "profiles"

    # Identity key issued by the identity provider, never generated here
    id = Column(Uuid, primary_key=True)
    handle = Column(String(30), unique=True, index=True, nullable=False)
    name = Column(Text, nullable=False)
    bio = Column(Text, default="", nullable=False)
    avatar_url = Column(Text)
    is_admin = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            'length(handle) >= 3 AND length(handle) <= 30',
            name='handle_length'
        ),
        Index('ix_profiles_created_at', 'created_at'),
    )
