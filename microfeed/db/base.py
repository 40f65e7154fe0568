from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime, Uuid
from datetime import datetime, timezone
import uuid

Base = declarative_base()

def generate_uuid() -> uuid.UUID:
    return uuid.uuid4()

def utcnow() -> datetime:
    """Naive UTC timestamp, matching the naive DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

class BaseModel(Base):
    __abstract__ = True

    id = Column(Uuid, primary_key=True, default=generate_uuid)
    created_at = Column(DateTime, default=utcnow, nullable=False)
