from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Optional
import uuid
import logging

from microfeed.config import settings
from microfeed.schemas.feed_schema import FeedPage
from microfeed.services.auth_service import get_current_user, get_optional_identity
from microfeed.services.exceptions import MicrofeedError, NotFoundError
from microfeed.services.feed_service import FeedService
from microfeed.services.profile_service import ProfileService
from microfeed.db.session import get_db
from microfeed.models.profile import Profile

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/", response_model=FeedPage)
async def get_home_feed(
    cursor: Optional[datetime] = Query(None, description="created_at of the last post already seen"),
    limit: int = Query(settings.FEED_PAGE_SIZE, ge=1, le=settings.FEED_MAX_PAGE_SIZE),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Your posts and the posts of everyone you follow, newest first"""
    try:
        feed_service = FeedService(db)
        return await feed_service.get_home_feed(current_user.id, cursor, limit)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Error getting home feed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get feed"
        )

@router.get("/profiles/{handle}", response_model=FeedPage)
async def get_profile_feed(
    handle: str,
    cursor: Optional[datetime] = Query(None, description="created_at of the last post already seen"),
    limit: int = Query(settings.FEED_PAGE_SIZE, ge=1, le=settings.FEED_MAX_PAGE_SIZE),
    viewer_id: Optional[uuid.UUID] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    """Posts by one profile, newest first"""
    try:
        profile = await ProfileService(db).get_profile_by_handle(handle)
        if not profile:
            raise NotFoundError("Profile not found")

        feed_service = FeedService(db)
        return await feed_service.get_profile_feed(profile.id, viewer_id, cursor, limit)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Error getting feed for @{handle}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get feed"
        )
