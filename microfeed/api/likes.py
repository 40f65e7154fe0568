from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid
import logging

from microfeed.schemas.like_schema import LikeResponse, LikeState
from microfeed.services.auth_service import get_current_user, get_optional_identity
from microfeed.services.exceptions import MicrofeedError
from microfeed.services.like_service import LikeService
from microfeed.db.session import get_db
from microfeed.models.profile import Profile
from microfeed.utils.rate_limit import limiter, write_limit

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/posts/{post_id}", response_model=LikeResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(write_limit)
async def like_post(
    request: Request,
    post_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Like a post"""
    try:
        like_service = LikeService(db)
        return await like_service.like_post(current_user.id, post_id)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Error liking post {post_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to like post"
        )

@router.delete("/posts/{post_id}")
@limiter.limit(write_limit)
async def unlike_post(
    request: Request,
    post_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove your like from a post"""
    try:
        like_service = LikeService(db)
        removed = await like_service.unlike_post(current_user.id, post_id)
        return {"message": "Unliked" if removed else "Not liked", "removed": removed}
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Error unliking post {post_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unlike post"
        )

@router.get("/posts/{post_id}", response_model=LikeState)
async def get_like_state(
    post_id: uuid.UUID,
    viewer_id: Optional[uuid.UUID] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    """Like count of a post and whether you liked it"""
    try:
        like_service = LikeService(db)
        liked = False
        if viewer_id is not None:
            liked = await like_service.is_liked(viewer_id, post_id)

        return LikeState(
            post_id=post_id,
            like_count=await like_service.get_like_count(post_id),
            liked=liked
        )
    except Exception as e:
        logger.error(f"Error getting likes of post {post_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get likes"
        )
