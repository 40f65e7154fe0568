from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid
import logging

from microfeed.schemas.follow_schema import FollowResponse, FollowStats, FollowStatus
from microfeed.services.auth_service import get_current_user
from microfeed.services.exceptions import MicrofeedError
from microfeed.services.follow_service import FollowService
from microfeed.db.session import get_db
from microfeed.models.profile import Profile
from microfeed.utils.rate_limit import limiter, write_limit

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/{profile_id}", response_model=FollowResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(write_limit)
async def follow_profile(
    request: Request,
    profile_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Follow a profile"""
    try:
        follow_service = FollowService(db)
        return await follow_service.follow(current_user.id, profile_id)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Error following {profile_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to follow user"
        )

@router.delete("/{profile_id}")
@limiter.limit(write_limit)
async def unfollow_profile(
    request: Request,
    profile_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Unfollow a profile; unfollowing someone you don't follow is a no-op"""
    try:
        follow_service = FollowService(db)
        removed = await follow_service.unfollow(current_user.id, profile_id)
        return {"message": "Unfollowed" if removed else "Not following", "removed": removed}
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Error unfollowing {profile_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unfollow user"
        )

@router.get("/{profile_id}/status", response_model=FollowStatus)
async def get_follow_status(
    profile_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Whether you follow a profile"""
    try:
        follow_service = FollowService(db)
        following = await follow_service.is_following(current_user.id, profile_id)
        return FollowStatus(
            follower_id=current_user.id,
            following_id=profile_id,
            following=following
        )
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Error getting follow status for {profile_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get follow status"
        )

@router.get("/{profile_id}/stats", response_model=FollowStats)
async def get_follow_stats(
    profile_id: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Follower and following counts of a profile"""
    try:
        follow_service = FollowService(db)
        return FollowStats(
            user_id=profile_id,
            follower_count=await follow_service.get_follower_count(profile_id),
            following_count=await follow_service.get_following_count(profile_id)
        )
    except Exception as e:
        logger.error(f"Error getting follow stats for {profile_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get follow stats"
        )
