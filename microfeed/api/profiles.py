from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid
import logging

from microfeed.schemas.profile_schema import ProfileCreate, ProfileResponse, ProfileUpdate, ProfileWithStats
from microfeed.services.auth_service import get_current_identity, get_current_user, get_optional_identity
from microfeed.services.exceptions import MicrofeedError, NotFoundError
from microfeed.services.follow_service import FollowService
from microfeed.services.profile_service import ProfileService
from microfeed.db.session import get_db
from microfeed.models.profile import Profile
from microfeed.utils.rate_limit import limiter, write_limit

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(write_limit)
async def create_profile(
    request: Request,
    profile_data: ProfileCreate,
    identity_id: uuid.UUID = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Create the profile of the signed-in identity"""
    try:
        profile_service = ProfileService(db)
        return await profile_service.create_profile(identity_id, profile_data)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Create profile error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create profile"
        )

@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(current_user: Profile = Depends(get_current_user)):
    """Get your own profile"""
    return current_user

@router.patch("/me", response_model=ProfileResponse)
@limiter.limit(write_limit)
async def update_my_profile(
    request: Request,
    profile_update: ProfileUpdate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update your own profile"""
    try:
        profile_service = ProfileService(db)
        return await profile_service.update_profile(current_user, current_user.id, profile_update)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Update profile error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )

@router.get("/{handle}", response_model=ProfileWithStats)
async def get_profile(
    handle: str,
    viewer_id: Optional[uuid.UUID] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    """Get a profile by handle with its follow counts"""
    try:
        profile = await ProfileService(db).get_profile_by_handle(handle)
        if not profile:
            raise NotFoundError("Profile not found")

        follow_service = FollowService(db)
        you_follow = False
        if viewer_id is not None and viewer_id != profile.id:
            you_follow = await follow_service.is_following(viewer_id, profile.id)

        return ProfileWithStats(
            **ProfileResponse.model_validate(profile).model_dump(),
            follower_count=await follow_service.get_follower_count(profile.id),
            following_count=await follow_service.get_following_count(profile.id),
            you_follow=you_follow
        )
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Get profile error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get profile"
        )
