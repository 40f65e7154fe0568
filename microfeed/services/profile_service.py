from typing import Optional
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
import logging

from microfeed.models.profile import Profile
from microfeed.schemas.profile_schema import ProfileCreate, ProfileUpdate
from microfeed.services.exceptions import AuthorizationError, ConstraintViolation, NotFoundError

logger = logging.getLogger(__name__)

class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_profile(self, identity_id: uuid.UUID, profile_data: ProfileCreate) -> Profile:
        """Create the profile for a freshly signed-up identity"""
        profile = Profile(
            id=identity_id,
            handle=profile_data.handle,
            name=profile_data.name,
            bio=profile_data.bio,
            avatar_url=profile_data.avatar_url,
        )
        self.db.add(profile)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Error creating profile {profile_data.handle}: {e.orig}")
            raise ConstraintViolation(str(e.orig)) from e

        await self.db.refresh(profile)
        logger.info(f"Created profile @{profile.handle} for identity {identity_id}")
        return profile

    async def get_profile(self, profile_id: uuid.UUID) -> Optional[Profile]:
        return await self.db.get(Profile, profile_id)

    async def get_profile_by_handle(self, handle: str) -> Optional[Profile]:
        stmt = select(Profile).where(Profile.handle == handle)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def update_profile(
        self,
        actor: Profile,
        profile_id: uuid.UUID,
        profile_update: ProfileUpdate
    ) -> Profile:
        """Update a profile; only its owner may do so"""
        if actor.id != profile_id:
            logger.warning(f"Profile {actor.id} tried to edit profile {profile_id}")
            raise AuthorizationError()

        profile = await self.get_profile(profile_id)
        if profile is None:
            raise NotFoundError("Profile not found")

        update_data = profile_update.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(profile, field, value)

        await self.db.commit()
        await self.db.refresh(profile)
        return profile
