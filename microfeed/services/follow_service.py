from typing import Set
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, func, and_
import logging

from microfeed.models.follow import Follow
from microfeed.services.exceptions import ConstraintViolation

logger = logging.getLogger(__name__)

class FollowService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def follow(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> Follow:
        """Create a follow relationship.

        Self-follows, duplicate pairs and unknown profiles are rejected by
        the store's constraints and reported as they come back.
        """
        follow = Follow(follower_id=follower_id, following_id=following_id)
        self.db.add(follow)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Error creating follow {follower_id} -> {following_id}: {e.orig}")
            raise ConstraintViolation(str(e.orig)) from e

        await self.db.refresh(follow)
        logger.info(f"Created follow: {follower_id} -> {following_id}")
        return follow

    async def unfollow(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> bool:
        """Delete a follow relationship; returns False when there was none"""
        stmt = delete(Follow).where(
            and_(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            )
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        removed = result.rowcount > 0
        if removed:
            logger.info(f"Deleted follow: {follower_id} -> {following_id}")
        return removed

    async def is_following(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> bool:
        stmt = select(Follow.id).where(
            and_(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_follower_count(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count(Follow.id)).where(Follow.following_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def get_following_count(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count(Follow.id)).where(Follow.follower_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def get_following_ids(self, user_id: uuid.UUID) -> Set[uuid.UUID]:
        """Ids of every profile ``user_id`` follows"""
        stmt = select(Follow.following_id).where(Follow.follower_id == user_id)
        result = await self.db.execute(stmt)
        return set(result.scalars().all())
