import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, func, and_
import logging

from microfeed.models.like import Like
from microfeed.models.post import Post
from microfeed.services.exceptions import ConstraintViolation, NotFoundError

logger = logging.getLogger(__name__)

class LikeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def like_post(self, user_id: uuid.UUID, post_id: uuid.UUID) -> Like:
        """Like a visible post; liking twice is a duplicate-key error"""
        stmt = select(Post.id).where(Post.id == post_id, Post.is_deleted.is_(False))
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Post not found")

        like = Like(user_id=user_id, post_id=post_id)
        self.db.add(like)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Error liking post {post_id} by {user_id}: {e.orig}")
            raise ConstraintViolation(str(e.orig)) from e

        await self.db.refresh(like)
        logger.info(f"User {user_id} liked post {post_id}")
        return like

    async def unlike_post(self, user_id: uuid.UUID, post_id: uuid.UUID) -> bool:
        """Remove a like; returns False when there was none"""
        stmt = delete(Like).where(
            and_(
                Like.user_id == user_id,
                Like.post_id == post_id
            )
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        removed = result.rowcount > 0
        if removed:
            logger.info(f"User {user_id} unliked post {post_id}")
        return removed

    async def is_liked(self, user_id: uuid.UUID, post_id: uuid.UUID) -> bool:
        stmt = select(Like.id).where(
            and_(
                Like.user_id == user_id,
                Like.post_id == post_id
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_like_count(self, post_id: uuid.UUID) -> int:
        stmt = select(func.count(Like.id)).where(Like.post_id == post_id)
        result = await self.db.execute(stmt)
        return result.scalar_one()
