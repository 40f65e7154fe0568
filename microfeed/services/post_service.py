from typing import List, Optional
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, desc
import logging

from microfeed.db.base import utcnow
from microfeed.db.session import sibling_sessionmaker
from microfeed.models.post import Post
from microfeed.models.profile import Profile
from microfeed.schemas.post_schema import PostCreate
from microfeed.services.enrichment_service import schedule_enrichment
from microfeed.services.exceptions import AuthorizationError, ConstraintViolation, NotFoundError
from microfeed.utils.storage import delete_image

logger = logging.getLogger(__name__)

class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_post(self, user_id: uuid.UUID, post_data: PostCreate) -> Post:
        """Create a new post and schedule its enrichment.

        The post is committed before enrichment starts; enrichment failures
        are logged by the enrichment task and never reach this caller.
        """
        post = Post(
            user_id=user_id,
            content=post_data.content,
            image_url=post_data.image_url
        )
        self.db.add(post)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Error creating post for {user_id}: {e.orig}")
            raise ConstraintViolation(str(e.orig)) from e

        await self.db.refresh(post)
        logger.info(f"Created post {post.id} by {user_id}")

        schedule_enrichment(sibling_sessionmaker(self.db), post.id, post.content)

        return post

    async def get_post(self, post_id: uuid.UUID, include_deleted: bool = False) -> Optional[Post]:
        """Get a post by ID; soft-deleted posts only when asked for"""
        stmt = select(Post).where(Post.id == post_id)
        if not include_deleted:
            stmt = stmt.where(Post.is_deleted.is_(False))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def hard_delete_post(self, actor: Profile, post_id: uuid.UUID) -> None:
        """Permanently delete a post; author only.

        Likes, mentions and annotation links go with it through the
        foreign-key cascades.
        """
        post = await self.get_post(post_id, include_deleted=True)
        if not post:
            raise NotFoundError("Post not found")

        if post.user_id != actor.id:
            logger.warning(f"Profile {actor.id} tried to delete post {post_id} by {post.user_id}")
            raise AuthorizationError()

        image_url = post.image_url

        await self.db.delete(post)
        await self.db.commit()
        logger.info(f"Deleted post {post_id}")

        if image_url and image_url.startswith("/uploads/"):
            try:
                await delete_image(image_url)
            except OSError as e:
                logger.error(f"Error deleting image {image_url} of post {post_id}: {e}")

    async def soft_delete_post(self, moderator: Profile, post_id: uuid.UUID) -> Post:
        """Hide a post from every read while keeping it for audit; admins only"""
        if not moderator.is_admin:
            logger.warning(f"Non-admin {moderator.id} tried to moderate post {post_id}")
            raise AuthorizationError()

        post = await self.get_post(post_id, include_deleted=True)
        if not post:
            raise NotFoundError("Post not found")

        if post.is_deleted:
            return post

        post.is_deleted = True
        post.deleted_by = moderator.id
        post.deleted_at = utcnow()

        await self.db.commit()
        await self.db.refresh(post)
        logger.info(f"Post {post_id} soft-deleted by {moderator.id}")
        return post

    async def list_deleted_posts(self, moderator: Profile, limit: int = 50) -> List[Post]:
        """Soft-deleted posts, most recently moderated first; admins only"""
        if not moderator.is_admin:
            raise AuthorizationError()

        stmt = select(Post).where(
            Post.is_deleted.is_(True)
        ).order_by(
            desc(Post.deleted_at)
        ).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
