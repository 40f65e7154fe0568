"""
Feed assembly: home and profile timelines with per-viewer annotations.
"""
from collections import defaultdict
from datetime import datetime, timezone
from typing import Collection, Dict, List, Optional, Sequence, Set
import asyncio
import logging
import uuid

from sqlalchemy import select, desc, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from microfeed.config import settings
from microfeed.db.session import sibling_sessionmaker
from microfeed.models.hashtag import Hashtag, PostHashtag
from microfeed.models.like import Like
from microfeed.models.link_preview import LinkPreview, PostLink
from microfeed.models.post import Post
from microfeed.schemas.feed_schema import AuthorInfo, FeedPage, FeedPost, LinkPreviewInfo
from microfeed.services.follow_service import FollowService

logger = logging.getLogger(__name__)

def _normalize_cursor(cursor: Optional[datetime]) -> Optional[datetime]:
    # Timestamps are stored as naive UTC
    if cursor is not None and cursor.tzinfo is not None:
        return cursor.astimezone(timezone.utc).replace(tzinfo=None)
    return cursor

class FeedService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_home_feed(
        self,
        viewer_id: uuid.UUID,
        cursor: Optional[datetime] = None,
        limit: int = settings.FEED_PAGE_SIZE
    ) -> FeedPage:
        """Posts by the viewer and everyone the viewer follows"""
        author_ids = await FollowService(self.db).get_following_ids(viewer_id)
        author_ids.add(viewer_id)

        return await self._assemble(author_ids, viewer_id, cursor, limit)

    async def get_profile_feed(
        self,
        subject_id: uuid.UUID,
        viewer_id: Optional[uuid.UUID] = None,
        cursor: Optional[datetime] = None,
        limit: int = settings.FEED_PAGE_SIZE
    ) -> FeedPage:
        """Posts by a single profile, as seen by ``viewer_id`` (may be anonymous)"""
        return await self._assemble({subject_id}, viewer_id, cursor, limit)

    async def get_post(
        self,
        post_id: uuid.UUID,
        viewer_id: Optional[uuid.UUID] = None
    ) -> Optional[FeedPost]:
        """A single visible post, hydrated like a feed item"""
        stmt = select(Post).where(Post.id == post_id, Post.is_deleted.is_(False))
        result = await self.db.execute(stmt)
        post = result.scalar_one_or_none()

        if post is None:
            return None

        items = await self._hydrate([post], viewer_id)
        return items[0]

    async def _assemble(
        self,
        author_ids: Set[uuid.UUID],
        viewer_id: Optional[uuid.UUID],
        cursor: Optional[datetime],
        limit: int
    ) -> FeedPage:
        if not author_ids:
            return FeedPage(posts=[], limit=limit)

        stmt = select(Post).where(
            Post.user_id.in_(author_ids),
            Post.is_deleted.is_(False)
        ).order_by(
            desc(Post.created_at)
        ).limit(limit)

        cursor = _normalize_cursor(cursor)
        if cursor is not None:
            # Cursor is the created_at of the previous page's last post
            stmt = stmt.where(Post.created_at < cursor)

        result = await self.db.execute(stmt)
        posts = list(result.scalars().all())

        if not posts:
            return FeedPage(posts=[], limit=limit)

        items = await self._hydrate(posts, viewer_id)

        return FeedPage(
            posts=items,
            limit=limit,
            next_cursor=items[-1].created_at,
            has_more=len(items) == limit
        )

    async def _hydrate(self, posts: Sequence[Post], viewer_id: Optional[uuid.UUID]) -> List[FeedPost]:
        """Attach like aggregates, viewer like state and annotations.

        The four lookups only depend on the post ids, so they run
        concurrently, each on its own session.
        """
        post_ids = [post.id for post in posts]
        sessions = sibling_sessionmaker(self.db)

        like_counts, liked_ids, hashtags, previews = await asyncio.gather(
            self._like_counts(sessions, post_ids),
            self._viewer_likes(sessions, viewer_id, post_ids),
            self._hashtags(sessions, post_ids),
            self._link_previews(sessions, post_ids),
        )

        return [
            FeedPost(
                id=post.id,
                user_id=post.user_id,
                content=post.content,
                image_url=post.image_url,
                created_at=post.created_at,
                author=AuthorInfo.model_validate(post.author),
                like_count=like_counts.get(post.id, 0),
                liked=post.id in liked_ids,
                hashtags=hashtags.get(post.id, []),
                link_previews=previews.get(post.id, []),
            )
            for post in posts
        ]

    async def _like_counts(
        self,
        sessions: async_sessionmaker,
        post_ids: Collection[uuid.UUID]
    ) -> Dict[uuid.UUID, int]:
        stmt = select(
            Like.post_id,
            func.count(Like.id).label('like_count')
        ).where(
            Like.post_id.in_(post_ids)
        ).group_by(
            Like.post_id
        )
        async with sessions() as session:
            result = await session.execute(stmt)
            return {row.post_id: row.like_count for row in result}

    async def _viewer_likes(
        self,
        sessions: async_sessionmaker,
        viewer_id: Optional[uuid.UUID],
        post_ids: Collection[uuid.UUID]
    ) -> Set[uuid.UUID]:
        if viewer_id is None:
            return set()

        stmt = select(Like.post_id).where(
            Like.user_id == viewer_id,
            Like.post_id.in_(post_ids)
        )
        async with sessions() as session:
            result = await session.execute(stmt)
            return set(result.scalars().all())

    async def _hashtags(
        self,
        sessions: async_sessionmaker,
        post_ids: Collection[uuid.UUID]
    ) -> Dict[uuid.UUID, List[str]]:
        stmt = select(
            PostHashtag.post_id,
            Hashtag.tag
        ).join(
            Hashtag, Hashtag.id == PostHashtag.hashtag_id
        ).where(
            PostHashtag.post_id.in_(post_ids)
        ).order_by(
            Hashtag.tag
        )
        tags = defaultdict(list)
        async with sessions() as session:
            result = await session.execute(stmt)
            for row in result:
                tags[row.post_id].append(row.tag)
        return tags

    async def _link_previews(
        self,
        sessions: async_sessionmaker,
        post_ids: Collection[uuid.UUID]
    ) -> Dict[uuid.UUID, List[LinkPreviewInfo]]:
        stmt = select(
            PostLink.post_id,
            LinkPreview
        ).join(
            LinkPreview, LinkPreview.id == PostLink.link_preview_id
        ).where(
            PostLink.post_id.in_(post_ids)
        ).order_by(
            LinkPreview.url
        )
        previews = defaultdict(list)
        async with sessions() as session:
            result = await session.execute(stmt)
            for row in result:
                previews[row.post_id].append(LinkPreviewInfo.model_validate(row.LinkPreview))
        return previews
