"""
Best-effort post enrichment: hashtags, mentions and link previews.

Runs after the post is committed. Each step uses its own session and its
own transaction, so a failing step neither blocks nor rolls back the
others, and never touches the post itself.
"""
from typing import Dict, Optional, Sequence, Set
import asyncio
import logging
import uuid

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import async_sessionmaker

from microfeed.db.upsert import insert_ignoring
from microfeed.models.hashtag import Hashtag, PostHashtag
from microfeed.models.link_preview import LinkPreview, PostLink
from microfeed.models.mention import Mention
from microfeed.models.profile import Profile
from microfeed.utils.text_annotator import annotate

logger = logging.getLogger(__name__)

# Strong references to in-flight enrichment; the event loop only keeps weak ones
_pending_tasks: Set[asyncio.Task] = set()

class EnrichmentService:
    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def enrich_post(self, post_id: uuid.UUID, content: str) -> Dict[str, Optional[int]]:
        """Run all enrichment steps concurrently and collect their outcomes.

        Returns the number of rows each step linked or recorded, with
        ``None`` for a step that failed.
        """
        annotations = annotate(content)
        steps = {
            "hashtags": self.link_hashtags(post_id, annotations.hashtags),
            "mentions": self.record_mentions(post_id, annotations.mentions),
            "links": self.link_previews(post_id, annotations.urls),
        }

        results = await asyncio.gather(*steps.values(), return_exceptions=True)

        outcome = {}
        for name, result in zip(steps.keys(), results):
            if isinstance(result, Exception):
                logger.error(f"Enrichment step '{name}' failed for post {post_id}: {result}")
                outcome[name] = None
            else:
                outcome[name] = result

        logger.info(f"Enriched post {post_id}: {outcome}")
        return outcome

    async def link_hashtags(self, post_id: uuid.UUID, tags: Sequence[str]) -> int:
        """Get-or-create every tag, then link it to the post"""
        if not tags:
            return 0

        async with self.session_factory() as session:
            await session.execute(
                insert_ignoring(session, Hashtag, ["tag"]).values(
                    [{"id": uuid.uuid4(), "tag": tag} for tag in tags]
                )
            )

            # Re-read: rows may have been created by another writer
            result = await session.execute(
                select(Hashtag.id).where(Hashtag.tag.in_(tags))
            )
            hashtag_ids = result.scalars().all()

            await session.execute(
                insert_ignoring(session, PostHashtag, ["post_id", "hashtag_id"]).values(
                    [{"post_id": post_id, "hashtag_id": hashtag_id} for hashtag_id in hashtag_ids]
                )
            )
            await session.commit()

        return len(hashtag_ids)

    async def record_mentions(self, post_id: uuid.UUID, handles: Sequence[str]) -> int:
        """Resolve handles to profiles and record one mention per profile.

        Handles that match no profile are dropped without error. Each handle
        resolves to one profile: the exact-case match when there is one,
        otherwise the first case-insensitive match by handle.
        """
        if not handles:
            return 0

        async with self.session_factory() as session:
            result = await session.execute(
                select(Profile.id, Profile.handle).where(
                    func.lower(Profile.handle).in_(handles)
                ).order_by(Profile.handle)
            )

            resolved = {}
            for row in result:
                key = row.handle.lower()
                if key not in resolved or row.handle == key:
                    resolved[key] = row.id

            user_ids = list(resolved.values())

            if not user_ids:
                return 0

            session.add_all([Mention(post_id=post_id, user_id=user_id) for user_id in user_ids])
            await session.commit()

        return len(user_ids)

    async def link_previews(self, post_id: uuid.UUID, urls: Sequence[str]) -> int:
        """Get-or-create a bare preview row per URL, then link it to the post.

        Title, description and image stay empty until something fills them;
        existing rows are never refreshed.
        """
        if not urls:
            return 0

        async with self.session_factory() as session:
            await session.execute(
                insert_ignoring(session, LinkPreview, ["url"]).values(
                    [{"id": uuid.uuid4(), "url": url} for url in urls]
                )
            )

            result = await session.execute(
                select(LinkPreview.id).where(LinkPreview.url.in_(urls))
            )
            preview_ids = result.scalars().all()

            await session.execute(
                insert_ignoring(session, PostLink, ["post_id", "link_preview_id"]).values(
                    [{"post_id": post_id, "link_preview_id": preview_id} for preview_id in preview_ids]
                )
            )
            await session.commit()

        return len(preview_ids)

def schedule_enrichment(
    session_factory: async_sessionmaker,
    post_id: uuid.UUID,
    content: str
) -> asyncio.Task:
    """Fire-and-forget enrichment for a committed post.

    The returned task never raises: every step's failure is logged inside
    ``enrich_post``. Await it, or ``drain_enrichment()``, to know it is done.
    """
    service = EnrichmentService(session_factory)
    task = asyncio.create_task(service.enrich_post(post_id, content), name=f"enrich-post-{post_id}")
    _pending_tasks.add(task)
    task.add_done_callback(_pending_tasks.discard)
    return task

async def drain_enrichment() -> None:
    """Wait for every enrichment task scheduled so far"""
    while _pending_tasks:
        await asyncio.gather(*list(_pending_tasks), return_exceptions=True)
