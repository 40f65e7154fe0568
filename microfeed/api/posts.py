from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid
import logging

from microfeed.schemas.feed_schema import FeedPost
from microfeed.schemas.post_schema import DeletedPost, PostCreate, PostInDB
from microfeed.services.auth_service import get_current_user, get_optional_identity
from microfeed.services.exceptions import MicrofeedError, NotFoundError
from microfeed.services.feed_service import FeedService
from microfeed.services.post_service import PostService
from microfeed.db.session import get_db
from microfeed.models.profile import Profile
from microfeed.utils.rate_limit import limiter, write_limit
from microfeed.utils.storage import save_image

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=PostInDB, status_code=status.HTTP_201_CREATED)
@limiter.limit(write_limit)
async def create_post(
    request: Request,
    content: str = Form(..., min_length=1, max_length=280),
    image: Optional[UploadFile] = File(None),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a new post; enrichment continues in the background"""
    content = content.strip()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Post content cannot be blank"
        )

    try:
        image_url = None
        if image is not None and image.filename:
            image_url = await save_image(image)

        post_service = PostService(db)
        post_data = PostCreate(content=content, image_url=image_url)
        return await post_service.create_post(current_user.id, post_data)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Create post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )

@router.get("/moderation/deleted", response_model=List[DeletedPost])
async def list_deleted_posts(
    limit: int = Query(50, ge=1, le=200),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Soft-deleted posts kept for moderation audit (admins only)"""
    try:
        post_service = PostService(db)
        return await post_service.list_deleted_posts(current_user, limit)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"List deleted posts error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list deleted posts"
        )

@router.get("/{post_id}", response_model=FeedPost)
async def get_post(
    post_id: uuid.UUID,
    viewer_id: Optional[uuid.UUID] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    """Get a post with its author, likes and annotations"""
    try:
        feed_service = FeedService(db)
        post = await feed_service.get_post(post_id, viewer_id)

        if not post:
            raise NotFoundError("Post not found")

        return post
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Get post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get post"
        )

@router.delete("/{post_id}")
@limiter.limit(write_limit)
async def delete_post(
    request: Request,
    post_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Permanently delete one of your own posts"""
    try:
        post_service = PostService(db)
        await post_service.hard_delete_post(current_user, post_id)
        return {"message": "Post deleted successfully"}
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Delete post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete post"
        )

@router.post("/{post_id}/moderate", response_model=DeletedPost)
@limiter.limit(write_limit)
async def moderate_post(
    request: Request,
    post_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Soft-delete a post (admins only)"""
    try:
        post_service = PostService(db)
        return await post_service.soft_delete_post(current_user, post_id)
    except MicrofeedError:
        raise
    except Exception as e:
        logger.error(f"Moderate post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to moderate post"
        )
