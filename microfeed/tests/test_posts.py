import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from microfeed.models.like import Like
from microfeed.models.post import Post
from microfeed.services.enrichment_service import drain_enrichment
from microfeed.services.exceptions import AuthorizationError
from microfeed.services.like_service import LikeService
from microfeed.services.post_service import PostService
from microfeed.schemas.post_schema import PostCreate

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.mark.asyncio
async def test_create_post(client, make_profile, auth_headers):
    """Test creating a post and reading it back enriched"""
    alice = await make_profile("alice")
    await make_profile("bob")
    headers = auth_headers(alice.id)

    response = await client.post(
        "/api/v1/posts/",
        data={"content": "Shipping #v2 today with @bob https://example.com/release #launch"},
        headers=headers
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == str(alice.id)
    assert data["image_url"] is None

    await drain_enrichment()

    response = await client.get(f"/api/v1/posts/{data['id']}", headers=headers)

    assert response.status_code == 200
    post = response.json()
    assert post["author"]["handle"] == "alice"
    assert post["hashtags"] == ["launch", "v2"]
    assert [preview["url"] for preview in post["link_previews"]] == ["https://example.com/release"]
    assert post["like_count"] == 0
    assert post["liked"] is False


@pytest.mark.asyncio
async def test_create_post_with_image(client, make_profile, auth_headers, upload_dir):
    alice = await make_profile("alice")

    response = await client.post(
        "/api/v1/posts/",
        data={"content": "Look at this"},
        files={"image": ("sunset.PNG", PNG_BYTES, "image/png")},
        headers=auth_headers(alice.id)
    )

    assert response.status_code == 201
    image_url = response.json()["image_url"]
    assert image_url.startswith("/uploads/")
    assert image_url.endswith(".png")
    assert (upload_dir / image_url.rsplit("/", 1)[-1]).read_bytes() == PNG_BYTES


@pytest.mark.asyncio
async def test_create_post_rejects_unsupported_image(client, make_profile, auth_headers, upload_dir):
    alice = await make_profile("alice")

    response = await client.post(
        "/api/v1/posts/",
        data={"content": "Not an image"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers(alice.id)
    )

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "x" * 281])
async def test_create_post_rejects_bad_length(client, make_profile, auth_headers, content):
    alice = await make_profile("alice")

    response = await client.post(
        "/api/v1/posts/",
        data={"content": content},
        headers=auth_headers(alice.id)
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_post_accepts_max_length(client, make_profile, auth_headers):
    alice = await make_profile("alice")

    response = await client.post(
        "/api/v1/posts/",
        data={"content": "x" * 280},
        headers=auth_headers(alice.id)
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_get_unknown_post(client):
    response = await client.get("/api/v1/posts/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_author_hard_deletes_post(client, db, session_factory, make_profile, auth_headers):
    alice = await make_profile("alice")
    bob = await make_profile("bob")
    post = await PostService(db).create_post(alice.id, PostCreate(content="Soon gone #temp"))
    await drain_enrichment()
    await LikeService(db).like_post(bob.id, post.id)

    response = await client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(bob.id))
    assert response.status_code == 403

    response = await client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(alice.id))
    assert response.status_code == 200

    response = await client.get(f"/api/v1/posts/{post.id}")
    assert response.status_code == 404

    async with session_factory() as session:
        assert await session.get(Post, post.id) is None
        result = await session.execute(
            select(func.count()).select_from(Like).where(Like.post_id == post.id)
        )
        assert result.scalar_one() == 0


@pytest.mark.asyncio
async def test_hard_delete_removes_uploaded_image(client, make_profile, auth_headers, upload_dir):
    alice = await make_profile("alice")
    headers = auth_headers(alice.id)

    response = await client.post(
        "/api/v1/posts/",
        data={"content": "Temporary picture"},
        files={"image": ("pic.png", PNG_BYTES, "image/png")},
        headers=headers
    )
    post = response.json()
    await drain_enrichment()

    await client.delete(f"/api/v1/posts/{post['id']}", headers=headers)

    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_admin_soft_deletes_post(client, db, make_profile, auth_headers):
    alice = await make_profile("alice")
    moderator = await make_profile("moderator", is_admin=True)
    post = await PostService(db).create_post(alice.id, PostCreate(content="Questionable"))
    await drain_enrichment()

    response = await client.post(f"/api/v1/posts/{post.id}/moderate", headers=auth_headers(alice.id))
    assert response.status_code == 403

    response = await client.post(f"/api/v1/posts/{post.id}/moderate", headers=auth_headers(moderator.id))
    assert response.status_code == 200
    moderated = response.json()
    assert moderated["is_deleted"] is True
    assert moderated["deleted_by"] == str(moderator.id)
    assert moderated["deleted_at"] is not None

    # Moderating again changes nothing
    response = await client.post(f"/api/v1/posts/{post.id}/moderate", headers=auth_headers(moderator.id))
    assert response.json()["deleted_at"] == moderated["deleted_at"]

    response = await client.get(f"/api/v1/posts/{post.id}")
    assert response.status_code == 404

    response = await client.get("/api/v1/feed/profiles/alice")
    assert response.json()["posts"] == []

    response = await client.get("/api/v1/posts/moderation/deleted", headers=auth_headers(moderator.id))
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [str(post.id)]


@pytest.mark.asyncio
async def test_deleted_list_is_admin_only(client, make_profile, auth_headers):
    alice = await make_profile("alice")

    response = await client.get("/api/v1/posts/moderation/deleted", headers=auth_headers(alice.id))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_author_cannot_moderate_own_post(db, make_profile):
    alice = await make_profile("alice")
    post = await PostService(db).create_post(alice.id, PostCreate(content="Mine"))
    await drain_enrichment()

    with pytest.raises(AuthorizationError):
        await PostService(db).soft_delete_post(alice, post.id)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["   ", "\n\t "])
async def test_create_post_rejects_blank_content(client, make_profile, auth_headers, content):
    alice = await make_profile("alice")

    response = await client.post(
        "/api/v1/posts/",
        data={"content": content},
        headers=auth_headers(alice.id)
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_post_strips_surrounding_whitespace(client, make_profile, auth_headers):
    alice = await make_profile("alice")

    response = await client.post(
        "/api/v1/posts/",
        data={"content": "  hello there  "},
        headers=auth_headers(alice.id)
    )

    assert response.status_code == 201
    assert response.json()["content"] == "hello there"


def test_post_schema_strips_and_rejects_blank():
    assert PostCreate(content="  hi  ").content == "hi"

    with pytest.raises(ValidationError):
        PostCreate(content="   ")
