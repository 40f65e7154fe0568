import pytest

from microfeed.models.post import Post
from microfeed.services.exceptions import ConstraintViolation, NotFoundError
from microfeed.services.like_service import LikeService


async def _add_post(db, author, content="A post worth liking"):
    post = Post(user_id=author.id, content=content)
    db.add(post)
    await db.commit()
    return post


@pytest.mark.asyncio
async def test_like_toggle_restores_state(client, db, make_profile, auth_headers):
    alice = await make_profile("alice")
    bob = await make_profile("bob")
    post = await _add_post(db, alice)
    headers = auth_headers(bob.id)
    url = f"/api/v1/likes/posts/{post.id}"

    before = (await client.get(url, headers=headers)).json()
    assert before == {"post_id": str(post.id), "like_count": 0, "liked": False}

    response = await client.post(url, headers=headers)
    assert response.status_code == 201

    liked = (await client.get(url, headers=headers)).json()
    assert liked["like_count"] == 1
    assert liked["liked"] is True

    response = await client.delete(url, headers=headers)
    assert response.json()["removed"] is True

    after = (await client.get(url, headers=headers)).json()
    assert after == before


@pytest.mark.asyncio
async def test_like_twice_conflicts(client, db, make_profile, auth_headers):
    alice = await make_profile("alice")
    post = await _add_post(db, alice)
    url = f"/api/v1/likes/posts/{post.id}"

    await client.post(url, headers=auth_headers(alice.id))
    response = await client.post(url, headers=auth_headers(alice.id))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_unlike_without_like_is_noop(client, db, make_profile, auth_headers):
    alice = await make_profile("alice")
    post = await _add_post(db, alice)

    response = await client.delete(f"/api/v1/likes/posts/{post.id}", headers=auth_headers(alice.id))

    assert response.status_code == 200
    assert response.json()["removed"] is False


@pytest.mark.asyncio
async def test_anonymous_like_state(client, db, make_profile):
    alice = await make_profile("alice")
    post = await _add_post(db, alice)
    await LikeService(db).like_post(alice.id, post.id)

    response = await client.get(f"/api/v1/likes/posts/{post.id}")

    assert response.json()["like_count"] == 1
    assert response.json()["liked"] is False


@pytest.mark.asyncio
async def test_cannot_like_moderated_post(db, make_profile):
    alice = await make_profile("alice")
    post = await _add_post(db, alice)
    post.is_deleted = True
    await db.commit()

    with pytest.raises(NotFoundError):
        await LikeService(db).like_post(alice.id, post.id)


@pytest.mark.asyncio
async def test_service_like_counts(db, make_profile):
    alice = await make_profile("alice")
    bob = await make_profile("bob")
    post = await _add_post(db, alice)
    alice_id, bob_id, post_id = alice.id, bob.id, post.id

    like_service = LikeService(db)
    await like_service.like_post(alice_id, post_id)
    await like_service.like_post(bob_id, post_id)

    with pytest.raises(ConstraintViolation):
        await like_service.like_post(bob_id, post_id)

    assert await like_service.get_like_count(post_id) == 2
    assert await like_service.unlike_post(bob_id, post_id) is True
    assert await like_service.get_like_count(post_id) == 1
    assert await like_service.is_liked(bob_id, post_id) is False
