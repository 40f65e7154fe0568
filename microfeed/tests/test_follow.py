import uuid

import pytest

from microfeed.services.exceptions import ConstraintViolation
from microfeed.services.follow_service import FollowService


@pytest.mark.asyncio
async def test_follow_and_unfollow(client, make_profile, auth_headers):
    alice = await make_profile("alice")
    bob = await make_profile("bob")
    headers = auth_headers(alice.id)

    response = await client.post(f"/api/v1/follow/{bob.id}", headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["follower_id"] == str(alice.id)
    assert data["following_id"] == str(bob.id)

    status_response = await client.get(f"/api/v1/follow/{bob.id}/status", headers=headers)
    assert status_response.json()["following"] is True

    response = await client.delete(f"/api/v1/follow/{bob.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["removed"] is True

    status_response = await client.get(f"/api/v1/follow/{bob.id}/status", headers=headers)
    assert status_response.json()["following"] is False


@pytest.mark.asyncio
async def test_follow_twice_conflicts(client, make_profile, auth_headers):
    alice = await make_profile("alice")
    bob = await make_profile("bob")
    headers = auth_headers(alice.id)

    await client.post(f"/api/v1/follow/{bob.id}", headers=headers)
    response = await client.post(f"/api/v1/follow/{bob.id}", headers=headers)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_self_follow_conflicts(client, make_profile, auth_headers):
    alice = await make_profile("alice")

    response = await client.post(f"/api/v1/follow/{alice.id}", headers=auth_headers(alice.id))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_follow_unknown_profile_conflicts(client, make_profile, auth_headers):
    alice = await make_profile("alice")

    response = await client.post(f"/api/v1/follow/{uuid.uuid4()}", headers=auth_headers(alice.id))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_unfollow_without_follow_is_noop(client, make_profile, auth_headers):
    alice = await make_profile("alice")
    bob = await make_profile("bob")

    response = await client.delete(f"/api/v1/follow/{bob.id}", headers=auth_headers(alice.id))

    assert response.status_code == 200
    assert response.json()["removed"] is False


@pytest.mark.asyncio
async def test_follow_stats(client, db, make_profile):
    alice = await make_profile("alice")
    bob = await make_profile("bob")
    carol = await make_profile("carol")

    follow_service = FollowService(db)
    await follow_service.follow(bob.id, alice.id)
    await follow_service.follow(carol.id, alice.id)
    await follow_service.follow(alice.id, carol.id)

    response = await client.get(f"/api/v1/follow/{alice.id}/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["follower_count"] == 2
    assert data["following_count"] == 1


@pytest.mark.asyncio
async def test_following_ids(db, make_profile):
    alice = await make_profile("alice")
    bob = await make_profile("bob")
    carol = await make_profile("carol")
    alice_id, bob_id, carol_id = alice.id, bob.id, carol.id

    follow_service = FollowService(db)
    await follow_service.follow(alice_id, bob_id)
    await follow_service.follow(alice_id, carol_id)

    with pytest.raises(ConstraintViolation):
        await follow_service.follow(alice_id, bob_id)

    assert await follow_service.get_following_ids(alice_id) == {bob_id, carol_id}
    assert await follow_service.get_following_ids(bob_id) == set()
