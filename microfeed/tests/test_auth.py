import uuid
from datetime import timedelta

import pytest
from jose import jwt

from microfeed.config import settings
from microfeed.services.auth_service import create_access_token, verify_token


def test_verify_token_returns_identity():
    identity_id = uuid.uuid4()
    token = create_access_token(identity_id)

    assert verify_token(token) == identity_id


def test_verify_token_rejects_expired_token():
    token = create_access_token(uuid.uuid4(), expires_delta=timedelta(minutes=-1))

    assert verify_token(token) is None


def test_verify_token_rejects_wrong_signature():
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "type": "access"},
        "some-other-secret",
        algorithm=settings.ALGORITHM
    )

    assert verify_token(token) is None


def test_verify_token_rejects_non_access_token():
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "type": "refresh"},
        settings.secret_key,
        algorithm=settings.ALGORITHM
    )

    assert verify_token(token) is None


def test_verify_token_rejects_malformed_subject():
    token = jwt.encode(
        {"sub": "not-a-uuid", "type": "access"},
        settings.secret_key,
        algorithm=settings.ALGORITHM
    )

    assert verify_token(token) is None


def test_verify_token_rejects_garbage():
    assert verify_token("not.a.token") is None


@pytest.mark.asyncio
async def test_missing_token_is_unauthorized(client):
    response = await client.get("/api/v1/profiles/me")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_unauthorized(client):
    response = await client.get(
        "/api/v1/profiles/me",
        headers={"Authorization": "Bearer not.a.token"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_identity_without_profile_is_forbidden(client, auth_headers):
    response = await client.post(
        "/api/v1/posts/",
        data={"content": "hello"},
        headers=auth_headers(uuid.uuid4())
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Operation not permitted"


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to Microfeed API"
