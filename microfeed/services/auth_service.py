from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from microfeed.config import settings
from microfeed.db.session import get_db
from microfeed.models.profile import Profile
from microfeed.services.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

def create_access_token(identity_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token the way the identity provider issues them.

    Used by development seeding and tests; production tokens come from the
    external provider signed with the shared secret.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(identity_id), "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.ALGORITHM)

def verify_token(token: str) -> Optional[uuid.UUID]:
    """Return the identity a token was issued for, or None if it is not valid"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None

    subject = payload.get("sub")
    if subject is None:
        return None

    try:
        return uuid.UUID(subject)
    except ValueError:
        return None

async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> uuid.UUID:
    """Dependency: the authenticated identity, whether or not it has a profile yet"""
    if credentials is None:
        raise AuthenticationError()

    identity_id = verify_token(credentials.credentials)
    if identity_id is None:
        raise AuthenticationError()

    return identity_id

async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[uuid.UUID]:
    """Dependency for public reads: the identity if a valid token was sent"""
    if credentials is None:
        return None
    return verify_token(credentials.credentials)

async def get_current_user(
    identity_id: uuid.UUID = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
) -> Profile:
    """Dependency to get the current authenticated profile"""
    profile = await db.get(Profile, identity_id)

    if profile is None:
        logger.info(f"Identity {identity_id} has no profile yet")
        raise AuthorizationError()

    return profile
