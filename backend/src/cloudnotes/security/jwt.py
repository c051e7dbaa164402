"""JWT token utilities."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import get_settings
from ..core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with a JTI so it can be revoked on sign-out."""
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "type": "access", "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def _decode(token: str) -> Optional[Dict[str, Any]]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


async def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate access token, checking the Redis blacklist."""
    payload = _decode(token)
    if not payload:
        return None

    jti = payload.get("jti")
    if jti:
        redis_client = get_redis_client()
        try:
            await redis_client.connect()
            if await redis_client.is_token_blacklisted(jti):
                return None
        except Exception as e:
            # If Redis is down, allow token validation to continue
            logger.warning(f"Blacklist check skipped: {e}")

    return payload


async def get_user_id_from_token(token: str) -> Optional[UUID]:
    """Extract user ID from token."""
    payload = await decode_access_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    try:
        return UUID(user_id)
    except ValueError:
        return None


async def blacklist_token(token: str) -> bool:
    """Add token to Redis blacklist for the rest of its lifetime."""
    payload = _decode(token)
    if not payload or not payload.get("jti") or not payload.get("exp"):
        return False

    expire_time = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    remaining_seconds = int((expire_time - datetime.now(timezone.utc)).total_seconds())
    if remaining_seconds <= 0:
        return False

    try:
        redis_client = get_redis_client()
        await redis_client.connect()
        return await redis_client.add_to_blacklist(payload["jti"], remaining_seconds)
    except Exception as e:
        logger.error(f"Blacklist token error: {e}")
        return False
