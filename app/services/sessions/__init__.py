from __future__ import annotations

import logging
from datetime import datetime, timezone

from redis.exceptions import RedisError

from app.connections.redis import get_redis
from app.utils.base import PersistenceError


logger = logging.getLogger(__name__)

ACTIVE_SESSIONS_KEY = "sessions:active"


def record_session(user_id: str, expires_at: datetime) -> None:
    """Mark a user as signed in until their token expires.

    Members of the sorted set are user ids scored by expiry timestamp, so a
    user signing in twice counts once and keeps the later expiry.
    """
    try:
        client = get_redis()
        client.zadd(ACTIVE_SESSIONS_KEY, {user_id: expires_at.timestamp()}, gt=True)
    except (RedisError, RuntimeError) as exc:
        # Stats are best-effort; sign-in must not depend on Redis
        logger.warning("Could not record session for %s: %s", user_id, exc)


def count_active_sessions(now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)
    try:
        client = get_redis()
        client.zremrangebyscore(ACTIVE_SESSIONS_KEY, "-inf", now.timestamp())
        return int(client.zcard(ACTIVE_SESSIONS_KEY))
    except (RedisError, RuntimeError) as exc:
        logger.error("Could not count active sessions: %s", exc, exc_info=True)
        raise PersistenceError("Server error")
