import json
import uuid

from redis.exceptions import RedisError

from eduverse.infrastructure.cache.redis_client import get_redis_client
from eduverse.infrastructure.logging import get_logger

logger = get_logger(__name__)

RELEASE_LOCK_SCRIPT = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
end
return 0
"""


def get_json(cache_key: str) -> dict | None:
    try:
        raw = get_redis_client().get(cache_key)
    except RedisError as exc:
        logger.debug("cache_read_failed", cache_key=cache_key, error=str(exc))
        return None
    if raw is None or not isinstance(raw, str):
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def set_json(cache_key: str, value: dict, ttl_seconds: int) -> None:
    try:
        get_redis_client().setex(cache_key, ttl_seconds, json.dumps(value, default=str))
    except (RedisError, TypeError, ValueError) as exc:
        logger.debug("cache_write_failed", cache_key=cache_key, error=str(exc))


def delete_key(cache_key: str) -> None:
    try:
        get_redis_client().delete(cache_key)
    except RedisError as exc:
        logger.debug("cache_delete_failed", cache_key=cache_key, error=str(exc))


def acquire_lock(lock_key: str, ttl_seconds: int) -> str | None:
    """Return a release token, or None when another holder owns the lock.

    An unreachable Redis yields a token so callers proceed and rely on the database row lock.
    """
    token = str(uuid.uuid4())
    try:
        acquired = bool(get_redis_client().set(lock_key, token, nx=True, ex=ttl_seconds))
    except RedisError as exc:
        logger.warning("lock_backend_unavailable", lock_key=lock_key, error=str(exc))
        return token
    return token if acquired else None


def release_lock(lock_key: str, token: str) -> None:
    try:
        get_redis_client().eval(RELEASE_LOCK_SCRIPT, 1, lock_key, token)
    except RedisError as exc:
        logger.debug("lock_release_failed", lock_key=lock_key, error=str(exc))
