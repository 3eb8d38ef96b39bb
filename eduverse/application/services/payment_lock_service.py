from contextlib import contextmanager
from collections.abc import Iterator

from eduverse.application.errors import ConflictError
from eduverse.config import settings
from eduverse.infrastructure.cache.cache_service import acquire_lock, release_lock


def payment_lock_key(*, scope: str, resource_id: int) -> str:
    return f"payment_lock:{scope}:{resource_id}"


@contextmanager
def payment_creation_lock(*, scope: str, resource_id: int) -> Iterator[None]:
    """Serialize payment submissions for one invoice or one student across processes."""
    lock_key = payment_lock_key(scope=scope, resource_id=resource_id)
    lock_token = acquire_lock(lock_key, settings.payment_lock_ttl_seconds)
    if lock_token is None:
        raise ConflictError(f"A payment is already being processed for this {scope}")
    try:
        yield
    finally:
        release_lock(lock_key, lock_token)
