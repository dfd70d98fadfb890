"""Hash store adapters backing the inbox."""

from ..core.config import StoreSettings
from ..core.interfaces import HashStore
from .memory import InMemoryHashStore
from .redis_store import RedisHashStore
from .sqlite import SqliteHashStore


def create_store(settings: StoreSettings) -> HashStore:
    """Instantiate the adapter selected by ``settings.backend``."""
    if settings.backend == "memory":
        return InMemoryHashStore(key_prefix=settings.key_prefix)
    if settings.backend == "redis":
        return RedisHashStore(settings)
    return SqliteHashStore(settings)


__all__ = ["InMemoryHashStore", "RedisHashStore", "SqliteHashStore", "create_store"]
