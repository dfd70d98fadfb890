"""In-process hash store, used for tests and local experiments."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..core.interfaces import HashStore
from .codec import decode_value, encode_value, qualify_namespace

LOGGER = logging.getLogger(__name__)


class InMemoryHashStore(HashStore):
    """Keep hashes in a dictionary, serialising values like a remote store would."""

    def __init__(self, key_prefix: str | None = None) -> None:
        """Initialize empty storage."""
        self._key_prefix = key_prefix
        self._hashes: dict[str, dict[str, str]] = {}

    def hget(self, namespace: str, key: str) -> Any | None:
        """Return the decoded value for ``key`` if present."""
        bucket = self._hashes.get(qualify_namespace(namespace, self._key_prefix), {})
        return decode_value(bucket.get(key))

    def hset(self, namespace: str, values: Mapping[str, Any]) -> None:
        """Store all ``values`` under ``namespace``."""
        if not values:
            return
        encoded = {key: encode_value(value) for key, value in values.items()}
        self._hashes.setdefault(
            qualify_namespace(namespace, self._key_prefix), {}
        ).update(encoded)
        LOGGER.debug("Stored %d key(s) in %s", len(values), namespace)

    def hmget(self, namespace: str, *keys: str) -> dict[str, Any]:
        """Return decoded values for the requested keys that exist."""
        bucket = self._hashes.get(qualify_namespace(namespace, self._key_prefix), {})
        return {key: decode_value(bucket[key]) for key in keys if key in bucket}

    def hkeys(self, namespace: str) -> list[str]:
        """Return all keys stored in ``namespace``."""
        bucket = self._hashes.get(qualify_namespace(namespace, self._key_prefix), {})
        return list(bucket)

    def close(self) -> None:
        """Nothing to release."""
        return None


__all__ = ["InMemoryHashStore"]
