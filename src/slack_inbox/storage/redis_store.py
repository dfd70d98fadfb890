"""Redis-backed hash store implementation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import redis

from ..core.config import StoreSettings
from ..core.interfaces import HashStore, StoreError
from .codec import decode_value, encode_value, qualify_namespace

LOGGER = logging.getLogger(__name__)


class RedisHashStore(HashStore):
    """Map each namespace onto one Redis hash whose fields are user ids.

    ``hset`` sends every field in a single ``HSET`` command, so a batch either
    applies completely or fails as a whole.
    """

    def __init__(
        self, settings: StoreSettings, client: redis.Redis | None = None
    ) -> None:
        self._key_prefix = settings.key_prefix
        self._client = client or redis.Redis.from_url(
            settings.redis_url, decode_responses=True, socket_timeout=10
        )

    def hget(self, namespace: str, key: str) -> Any | None:
        try:
            raw = self._client.hget(self._hash_name(namespace), key)
        except redis.RedisError as exc:
            raise StoreError(f"Failed to read {namespace}/{key}: {exc}") from exc
        return decode_value(raw)

    def hset(self, namespace: str, values: Mapping[str, Any]) -> None:
        if not values:
            return
        mapping = {key: encode_value(value) for key, value in values.items()}
        LOGGER.debug("Writing %d field(s) to %s", len(mapping), namespace)
        try:
            self._client.hset(self._hash_name(namespace), mapping=mapping)
        except redis.RedisError as exc:
            LOGGER.error("Redis write to %s failed: %s", namespace, exc)
            raise StoreError(f"Failed to write to {namespace}: {exc}") from exc

    def hmget(self, namespace: str, *keys: str) -> dict[str, Any]:
        if not keys:
            return {}
        try:
            raw_values = self._client.hmget(self._hash_name(namespace), list(keys))
        except redis.RedisError as exc:
            raise StoreError(f"Failed to read from {namespace}: {exc}") from exc
        return {
            key: decode_value(raw)
            for key, raw in zip(keys, raw_values)
            if raw is not None
        }

    def hkeys(self, namespace: str) -> list[str]:
        try:
            return list(self._client.hkeys(self._hash_name(namespace)))
        except redis.RedisError as exc:
            raise StoreError(f"Failed to list keys of {namespace}: {exc}") from exc

    def close(self) -> None:
        self._client.close()

    def _hash_name(self, namespace: str) -> str:
        return qualify_namespace(namespace, self._key_prefix)


__all__ = ["RedisHashStore"]
