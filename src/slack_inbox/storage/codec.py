"""Value and namespace helpers shared by hash store adapters."""

from __future__ import annotations

import json
from typing import Any

from ..core.interfaces import StoreError


def qualify_namespace(namespace: str, key_prefix: str | None) -> str:
    """Return ``namespace`` with the configured environment prefix applied."""
    if not key_prefix:
        return namespace
    return f"{key_prefix}:{namespace}"


def encode_value(value: Any) -> str:
    """Serialise a stored value to JSON text."""
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise StoreError(f"Value is not JSON serialisable: {exc}") from exc


def decode_value(raw: str | bytes | None) -> Any | None:
    """Deserialise JSON text produced by :func:`encode_value`."""
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StoreError("Stored value is not valid JSON") from exc


__all__ = ["decode_value", "encode_value", "qualify_namespace"]
