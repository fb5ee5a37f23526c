from __future__ import annotations

from .errors import InvalidObjectKeyError


def validate_key(key: str) -> str:
    """Return ``key`` if it is a relative, forward-slash path without ``..`` segments."""

    if not key or key.startswith("/") or "\\" in key:
        raise InvalidObjectKeyError(f"Invalid object key: {key!r}")
    parts = key.split("/")
    if any(part in {"", ".", ".."} for part in parts):
        raise InvalidObjectKeyError(f"Invalid object key: {key!r}")
    return key
