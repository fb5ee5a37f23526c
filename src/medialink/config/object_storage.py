"""Object storage configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Literal

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

    from .storage import StorageConfig

DEFAULT_BUCKET: Final[str] = "media"
# uploads buffer whole files; give slow links time before the per-item error kicks in
UPLOAD_TIMEOUT_SECONDS: Final[float] = 600.0

type StorageBackend = Literal["filesystem", "http"]


@dataclass(frozen=True, slots=True)
class ObjectStorageConfig:
    backend: StorageBackend
    bucket: str
    root: Path | None = None
    public_base_url: str | None = None
    resilience: ResilienceConfig | None = None
    api_key: str | None = None


def _http_config(bucket: str) -> ObjectStorageConfig:
    values = require_env_vars(("MEDIALINK_STORAGE_URL", "MEDIALINK_STORAGE_KEY"))
    base_url = values["MEDIALINK_STORAGE_URL"].rstrip("/")
    api_key = values["MEDIALINK_STORAGE_KEY"]
    resilience = ResilienceConfig(
        name="object-storage",
        base_url=base_url,
        timeout_seconds=UPLOAD_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=None,
        default_headers={"Authorization": f"Bearer {api_key}", "apikey": api_key},
    )
    return ObjectStorageConfig(
        backend="http",
        bucket=bucket,
        public_base_url=os.getenv("MEDIALINK_PUBLIC_BASE_URL") or base_url,
        resilience=resilience,
        api_key=api_key,
    )


def get_object_storage_config(*, storage: StorageConfig | None = None) -> ObjectStorageConfig:
    backend = (os.getenv("MEDIALINK_STORAGE_BACKEND") or "filesystem").strip().lower()
    bucket = (os.getenv("MEDIALINK_STORAGE_BUCKET") or DEFAULT_BUCKET).strip()

    if backend == "http":
        return _http_config(bucket)
    if backend != "filesystem":
        raise ConfigurationError(f"Unsupported storage backend: {backend}")

    storage_config = storage or get_storage_config()
    root = storage_config.objects_path() / bucket
    public_base_url = os.getenv("MEDIALINK_PUBLIC_BASE_URL") or root.as_uri()
    return ObjectStorageConfig(
        backend="filesystem",
        bucket=bucket,
        root=root,
        public_base_url=public_base_url,
    )
