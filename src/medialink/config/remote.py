"""Remote-cloud link resolution configuration."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Final

from .env import env_float, env_int
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_LINK_PATTERN: Final[str] = r"^https?://mega\.nz/(file|folder)/"
DEFAULT_RESOLVER_WORKERS: Final[int] = 4
MAX_RESOLVER_WORKERS: Final[int] = 8
LARGE_BATCH_THRESHOLD_BYTES: Final[int] = 1024 * 1024 * 1024
DEFAULT_TEMP_PREFIX: Final[str] = "temp-videos"
DEFAULT_CLEANUP_DELAY_SECONDS: Final[float] = 300.0
RESOLVER_TIMEOUT_SECONDS: Final[float] = 20.0


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="remote-files",
        timeout_seconds=RESOLVER_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=2),
        ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
        cache=CacheConfig(backend="memory", default_ttl_seconds=600.0),
    )


@dataclass(frozen=True, slots=True)
class RemoteConfig:
    link_pattern: re.Pattern[str] = field(default_factory=lambda: re.compile(DEFAULT_LINK_PATTERN))
    resolver_workers: int = DEFAULT_RESOLVER_WORKERS
    large_batch_threshold: int = LARGE_BATCH_THRESHOLD_BYTES
    temp_prefix: str = DEFAULT_TEMP_PREFIX
    cleanup_delay_seconds: float = DEFAULT_CLEANUP_DELAY_SECONDS
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_remote_config() -> RemoteConfig:
    raw_pattern = os.getenv("MEDIALINK_REMOTE_LINK_PATTERN") or DEFAULT_LINK_PATTERN
    try:
        pattern = re.compile(raw_pattern)
    except re.error as exc:
        raise ConfigurationError(f"Invalid MEDIALINK_REMOTE_LINK_PATTERN: {exc}") from exc

    workers = env_int("MEDIALINK_RESOLVER_WORKERS", DEFAULT_RESOLVER_WORKERS, minimum=1)
    return RemoteConfig(
        link_pattern=pattern,
        resolver_workers=min(workers, MAX_RESOLVER_WORKERS),
        large_batch_threshold=env_int(
            "MEDIALINK_LARGE_BATCH_BYTES", LARGE_BATCH_THRESHOLD_BYTES, minimum=1
        ),
        cleanup_delay_seconds=env_float(
            "MEDIALINK_TEMP_CLEANUP_DELAY", DEFAULT_CLEANUP_DELAY_SECONDS
        ),
    )
