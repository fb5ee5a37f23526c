"""Object storage behind a Supabase-style storage REST API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from medialink.adapters.http_resilience import ResilientClient, default_client_factory
from medialink.config.errors import ConfigurationError

from .errors import ObjectStorageError
from .keys import validate_key
from .schema import ErrorResponse, UploadResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from medialink.config.http_resilience import ResilienceConfig
    from medialink.config.object_storage import ObjectStorageConfig

log = getLogger(__name__)


def _raise_for_error(response: httpx.Response, *, action: str) -> None:
    if response.is_success:
        return
    try:
        payload = ErrorResponse.model_validate(response.json())
        detail = payload.message
    except (ValueError, ValidationError):
        detail = response.text or response.reason_phrase
    log.error("Object storage %s failed with HTTP %s: %s", action, response.status_code, detail)
    raise ObjectStorageError(
        f"{action} failed (HTTP {response.status_code}): {detail}",
        status_code=response.status_code,
    )


@dataclass(slots=True)
class HttpObjectStorage:
    config: ObjectStorageConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    def __post_init__(self) -> None:
        if self.config.resilience is None or self.config.resilience.base_url is None:
            raise ConfigurationError("HTTP object storage needs a base URL")

    @property
    def resilience(self) -> ResilienceConfig:
        resilience = self.config.resilience
        if resilience is None:
            raise ConfigurationError("HTTP object storage needs a base URL")
        return resilience

    def upload(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        overwrite: bool = True,
    ) -> None:
        asyncio.run(self._upload(validate_key(key), data, content_type, overwrite))

    def get_public_url(self, key: str) -> str:
        base = (self.config.public_base_url or self.resilience.base_url or "").rstrip("/")
        return f"{base}/object/public/{self.config.bucket}/{quote(validate_key(key))}"

    def remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        asyncio.run(self._remove([validate_key(key) for key in keys]))

    async def _upload(self, key: str, data: bytes, content_type: str, overwrite: bool) -> None:
        async with self.client_factory(self.resilience) as client:
            response = await client.post(
                f"/object/{self.config.bucket}/{quote(key)}",
                content=data,
                headers={
                    "Content-Type": content_type,
                    "x-upsert": "true" if overwrite else "false",
                },
            )
        _raise_for_error(response, action=f"Upload of {key}")
        try:
            stored = UploadResponse.model_validate(response.json()).key
        except (ValueError, ValidationError):
            stored = key
        log.debug("Uploaded %s (%s bytes) as %s", key, len(data), stored)

    async def _remove(self, keys: list[str]) -> None:
        async with self.client_factory(self.resilience) as client:
            response = await client.delete(
                f"/object/{self.config.bucket}",
                json={"prefixes": keys},
            )
        _raise_for_error(response, action=f"Removal of {len(keys)} object(s)")


if TYPE_CHECKING:
    from medialink.config.object_storage import ObjectStorageConfig as _Config
    from medialink.domain.ports import ObjectStorage

    _storage_check: ObjectStorage = HttpObjectStorage(_Config(backend="http", bucket="media"))
