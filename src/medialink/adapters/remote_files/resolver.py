"""Resolve remote-cloud links over plain HTTP.

Metadata comes from a ``HEAD`` request: ``content-length`` for the size and the
``content-disposition`` filename for the name, with the last URL path segment as
fallback. Materialization downloads the file and parks a copy in object storage
under a temporary key.
"""

from __future__ import annotations

import asyncio
import mimetypes
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from email.message import Message
from logging import getLogger
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any, Self

import httpx

from medialink.adapters.http_resilience import ResilientClient, default_client_factory
from medialink.common.formatting import shorten
from medialink.config.remote import RemoteConfig
from medialink.domain.errors import ResolverError
from medialink.domain.model import filename_from_url
from medialink.domain.ports import RemoteFileMetadata, TempMaterialization

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from types import TracebackType

    from medialink.config.http_resilience import ResilienceConfig
    from medialink.domain.ports import ObjectStorage

log = getLogger(__name__)

_DEFAULT_EXTENSION = "mp4"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def filename_from_headers(headers: httpx.Headers) -> str | None:
    """Filename from ``content-disposition``, including RFC 2231 ``filename*`` values."""

    disposition = headers.get("content-disposition")
    if not disposition:
        return None
    message = Message()
    message["content-disposition"] = disposition
    filename = message.get_filename()
    if not filename:
        return None
    return PurePosixPath(filename.replace("\\", "/")).name or None


def content_length(headers: httpx.Headers) -> int:
    raw = headers.get("content-length", "").strip()
    return int(raw) if raw.isdigit() else 0


@dataclass(slots=True)
class HttpRemoteFileResolver:
    """Resolver whose requests share one client on a private event loop.

    Calls may come from several worker threads at once. They all go through the
    same client, so its rate limit and response cache span every call. ``close``
    shuts the client and the loop down.
    """

    storage: ObjectStorage | None = None
    config: RemoteConfig = field(default_factory=RemoteConfig)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    clock: Callable[[], datetime] = field(default=_utcnow)
    _client: ResilientClient | None = field(default=None, init=False, repr=False)
    _loop: asyncio.AbstractEventLoop | None = field(default=None, init=False, repr=False)
    _loop_thread: threading.Thread | None = field(default=None, init=False, repr=False)
    _loop_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        with self._loop_lock:
            loop, thread = self._loop, self._loop_thread
            self._loop = None
            self._loop_thread = None
        if loop is None:
            return
        asyncio.run_coroutine_threadsafe(self._close_client(), loop).result()
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join()
        loop.close()

    def resolve_metadata(self, link: str) -> RemoteFileMetadata:
        return self._run(self._resolve_metadata(link))

    def materialize_to_temp_storage(self, link: str, owner_id: str) -> TempMaterialization:
        storage = self.storage
        if storage is None:
            raise ResolverError("No object storage configured for temporary copies", link=link)

        name, data = self._run(self._download(link))
        extension = PurePosixPath(name).suffix.lstrip(".").lower() or _DEFAULT_EXTENSION
        timestamp_ms = int(self.clock().timestamp() * 1000)
        key = f"{self.config.temp_prefix}/{owner_id}-{timestamp_ms}.{extension}"
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"

        try:
            storage.upload(key, data, content_type=content_type, overwrite=True)
            temp_url = storage.get_public_url(key)
        except Exception as exc:
            log.warning("Temporary copy of %s failed, removing %s", shorten(link), key)
            storage.remove([key])
            raise ResolverError(f"Could not store temporary copy: {exc}", link=link) from exc

        log.info("Materialized %s as %s (%s bytes)", shorten(link), key, len(data))
        return TempMaterialization(temp_url=temp_url, _cleanup=lambda: storage.remove([key]))

    def _run[T](self, coroutine: Coroutine[Any, Any, T]) -> T:
        with self._loop_lock:
            loop = self._loop
            if loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever, name="remote-files-loop", daemon=True
                )
                thread.start()
                self._loop = loop
                self._loop_thread = thread
        return asyncio.run_coroutine_threadsafe(coroutine, loop).result()

    def _shared_client(self) -> ResilientClient:
        # only ever called on the loop thread
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    async def _close_client(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def _resolve_metadata(self, link: str) -> RemoteFileMetadata:
        response = await self._request(self._shared_client(), "HEAD", link)
        name = filename_from_headers(response.headers) or filename_from_url(link)
        return RemoteFileMetadata(name=name, size=content_length(response.headers))

    async def _download(self, link: str) -> tuple[str, bytes]:
        response = await self._request(self._shared_client(), "GET", link)
        name = filename_from_headers(response.headers) or filename_from_url(link)
        return name, response.content

    async def _request(self, client: ResilientClient, method: str, link: str) -> httpx.Response:
        try:
            response = await client.request(method, link)
        except httpx.HTTPError as exc:
            raise ResolverError(f"{method} failed: {exc}", link=link) from exc
        if not response.is_success:
            raise ResolverError(f"{method} returned HTTP {response.status_code}", link=link)
        return response


if TYPE_CHECKING:
    from medialink.domain.ports import RemoteFileResolver

    _resolver_check: RemoteFileResolver = HttpRemoteFileResolver()
