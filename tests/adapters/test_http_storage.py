from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from medialink.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from medialink.adapters.object_storage import HttpObjectStorage, ObjectStorageError
from medialink.config import ObjectStorageConfig

BASE_URL = "https://project.example.test/storage/v1"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(handler))

    return factory


def _storage(handler: Callable[[httpx.Request], httpx.Response]) -> HttpObjectStorage:
    config = ObjectStorageConfig(
        backend="http",
        bucket="media",
        public_base_url=BASE_URL,
        resilience=ResilienceConfig(
            name="object-storage-test",
            base_url=BASE_URL,
            retry=RetryPolicy(total=0),
            cache=None,
            default_headers={"Authorization": "Bearer secret"},
        ),
        api_key="secret",
    )
    return HttpObjectStorage(config, client_factory=_make_client_factory(handler))


def test_upload_posts_bytes_with_upsert_header() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"Key": "media/videos/rec-1.mp4"})

    _storage(handler).upload("videos/rec-1.mp4", b"video", content_type="video/mp4")

    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/object/media/videos/rec-1.mp4"
    assert request.headers["x-upsert"] == "true"
    assert request.headers["content-type"] == "video/mp4"
    assert request.headers["authorization"] == "Bearer secret"
    assert request.content == b"video"


def test_upload_without_overwrite_sends_false() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"Key": "media/a.mp4"})

    _storage(handler).upload("a.mp4", b"x", content_type="video/mp4", overwrite=False)

    assert captured[0].headers["x-upsert"] == "false"


def test_upload_error_payload_raises() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            409,
            json={
                "statusCode": "409",
                "error": "Duplicate",
                "message": "The resource already exists",
            },
        )

    with pytest.raises(ObjectStorageError) as excinfo:
        _storage(handler).upload("a.mp4", b"x", content_type="video/mp4", overwrite=False)

    assert excinfo.value.status_code == 409
    assert "already exists" in str(excinfo.value)


def test_upload_non_json_error_raises() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="bad gateway config")

    with pytest.raises(ObjectStorageError, match="bad gateway config"):
        _storage(handler).upload("a.mp4", b"x", content_type="video/mp4")


def test_remove_sends_prefixes() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[])

    _storage(handler).remove(["temp-videos/a.mp4", "temp-videos/b.mp4"])

    request = captured[0]
    assert request.method == "DELETE"
    assert str(request.url) == f"{BASE_URL}/object/media"
    assert json.loads(request.content) == {
        "prefixes": ["temp-videos/a.mp4", "temp-videos/b.mp4"]
    }


def test_remove_nothing_skips_request() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    _storage(handler).remove([])


def test_public_url() -> None:
    storage = _storage(lambda _request: httpx.Response(200))

    assert storage.get_public_url("images/rec 1-5.png") == (
        f"{BASE_URL}/object/public/media/images/rec%201-5.png"
    )
