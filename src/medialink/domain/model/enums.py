"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class MatchStatus(StrEnum):
    MATCHED = "matched"
    PARTIAL = "partial"
    UNMATCHED = "unmatched"


class CommitMode(StrEnum):
    """How accepted matches are written back to the catalog."""

    URL = "url"
    REMOTE_LINK = "remote_link"
    BINARY_UPLOAD = "binary_upload"

    @property
    def is_metadata_only(self) -> bool:
        return self is not CommitMode.BINARY_UPLOAD


class MediaKind(StrEnum):
    VIDEO = "video"
    IMAGE = "image"


class CatalogField(StrEnum):
    """Catalog record columns the pipeline is allowed to write."""

    TITLE = "title"
    CODE = "code"
    MEDIA_URL = "media_url"
    MEDIA_STORAGE_KEY = "media_storage_key"
