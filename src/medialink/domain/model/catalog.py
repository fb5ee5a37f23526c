"""Catalog record snapshots."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CatalogRecord:
    """Read-only view of one catalog row, taken at index load time."""

    id: str
    title: str
    code: str
    media_url: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedCatalogRecord:
    record: CatalogRecord
    normalized_title: str

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def title(self) -> str:
        return self.record.title

    @property
    def media_url(self) -> str | None:
        return self.record.media_url
