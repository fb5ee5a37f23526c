"""Public domain model surface."""

from __future__ import annotations

from medialink.domain.model.catalog import CatalogRecord, NormalizedCatalogRecord
from medialink.domain.model.commit import CommitReport, CommitResult
from medialink.domain.model.enums import CatalogField, CommitMode, MatchStatus, MediaKind
from medialink.domain.model.matching import Match, MatchStats
from medialink.domain.model.references import (
    LocalFileReference,
    MediaReference,
    RemoteReference,
    UrlReference,
    filename_from_url,
    reference_url,
)

__all__ = [
    "CatalogField",
    "CatalogRecord",
    "CommitMode",
    "CommitReport",
    "CommitResult",
    "LocalFileReference",
    "Match",
    "MatchStats",
    "MatchStatus",
    "MediaKind",
    "MediaReference",
    "NormalizedCatalogRecord",
    "RemoteReference",
    "UrlReference",
    "filename_from_url",
    "reference_url",
]
