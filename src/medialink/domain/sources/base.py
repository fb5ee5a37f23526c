"""Shared contract for source adapters.

An adapter turns one kind of operator input into ``MediaReference`` objects and
then matches them against the catalog index. All adapters that match
automatically go through ``match_references`` so scoring and thresholds are the
same everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from medialink.domain.matching import best_match

if TYPE_CHECKING:
    from collections.abc import Iterable

    from medialink.domain.catalog_index import CatalogIndex
    from medialink.domain.errors import MediaLinkError
    from medialink.domain.model import (
        CommitMode,
        Match,
        MediaReference,
        NormalizedCatalogRecord,
    )


@dataclass(slots=True)
class SourceBatch:
    """References produced from one input, plus what was rejected on the way."""

    references: list[MediaReference] = field(default_factory=list["MediaReference"])
    invalid_count: int = 0
    duplicate_count: int = 0
    skipped_count: int = 0
    errors: list[MediaLinkError] = field(default_factory=list["MediaLinkError"])
    advisories: list[str] = field(default_factory=list[str])
    # catalog ids chosen by the operator, parallel to ``references``
    pinned_ids: list[str] = field(default_factory=list[str])

    @property
    def is_empty(self) -> bool:
        return not self.references


@runtime_checkable
class SourceAdapter[TInput](Protocol):
    commit_mode: ClassVar[CommitMode]

    def produce_references(self, raw_input: TInput) -> SourceBatch: ...

    def match_all(self, batch: SourceBatch, index: CatalogIndex) -> list[Match]: ...


def match_references(
    references: Iterable[MediaReference],
    records: list[NormalizedCatalogRecord],
) -> list[Match]:
    return [best_match(reference, records) for reference in references]


class MatchingSource:
    """Mixin for adapters that score every reference against the full index."""

    def match_all(self, batch: SourceBatch, index: CatalogIndex) -> list[Match]:
        return match_references(batch.references, index.load())


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_http_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))
