"""Operator-driven assignment: pick a record, paste its media URL."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from medialink.domain.catalog_index import DEFAULT_PREVIEW_LIMIT
from medialink.domain.errors import AdapterInputError
from medialink.domain.model import CommitMode, Match, MatchStatus, UrlReference

from .base import SourceBatch, is_http_url

if TYPE_CHECKING:
    from collections.abc import Iterable

    from medialink.domain.catalog_index import CatalogIndex
    from medialink.domain.model import NormalizedCatalogRecord

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ManualPick:
    catalog_id: str
    url: str


class ManualPickerAdapter:
    """No scoring: every accepted pick is already a confirmed match."""

    commit_mode: ClassVar[CommitMode] = CommitMode.URL

    def __init__(self, index: CatalogIndex, *, preview_limit: int = DEFAULT_PREVIEW_LIMIT) -> None:
        self._index = index
        self._preview_limit = preview_limit

    def search(self, query: str) -> list[NormalizedCatalogRecord]:
        """Preview of records whose title contains ``query``; a UI affordance only."""

        return self._index.search(query, limit=self._preview_limit)

    def produce_references(self, raw_input: Iterable[ManualPick]) -> SourceBatch:
        batch = SourceBatch()
        for pick in raw_input:
            url = pick.url.strip()
            record = self._index.get(pick.catalog_id)
            if record is None:
                batch.invalid_count += 1
                batch.errors.append(
                    AdapterInputError(f"Unknown catalog id {pick.catalog_id}", item=pick.catalog_id)
                )
                continue
            if not is_http_url(url):
                batch.invalid_count += 1
                batch.errors.append(
                    AdapterInputError("Not an http(s) URL", item=url or record.title)
                )
                continue
            if url == (record.media_url or ""):
                batch.skipped_count += 1
                continue
            batch.references.append(UrlReference(url=url))
            batch.pinned_ids.append(record.id)

        log.info(
            "Manual picks: accepted=%s, invalid=%s, unchanged=%s",
            len(batch.references),
            batch.invalid_count,
            batch.skipped_count,
        )
        return batch

    def match_all(self, batch: SourceBatch, index: CatalogIndex) -> list[Match]:
        matches: list[Match] = []
        for reference, catalog_id in zip(batch.references, batch.pinned_ids, strict=True):
            record = index.get(catalog_id)
            if record is None:
                raise AdapterInputError(f"Unknown catalog id {catalog_id}", item=catalog_id)
            matches.append(
                Match(
                    reference=reference,
                    display_name=reference.display_name,
                    catalog_id=record.id,
                    catalog_title=record.title,
                    similarity=1.0,
                    status=MatchStatus.MATCHED,
                )
            )
        return matches
