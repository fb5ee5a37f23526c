"""In-memory snapshot of the catalog used for matching."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from medialink.domain.errors import IndexLoadError
from medialink.domain.matching import normalize
from medialink.domain.model import NormalizedCatalogRecord

if TYPE_CHECKING:
    from medialink.domain.model import CatalogRecord
    from medialink.domain.ports import CatalogDatabase

log = getLogger(__name__)

DEFAULT_PAGE_SIZE: Final[int] = 1000
DEFAULT_PREVIEW_LIMIT: Final[int] = 20


class CatalogIndex:
    """Whole-catalog snapshot with titles normalized once at load time.

    The snapshot is cached until ``invalidate`` is called; commits invalidate it so
    the next ``load`` sees their writes.
    """

    def __init__(self, database: CatalogDatabase, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._database = database
        self._page_size = page_size
        self._records: list[NormalizedCatalogRecord] | None = None
        self._by_id: dict[str, NormalizedCatalogRecord] = {}

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    def load(self) -> list[NormalizedCatalogRecord]:
        if self._records is not None:
            return self._records

        raw = self._fetch_all()
        records = [
            NormalizedCatalogRecord(record=record, normalized_title=normalize(record.title))
            for record in raw
        ]
        self._records = records
        self._by_id = {}
        for record in records:
            self._by_id.setdefault(record.id, record)
        log.info("Loaded catalog index: records=%s, page_size=%s", len(records), self._page_size)
        return records

    def invalidate(self) -> None:
        if self._records is not None:
            log.debug("Invalidating catalog index snapshot")
        self._records = None
        self._by_id = {}

    def records(self) -> list[NormalizedCatalogRecord]:
        return self.load()

    def get(self, record_id: str) -> NormalizedCatalogRecord | None:
        self.load()
        return self._by_id.get(record_id)

    def search(
        self,
        query: str,
        *,
        limit: int = DEFAULT_PREVIEW_LIMIT,
    ) -> list[NormalizedCatalogRecord]:
        """Case-insensitive title substring search, capped at ``limit`` rows.

        An empty query previews the first ``limit`` records.
        """

        records = self.load()
        needle = query.strip().lower()
        if not needle:
            return records[:limit]
        hits: list[NormalizedCatalogRecord] = []
        for record in records:
            if needle in record.title.lower():
                hits.append(record)
                if len(hits) >= limit:
                    break
        return hits

    def _fetch_all(self) -> list[CatalogRecord]:
        collected: list[CatalogRecord] = []
        offset = 0
        while True:
            try:
                page = self._database.list_records(offset, self._page_size)
            except Exception as exc:
                log.exception("Catalog read failed at offset %s", offset)
                raise IndexLoadError(f"Failed to load catalog at offset {offset}: {exc}") from exc
            collected.extend(page)
            if len(page) < self._page_size:
                return collected
            offset += self._page_size
