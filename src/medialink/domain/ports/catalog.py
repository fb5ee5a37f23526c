"""Port for the catalog database the pipeline reads from and writes to."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from medialink.domain.model import CatalogField, CatalogRecord


@runtime_checkable
class CatalogDatabase(Protocol):
    """Paged reads plus single-record writes; every write is its own transaction."""

    def list_records(self, offset: int, limit: int) -> list[CatalogRecord]: ...

    def update_record(self, record_id: str, fields: Mapping[CatalogField, str | None]) -> None: ...

    def upsert_record(self, *, code: str, title: str) -> CatalogRecord: ...


__all__ = ["CatalogDatabase"]
