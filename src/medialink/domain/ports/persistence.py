"""Ports for persisting catalog records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from medialink.domain.model import CatalogRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from medialink.domain.model import CatalogField


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CatalogRecordRepository(Repository[CatalogRecord], Protocol):
    """Persistence contract for catalog rows."""

    def page(self, *, offset: int, limit: int) -> list[CatalogRecord]: ...

    def get(self, record_id: str) -> CatalogRecord | None: ...

    def get_by_code(self, code: str) -> CatalogRecord | None: ...

    def update_fields(self, record_id: str, fields: Mapping[CatalogField, str | None]) -> bool: ...
