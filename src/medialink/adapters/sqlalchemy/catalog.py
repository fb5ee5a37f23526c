"""``CatalogDatabase`` implementation on top of the SQLAlchemy unit of work."""

from __future__ import annotations

import uuid
from logging import getLogger
from typing import TYPE_CHECKING

from medialink.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork
from medialink.domain.model import CatalogField, CatalogRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from medialink.domain.ports.unit_of_work import CatalogUnitOfWork

log = getLogger(__name__)


class SqlAlchemyCatalogDatabase:
    """Each call opens its own unit of work, so every write commits on its own."""

    def __init__(
        self,
        unit_of_work_factory: Callable[[], CatalogUnitOfWork] = SqlAlchemyCatalogUnitOfWork,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def list_records(self, offset: int, limit: int) -> list[CatalogRecord]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.catalog_records.page(offset=offset, limit=limit)

    def get_record(self, record_id: str) -> CatalogRecord | None:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.catalog_records.get(record_id)

    def update_record(self, record_id: str, fields: Mapping[CatalogField, str | None]) -> None:
        if not fields:
            return
        with self._unit_of_work_factory() as uow:
            if not uow.repositories.catalog_records.update_fields(record_id, fields):
                raise LookupError(f"Catalog record {record_id} does not exist")
            uow.commit()
        log.debug("Updated catalog record %s: %s", record_id, sorted(fields))

    def upsert_record(self, *, code: str, title: str) -> CatalogRecord:
        """Find the record with natural key ``code`` or create it; the title is refreshed."""

        code = code.strip()
        title = title.strip()
        if not code or not title:
            raise ValueError("Catalog records need a code and a title")

        with self._unit_of_work_factory() as uow:
            records = uow.repositories.catalog_records
            existing = records.get_by_code(code)
            if existing is None:
                created = CatalogRecord(id=uuid.uuid4().hex, title=title, code=code)
                records.add(created)
                uow.commit()
                log.info("Created catalog record %s (%s)", created.id, code)
                return created
            if existing.title != title:
                records.update_fields(existing.id, {CatalogField.TITLE: title})
                uow.commit()
                return CatalogRecord(
                    id=existing.id, title=title, code=code, media_url=existing.media_url
                )
            return existing


if TYPE_CHECKING:
    from medialink.domain.ports import CatalogDatabase

    _database_check: CatalogDatabase = SqlAlchemyCatalogDatabase()
