"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from medialink.adapters.sqlalchemy.mappings import catalog_record_table
from medialink.domain.model import CatalogRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from medialink.domain.model import CatalogField

_COLUMNS = (
    catalog_record_table.c.id,
    catalog_record_table.c.title,
    catalog_record_table.c.code,
    catalog_record_table.c.media_url,
)


def _to_record(row: Row[tuple[str, str, str, str | None]]) -> CatalogRecord:
    return CatalogRecord(id=row.id, title=row.title, code=row.code, media_url=row.media_url)


class SqlAlchemyCatalogRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: CatalogRecord) -> None:
        self.session.execute(
            insert(catalog_record_table).values(
                id=entity.id,
                title=entity.title,
                code=entity.code,
                media_url=entity.media_url,
            )
        )

    def page(self, *, offset: int, limit: int) -> list[CatalogRecord]:
        # ordering by primary key keeps consecutive pages disjoint
        stmt = (
            select(*_COLUMNS)
            .order_by(catalog_record_table.c.id)
            .offset(offset)
            .limit(limit)
        )
        return [_to_record(row) for row in self.session.execute(stmt)]

    def get(self, record_id: str) -> CatalogRecord | None:
        stmt = select(*_COLUMNS).where(catalog_record_table.c.id == record_id)
        row = self.session.execute(stmt).one_or_none()
        return _to_record(row) if row is not None else None

    def get_by_code(self, code: str) -> CatalogRecord | None:
        stmt = select(*_COLUMNS).where(catalog_record_table.c.code == code)
        row = self.session.execute(stmt).one_or_none()
        return _to_record(row) if row is not None else None

    def update_fields(self, record_id: str, fields: Mapping[CatalogField, str | None]) -> bool:
        values: dict[str, object] = {str(name): value for name, value in fields.items()}
        values["updated_at"] = datetime.now(UTC)
        stmt = (
            update(catalog_record_table)
            .where(catalog_record_table.c.id == record_id)
            .values(**values)
        )
        result = self.session.execute(stmt)
        return result.rowcount > 0


if TYPE_CHECKING:
    from medialink.domain.ports.persistence import CatalogRecordRepository

    def _repository_check(session: Session) -> CatalogRecordRepository:
        return SqlAlchemyCatalogRecordRepository(session)
