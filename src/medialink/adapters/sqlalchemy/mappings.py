"""SQLAlchemy table metadata for the catalog.

Catalog records are immutable value objects, so the table is used through Core
statements rather than an ORM mapping.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, MetaData, String, Table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


catalog_record_table = Table(
    "catalog_record",
    metadata,
    Column("id", String, primary_key=True),
    Column("title", String, nullable=False),
    Column("code", String, nullable=False, unique=True),
    Column("media_url", String, nullable=True),
    Column("media_storage_key", String, nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=_utcnow),
)


def create_all_tables(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    log.info("Creating catalog tables")
    metadata.create_all(engine)
