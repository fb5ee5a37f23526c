"""SQLAlchemy adapter package for the catalog database."""

from __future__ import annotations

from .catalog import SqlAlchemyCatalogDatabase
from .mappings import catalog_record_table, create_all_tables, metadata
from .repositories import SqlAlchemyCatalogRecordRepository
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogDatabase",
    "SqlAlchemyCatalogRecordRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "StartupError",
    "catalog_record_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
