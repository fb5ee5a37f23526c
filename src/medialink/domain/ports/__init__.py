"""Ports implemented by adapters and consumed by the reconciliation core."""

from __future__ import annotations

from .catalog import CatalogDatabase
from .persistence import CatalogRecordRepository, Repository
from .remote import RemoteFileMetadata, RemoteFileResolver, TempMaterialization
from .storage import ObjectStorage
from .unit_of_work import CatalogRepositories, CatalogUnitOfWork, UnitOfWork

__all__ = [
    "CatalogDatabase",
    "CatalogRecordRepository",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "ObjectStorage",
    "RemoteFileMetadata",
    "RemoteFileResolver",
    "Repository",
    "TempMaterialization",
    "UnitOfWork",
]
