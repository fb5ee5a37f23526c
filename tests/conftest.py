from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from medialink.adapters.sqlalchemy import SqlAlchemyCatalogDatabase, shutdown, startup
from medialink.domain.catalog_index import CatalogIndex
from tests.helpers.fakes import FakeCatalogDatabase, FakeObjectStorage, make_records

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

CLASSICS = ("Ogniem i Mieczem", "Pan Tadeusz", "Quo Vadis")


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "data"
    monkeypatch.setenv("MEDIALINK_DATA_DIR", str(data_dir))
    for name in (
        "MEDIALINK_STORAGE_BACKEND",
        "MEDIALINK_STORAGE_BUCKET",
        "MEDIALINK_STORAGE_URL",
        "MEDIALINK_STORAGE_KEY",
        "MEDIALINK_PUBLIC_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return data_dir


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    # file-backed so worker threads share one database
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'catalog.db'}")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_catalog(sqlite_engine: Engine) -> Iterator[SqlAlchemyCatalogDatabase]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyCatalogDatabase()
    finally:
        shutdown()


@pytest.fixture
def catalog() -> FakeCatalogDatabase:
    return FakeCatalogDatabase(records=make_records(CLASSICS))


@pytest.fixture
def index(catalog: FakeCatalogDatabase) -> CatalogIndex:
    return CatalogIndex(catalog)


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()
