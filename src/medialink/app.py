"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from medialink.adapters.object_storage import build_object_storage
from medialink.adapters.remote_files import HttpRemoteFileResolver
from medialink.adapters.sqlalchemy import SqlAlchemyCatalogDatabase, is_started, startup
from medialink.config import (
    get_commit_config,
    get_object_storage_config,
    get_remote_config,
)
from medialink.domain.catalog_index import CatalogIndex
from medialink.domain.commit import BatchCommitExecutor
from medialink.domain.model import MediaKind
from medialink.domain.session import ReconciliationSession
from medialink.domain.sources import (
    LocalFileAdapter,
    ManualPickerAdapter,
    RemoteLinkAdapter,
    UrlListAdapter,
)

if TYPE_CHECKING:
    from medialink.config import CommitConfig, RemoteConfig
    from medialink.domain.model import CatalogRecord
    from medialink.domain.ports import (
        CatalogDatabase,
        ObjectStorage,
        RemoteFileResolver,
        TempMaterialization,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class MediaLinkApp:
    """One operator's session together with the adapters it was wired with."""

    session: ReconciliationSession
    database: CatalogDatabase
    storage: ObjectStorage
    resolver: RemoteFileResolver
    remote_config: RemoteConfig

    @property
    def index(self) -> CatalogIndex:
        return self.session.index

    def local_files(self) -> LocalFileAdapter:
        return LocalFileAdapter()

    def url_list(self) -> UrlListAdapter:
        return UrlListAdapter()

    def remote_links(self) -> RemoteLinkAdapter:
        return RemoteLinkAdapter(self.resolver, self.remote_config)

    def manual_picker(self) -> ManualPickerAdapter:
        return ManualPickerAdapter(self.index)

    def close(self) -> None:
        if isinstance(self.resolver, HttpRemoteFileResolver):
            self.resolver.close()


def _default_database() -> CatalogDatabase:
    if not is_started():
        startup()
    return SqlAlchemyCatalogDatabase()


def open_session(
    *,
    database: CatalogDatabase | None = None,
    storage: ObjectStorage | None = None,
    resolver: RemoteFileResolver | None = None,
    commit_config: CommitConfig | None = None,
    remote_config: RemoteConfig | None = None,
    media_kind: MediaKind = MediaKind.VIDEO,
) -> MediaLinkApp:
    """Wire the configured adapters into a fresh reconciliation session."""

    effective_database = database or _default_database()
    effective_storage = storage or build_object_storage(get_object_storage_config())
    effective_commit = commit_config or get_commit_config()
    effective_remote = remote_config or get_remote_config()
    effective_resolver = resolver or HttpRemoteFileResolver(
        storage=effective_storage, config=effective_remote
    )

    index = CatalogIndex(effective_database, page_size=effective_commit.catalog_page_size)
    executor = BatchCommitExecutor(
        effective_database,
        effective_storage,
        metadata_workers=effective_commit.metadata_workers,
        media_kind=media_kind,
        on_finished=index.invalidate,
    )
    log.debug(
        "Opened session: storage=%s, metadata_workers=%s, media_kind=%s",
        type(effective_storage).__name__,
        effective_commit.metadata_workers,
        media_kind,
    )
    return MediaLinkApp(
        session=ReconciliationSession(index, executor),
        database=effective_database,
        storage=effective_storage,
        resolver=effective_resolver,
        remote_config=effective_remote,
    )


def add_catalog_record(
    *,
    code: str,
    title: str,
    database: CatalogDatabase | None = None,
) -> CatalogRecord:
    """Ensure a record with natural key ``code`` exists and carries ``title``."""

    record = (database or _default_database()).upsert_record(code=code, title=title)
    log.info("Catalog record %s: code=%s, title=%s", record.id, record.code, record.title)
    return record


def stage_remote_media(
    link: str,
    *,
    owner_id: str,
    resolver: RemoteFileResolver | None = None,
    remote_config: RemoteConfig | None = None,
) -> TempMaterialization:
    """Copy a remote file into temporary storage for a downstream publish step.

    The temporary copy is removed after the configured cleanup delay. A caller
    about to exit calls ``wait_for_cleanup`` on the result first.
    """

    config = remote_config or get_remote_config()
    if resolver is None:
        storage = build_object_storage(get_object_storage_config())
        with HttpRemoteFileResolver(storage=storage, config=config) as own_resolver:
            materialization = own_resolver.materialize_to_temp_storage(link, owner_id)
    else:
        materialization = resolver.materialize_to_temp_storage(link, owner_id)
    materialization.schedule_cleanup(config.cleanup_delay_seconds)
    log.info(
        "Staged %s at %s, cleanup in %ss",
        owner_id,
        materialization.temp_url,
        config.cleanup_delay_seconds,
    )
    return materialization
