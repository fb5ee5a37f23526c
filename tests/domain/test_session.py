from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from medialink.domain.catalog_index import CatalogIndex
from medialink.domain.commit import BatchCommitExecutor
from medialink.domain.errors import CommitFatalError, IndexLoadError, SessionStateError
from medialink.domain.model import CatalogField, CommitMode, MatchStatus
from medialink.domain.session import ReconciliationSession, SessionState
from medialink.domain.sources import LocalFileAdapter, UrlListAdapter
from tests.helpers.fakes import FakeCatalogDatabase, FakeObjectStorage

if TYPE_CHECKING:
    from pathlib import Path

URLS = "\n".join(
    [
        "https://cdn.example.test/Ogniem-i-Mieczem.mp4",
        "https://cdn.example.test/Pan_Tadeusz_caly_film.mkv",
        "https://cdn.example.test/random_vlog_2024.mp4",
    ]
)


def _session(
    catalog: FakeCatalogDatabase, storage: FakeObjectStorage | None = None
) -> ReconciliationSession:
    index = CatalogIndex(catalog)
    executor = BatchCommitExecutor(catalog, storage, on_finished=index.invalidate)
    return ReconciliationSession(index, executor)


def test_full_workflow(catalog: FakeCatalogDatabase) -> None:
    session = _session(catalog)
    session.start()

    matches = session.run_source(UrlListAdapter(), URLS)

    assert session.state is SessionState.REVIEWING
    assert session.mode is CommitMode.URL
    assert [match.status for match in matches] == [
        MatchStatus.MATCHED,
        MatchStatus.PARTIAL,
        MatchStatus.UNMATCHED,
    ]
    stats = session.stats()
    assert (stats.matched, stats.partial, stats.unmatched) == (1, 1, 1)

    report = session.commit()

    assert session.state is SessionState.DONE
    assert report.succeeded == 2
    assert session.results == report.results
    assert {record_id for record_id, _ in catalog.updates} == {"rec-0000", "rec-0001"}
    # the commit invalidated the snapshot, so reads see the new URLs
    pan = session.index.get("rec-0001")
    assert pan is not None
    assert pan.media_url == "https://cdn.example.test/Pan_Tadeusz_caly_film.mkv"


def test_override_assigns_unmatched_row(catalog: FakeCatalogDatabase) -> None:
    session = _session(catalog)
    session.run_source(UrlListAdapter(), URLS)

    updated = session.override(2, "rec-0002")

    assert updated.status is MatchStatus.MATCHED
    assert updated.similarity == 1.0
    assert updated.catalog_title == "Quo Vadis"
    matches = session.get_matches()
    assert matches[2] == updated
    assert matches[1].status is MatchStatus.PARTIAL
    assert session.stats().unmatched == 0

    report = session.commit()

    assert len(report.results) == 3


def test_override_rejects_unknown_ids_and_rows(catalog: FakeCatalogDatabase) -> None:
    session = _session(catalog)
    session.run_source(UrlListAdapter(), URLS)

    with pytest.raises(KeyError):
        session.override(0, "missing")
    with pytest.raises(IndexError):
        session.override(3, "rec-0000")


def test_empty_source_stays_in_select_source(catalog: FakeCatalogDatabase) -> None:
    session = _session(catalog)

    matches = session.run_source(UrlListAdapter(), "not a url")

    assert matches == []
    assert session.state is SessionState.SELECT_SOURCE
    assert session.last_batch is not None
    assert session.last_batch.invalid_count == 1


def test_start_propagates_index_load_error() -> None:
    session = _session(FakeCatalogDatabase(fail_reads=True))

    with pytest.raises(IndexLoadError):
        session.start()

    assert session.state is SessionState.SELECT_SOURCE


def test_illegal_transitions_raise(catalog: FakeCatalogDatabase) -> None:
    session = _session(catalog)

    with pytest.raises(SessionStateError):
        session.commit()
    with pytest.raises(SessionStateError):
        session.override(0, "rec-0000")

    session.run_source(UrlListAdapter(), URLS)
    with pytest.raises(SessionStateError):
        session.run_source(UrlListAdapter(), URLS)

    session.commit()
    with pytest.raises(SessionStateError):
        session.commit()
    with pytest.raises(SessionStateError):
        session.start()


def test_reset_discards_matches_and_results(catalog: FakeCatalogDatabase) -> None:
    session = _session(catalog)
    session.run_source(UrlListAdapter(), URLS)
    session.commit()

    session.reset()

    assert session.state is SessionState.SELECT_SOURCE
    assert session.get_matches() == []
    assert session.results == []
    assert session.mode is None


def test_commit_rejects_ids_missing_from_catalog(catalog: FakeCatalogDatabase) -> None:
    session = _session(catalog)
    session.run_source(UrlListAdapter(), URLS)
    catalog.records.pop(0)
    session.index.invalidate()

    with pytest.raises(CommitFatalError, match="unknown catalog id"):
        session.commit()

    assert session.state is SessionState.SELECT_SOURCE
    assert catalog.updates == []


def test_cancel_during_commit_returns_to_source_selection(
    tmp_path: Path, storage: FakeObjectStorage
) -> None:
    titles = [f"Episode {n:02d}" for n in range(10)]
    catalog = FakeCatalogDatabase()
    for title in titles:
        catalog.upsert_record(code=title, title=title)
    paths = []
    for title in titles:
        path = tmp_path / f"{title}.mp4"
        path.write_bytes(title.encode())
        paths.append(path)

    session = _session(catalog, storage)
    session.run_source(LocalFileAdapter(), paths)
    assert session.stats().matched == 10

    uploads: list[str] = []

    def cancel_on_third(key: str) -> None:
        uploads.append(key)
        if len(uploads) == 3:
            session.cancel()

    storage.on_upload = cancel_on_third

    report = session.commit()

    assert len(report.results) == 3
    assert report.cancelled
    assert session.state is SessionState.SELECT_SOURCE
    assert session.get_matches() == []
    assert [fields[CatalogField.MEDIA_STORAGE_KEY] for _, fields in catalog.updates] == uploads


def test_failing_progress_callback_returns_to_source_selection(
    catalog: FakeCatalogDatabase,
) -> None:
    session = _session(catalog)
    session.run_source(UrlListAdapter(), URLS)

    def broken_progress(position: int, total: int) -> None:
        raise RuntimeError(f"display closed at {position}/{total}")

    with pytest.raises(RuntimeError, match="display closed"):
        session.commit(progress=broken_progress)

    assert session.state is SessionState.SELECT_SOURCE
    assert session.get_matches() == []


def test_failing_finish_hook_returns_to_source_selection(catalog: FakeCatalogDatabase) -> None:
    index = CatalogIndex(catalog)

    def broken_hook() -> None:
        raise RuntimeError("cache unavailable")

    session = ReconciliationSession(index, BatchCommitExecutor(catalog, on_finished=broken_hook))
    session.run_source(UrlListAdapter(), URLS)

    with pytest.raises(RuntimeError, match="cache unavailable"):
        session.commit()

    assert session.state is SessionState.SELECT_SOURCE
    session.run_source(UrlListAdapter(), URLS)
    assert session.state is SessionState.REVIEWING
