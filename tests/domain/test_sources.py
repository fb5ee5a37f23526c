from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from medialink.config.remote import RemoteConfig
from medialink.domain.errors import AdapterInputError, RemoteResolutionError, ResolverError
from medialink.domain.model import (
    CatalogField,
    CommitMode,
    LocalFileReference,
    MatchStatus,
    RemoteReference,
    UrlReference,
)
from medialink.domain.ports import RemoteFileMetadata
from medialink.domain.sources import (
    LocalFileAdapter,
    ManualPick,
    ManualPickerAdapter,
    RemoteLinkAdapter,
    SourceAdapter,
    UrlListAdapter,
)
from tests.helpers.fakes import FakeCatalogDatabase, FakeResolver

if TYPE_CHECKING:
    from pathlib import Path

    from medialink.domain.catalog_index import CatalogIndex

LINK_A = "https://mega.nz/file/AAAA#key-a"
LINK_B = "https://mega.nz/file/BBBB#key-b"
LINK_C = "https://mega.nz/folder/CCCC#key-c"


def test_adapters_share_the_source_protocol(index: CatalogIndex) -> None:
    adapters = [
        LocalFileAdapter(),
        UrlListAdapter(),
        RemoteLinkAdapter(FakeResolver()),
        ManualPickerAdapter(index),
    ]

    assert all(isinstance(adapter, SourceAdapter) for adapter in adapters)
    assert [adapter.commit_mode for adapter in adapters] == [
        CommitMode.BINARY_UPLOAD,
        CommitMode.URL,
        CommitMode.REMOTE_LINK,
        CommitMode.URL,
    ]


def test_local_files_match_by_file_name(tmp_path: Path, index: CatalogIndex) -> None:
    good = tmp_path / "Ogniem-i-Mieczem.mp4"
    good.write_bytes(b"video")
    adapter = LocalFileAdapter()

    batch = adapter.produce_references([good, tmp_path / "missing.mp4", tmp_path])
    matches = adapter.match_all(batch, index)

    assert batch.references == [LocalFileReference(good)]
    assert batch.invalid_count == 2
    assert all(isinstance(error, AdapterInputError) for error in batch.errors)
    assert len(matches) == 1
    assert matches[0].status is MatchStatus.MATCHED
    assert matches[0].catalog_id == "rec-0000"


def test_url_list_validates_and_dedupes(index: CatalogIndex) -> None:
    text = "\n".join(
        [
            "https://cdn.example.test/Pan_Tadeusz_caly_film.mkv",
            "",
            "ftp://cdn.example.test/quo_vadis.mp4",
            "   https://cdn.example.test/Quo%20Vadis.mp4  ",
            "https://cdn.example.test/Pan_Tadeusz_caly_film.mkv",
            "not a url",
        ]
    )
    adapter = UrlListAdapter()

    batch = adapter.produce_references(text)
    matches = adapter.match_all(batch, index)

    assert batch.references == [
        UrlReference("https://cdn.example.test/Pan_Tadeusz_caly_film.mkv"),
        UrlReference("https://cdn.example.test/Quo%20Vadis.mp4"),
    ]
    assert batch.invalid_count == 2
    assert batch.duplicate_count == 1
    assert [match.display_name for match in matches] == [
        "Pan_Tadeusz_caly_film.mkv",
        "Quo Vadis.mp4",
    ]
    assert [match.status for match in matches] == [MatchStatus.PARTIAL, MatchStatus.MATCHED]


def test_url_list_empty_input_produces_empty_batch() -> None:
    batch = UrlListAdapter().produce_references("\n  \n")

    assert batch.is_empty
    assert batch.invalid_count == 0


def test_remote_links_resolve_metadata_and_isolate_failures(index: CatalogIndex) -> None:
    resolver = FakeResolver(
        metadata={
            LINK_A: RemoteFileMetadata(name="Quo-Vadis.mp4", size=1_000),
            LINK_C: RemoteFileMetadata(name="random_vlog_2024.mp4", size=2_000),
        },
        crash_on={LINK_B},
    )
    adapter = RemoteLinkAdapter(resolver)
    text = "\n".join([LINK_A, LINK_B, "https://example.test/file/x", LINK_C, LINK_A])

    batch = adapter.produce_references(text)
    matches = adapter.match_all(batch, index)

    assert batch.references == [
        RemoteReference(link=LINK_A, name="Quo-Vadis.mp4", size=1_000),
        RemoteReference(link=LINK_C, name="random_vlog_2024.mp4", size=2_000),
    ]
    assert batch.invalid_count == 1
    assert batch.duplicate_count == 1
    resolver_errors = [error for error in batch.errors if isinstance(error, ResolverError)]
    assert [error.link for error in resolver_errors] == [LINK_B]
    assert batch.advisories == []
    assert [match.status for match in matches] == [MatchStatus.MATCHED, MatchStatus.UNMATCHED]


def test_remote_links_fail_when_nothing_resolves() -> None:
    adapter = RemoteLinkAdapter(FakeResolver())

    with pytest.raises(RemoteResolutionError) as excinfo:
        adapter.produce_references(f"{LINK_A}\n{LINK_B}")

    assert len(excinfo.value.errors) == 2


def test_remote_links_warn_about_large_batches() -> None:
    resolver = FakeResolver(
        metadata={
            LINK_A: RemoteFileMetadata(name="a.mp4", size=600),
            LINK_B: RemoteFileMetadata(name="b.mp4", size=600),
        }
    )
    adapter = RemoteLinkAdapter(resolver, RemoteConfig(large_batch_threshold=1_000))

    batch = adapter.produce_references(f"{LINK_A}\n{LINK_B}")

    assert len(batch.advisories) == 1
    assert "1.2 KB" in batch.advisories[0]


def test_remote_links_reject_unsupported_hosts_without_resolving() -> None:
    resolver = FakeResolver()
    adapter = RemoteLinkAdapter(resolver)

    batch = adapter.produce_references("https://example.test/file/x")

    assert batch.is_empty
    assert batch.invalid_count == 1
    assert resolver.calls == []


def test_manual_picker_accepts_only_changed_valid_urls(index: CatalogIndex) -> None:
    index.load()
    adapter = ManualPickerAdapter(index)
    picks = [
        ManualPick("rec-0000", "https://cdn.example.test/ogniem.mp4"),
        ManualPick("rec-0001", "not-a-url"),
        ManualPick("missing", "https://cdn.example.test/x.mp4"),
        ManualPick("rec-0002", "  "),
    ]

    batch = adapter.produce_references(picks)
    matches = adapter.match_all(batch, index)

    assert batch.invalid_count == 3
    assert batch.pinned_ids == ["rec-0000"]
    assert len(matches) == 1
    match = matches[0]
    assert match.status is MatchStatus.MATCHED
    assert match.similarity == 1.0
    assert match.catalog_title == "Ogniem i Mieczem"
    assert match.display_name == "ogniem.mp4"


def test_manual_picker_skips_unchanged_urls(
    catalog: FakeCatalogDatabase, index: CatalogIndex
) -> None:
    stored_url = "https://cdn.example.test/pan.mp4"
    catalog.update_record("rec-0001", {CatalogField.MEDIA_URL: stored_url})
    adapter = ManualPickerAdapter(index)

    batch = adapter.produce_references([ManualPick("rec-0001", stored_url)])

    assert batch.is_empty
    assert batch.skipped_count == 1


def test_manual_picker_search_preview_is_capped(index: CatalogIndex) -> None:
    adapter = ManualPickerAdapter(index, preview_limit=1)

    assert [record.title for record in adapter.search("a")] == ["Pan Tadeusz"]
    assert adapter.search("zzz") == []
