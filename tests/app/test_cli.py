from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from medialink import app as app_module
from medialink.adapters.sqlalchemy import SqlAlchemyCatalogDatabase, shutdown
from medialink.domain.ports import RemoteFileMetadata
from medialink.ui import cli as cli_module
from tests.helpers.fakes import FakeResolver

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from medialink.domain.model import CatalogRecord
    from medialink.domain.ports import TempMaterialization


@pytest.fixture
def cli_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    database = tmp_path / "cli.db"
    monkeypatch.setenv("DATABASE_URI", f"sqlite+pysqlite:///{database}")
    shutdown()
    try:
        yield database
    finally:
        shutdown()


def _add(code: str, title: str, capsys: pytest.CaptureFixture[str]) -> str:
    cli_module.main(["catalog", "add", "--code", code, "--title", title])
    return capsys.readouterr().out.strip()


def _records() -> list[CatalogRecord]:
    return SqlAlchemyCatalogDatabase().list_records(0, 100)


@pytest.mark.usefixtures("cli_database")
def test_catalog_add_is_idempotent(capsys: pytest.CaptureFixture[str]) -> None:
    first = _add("QV", "Quo Vadis", capsys)
    second = _add("QV", "Quo Vadis", capsys)

    assert first == second
    assert [record.title for record in _records()] == ["Quo Vadis"]


@pytest.mark.usefixtures("cli_database")
def test_urls_review_only_does_not_write(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _add("PT", "Pan Tadeusz", capsys)
    url_file = tmp_path / "urls.txt"
    url_file.write_text("https://cdn.example.test/Pan_Tadeusz_caly_film.mkv\n", encoding="utf-8")

    cli_module.main(["urls", str(url_file)])

    out = capsys.readouterr().out
    assert "partial" in out
    assert "matched=0 partial=1 unmatched=0" in out
    assert _records()[0].media_url is None


@pytest.mark.usefixtures("cli_database")
def test_urls_commit_with_override(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _add("OM", "Ogniem i Mieczem", capsys)
    quo_id = _add("QV", "Quo Vadis", capsys)
    url_file = tmp_path / "urls.txt"
    url_file.write_text(
        "https://cdn.example.test/Ogniem-i-Mieczem.mp4\n"
        "https://cdn.example.test/random_vlog_2024.mp4\n"
        "not a url\n",
        encoding="utf-8",
    )

    cli_module.main(["urls", str(url_file), "--override", f"1={quo_id}", "--commit"])

    out = capsys.readouterr().out
    assert "invalid=1" in out
    assert "Commit: succeeded=2 failed=0" in out
    urls = {record.title: record.media_url for record in _records()}
    assert urls == {
        "Ogniem i Mieczem": "https://cdn.example.test/Ogniem-i-Mieczem.mp4",
        "Quo Vadis": "https://cdn.example.test/random_vlog_2024.mp4",
    }


@pytest.mark.usefixtures("cli_database")
def test_files_commit_uploads_to_filesystem_storage(
    tmp_path: Path, isolated_environment: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    record_id = _add("QV", "Quo Vadis", capsys)
    clip = tmp_path / "Quo_Vadis.mp4"
    clip.write_bytes(b"movie")

    cli_module.main(["files", str(clip), "--commit"])

    out = capsys.readouterr().out
    assert "Commit: succeeded=1" in out
    stored = isolated_environment / "objects" / "media" / "videos" / f"{record_id}.mp4"
    assert stored.read_bytes() == b"movie"
    record = _records()[0]
    assert record.media_url is not None
    assert record.media_url.endswith(f"/videos/{record_id}.mp4")


@pytest.mark.usefixtures("cli_database")
def test_manual_and_search(capsys: pytest.CaptureFixture[str]) -> None:
    record_id = _add("PT", "Pan Tadeusz", capsys)

    cli_module.main(["manual", f"{record_id}=https://cdn.example.test/pt.mp4", "--commit"])
    assert "Commit: succeeded=1" in capsys.readouterr().out

    cli_module.main(["manual", f"{record_id}=https://cdn.example.test/pt.mp4"])
    out = capsys.readouterr().out
    assert "unchanged=1" in out
    assert "Nothing to review." in out

    cli_module.main(["search", "tadeusz"])
    assert "https://cdn.example.test/pt.mp4" in capsys.readouterr().out


@pytest.mark.usefixtures("cli_database")
def test_remote_links_use_resolver(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    link = "https://mega.nz/file/AAAA#key"
    resolver = FakeResolver(metadata={link: RemoteFileMetadata(name="Quo-Vadis.mp4", size=2048)})
    original_open_session = app_module.open_session

    def open_with_fake_resolver(**kwargs: object) -> app_module.MediaLinkApp:
        return original_open_session(resolver=resolver, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(cli_module, "open_session", open_with_fake_resolver)
    _add("QV", "Quo Vadis", capsys)
    links = tmp_path / "links.txt"
    links.write_text(f"{link}\n", encoding="utf-8")

    cli_module.main(["remote", str(links), "--commit"])

    out = capsys.readouterr().out
    assert "Quo-Vadis.mp4 (2.0 KB)" in out
    assert _records()[0].media_url == link


def test_invalid_override_exits_with_2(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["urls", str(tmp_path / "urls.txt"), "--override", "first=abc"])

    assert excinfo.value.code == 2


def test_missing_subcommand_exits_with_2() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2


@pytest.mark.usefixtures("cli_database")
def test_fatal_configuration_error_exits_with_1(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MEDIALINK_STORAGE_BACKEND", "http")
    url_file = tmp_path / "urls.txt"
    url_file.write_text("https://cdn.example.test/a.mp4\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["urls", str(url_file)])

    assert excinfo.value.code == 1


def test_sigint_without_commit_exits_cleanly() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.sigint_handler(2, None)

    assert excinfo.value.code == 0


def test_stage_waits_for_cleanup_before_exiting(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    link = "https://mega.nz/file/AAAA#key"
    resolver = FakeResolver()
    original_stage = app_module.stage_remote_media

    def stage_with_fake_resolver(target: str, *, owner_id: str) -> TempMaterialization:
        return original_stage(target, owner_id=owner_id, resolver=resolver)

    monkeypatch.setenv("MEDIALINK_TEMP_CLEANUP_DELAY", "0.05")
    monkeypatch.setattr(cli_module, "stage_remote_media", stage_with_fake_resolver)

    cli_module.main(["stage", link, "--owner", "rec-1"])

    assert capsys.readouterr().out.strip() == "https://tmp.example.test/rec-1.mp4"
    assert resolver.cleanups == [link]
