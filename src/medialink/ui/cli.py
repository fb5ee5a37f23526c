# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from medialink.app import add_catalog_record, open_session, stage_remote_media
from medialink.common.formatting import format_size, percent
from medialink.config import configure_logging
from medialink.domain.model import MediaKind, RemoteReference
from medialink.domain.session import SessionState
from medialink.domain.sources import ManualPick

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from medialink.app import MediaLinkApp
    from medialink.domain.model import CommitReport, Match
    from medialink.domain.sources import SourceBatch

log = logging.getLogger(__name__)

_SOURCE_COMMANDS = frozenset({"files", "urls", "remote", "manual"})

_active: MediaLinkApp | None = None


def _add_review_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        metavar="INDEX=ID",
        help="Assign match row INDEX to catalog id ID (repeatable)",
    )
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Persist matches with a catalog id (default: review only)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Match media against catalog records")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    files = subparsers.add_parser("files", help="Upload local media files")
    files.add_argument("paths", nargs="+", help="Files to match by name")
    files.add_argument(
        "--images",
        action="store_true",
        help="Store files as record images instead of videos",
    )
    _add_review_options(files)

    urls = subparsers.add_parser("urls", help="Link media URLs listed one per line")
    urls.add_argument("file", help="Text file with one URL per line ('-' for stdin)")
    _add_review_options(urls)

    remote = subparsers.add_parser("remote", help="Link remote-cloud file links")
    remote.add_argument("file", help="Text file with one link per line ('-' for stdin)")
    _add_review_options(remote)

    manual = subparsers.add_parser("manual", help="Assign URLs to records by id")
    manual.add_argument("picks", nargs="+", metavar="ID=URL", help="Catalog id and media URL")
    _add_review_options(manual)

    search = subparsers.add_parser("search", help="Preview catalog records by title")
    search.add_argument("query", nargs="?", default="", help="Title substring")

    catalog = subparsers.add_parser("catalog", help="Catalog management commands")
    catalog_sub = catalog.add_subparsers(dest="catalog_command", required=True)
    catalog_add = catalog_sub.add_parser("add", help="Create or retitle a record by code")
    catalog_add.add_argument("--code", required=True, help="Natural key of the record")
    catalog_add.add_argument("--title", required=True, help="Display title")

    stage = subparsers.add_parser("stage", help="Copy a remote file into temporary storage")
    stage.add_argument("link", help="Remote-cloud file link")
    stage.add_argument("--owner", required=True, help="Catalog id the copy belongs to")

    return parser


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    return _build_parser().parse_args(list(argv))


def _parse_overrides(values: Sequence[str]) -> list[tuple[int, str]]:
    overrides: list[tuple[int, str]] = []
    for value in values:
        position, sep, catalog_id = value.partition("=")
        if not sep or not catalog_id.strip():
            raise ValueError(f"Invalid override {value!r}, expected INDEX=ID")
        try:
            overrides.append((int(position), catalog_id.strip()))
        except ValueError as exc:
            raise ValueError(f"Invalid override index in {value!r}") from exc
    return overrides


def _parse_picks(values: Sequence[str]) -> list[ManualPick]:
    picks: list[ManualPick] = []
    for value in values:
        catalog_id, sep, url = value.partition("=")
        if not sep or not catalog_id.strip():
            raise ValueError(f"Invalid pick {value!r}, expected ID=URL")
        picks.append(ManualPick(catalog_id=catalog_id.strip(), url=url.strip()))
    return picks


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _print_batch(batch: SourceBatch) -> None:
    for advisory in batch.advisories:
        print(f"! {advisory}")
    for error in batch.errors:
        print(f"  rejected: {error}")
    print(
        f"Input: accepted={len(batch.references)} invalid={batch.invalid_count} "
        f"duplicates={batch.duplicate_count} unchanged={batch.skipped_count}"
    )


def _print_matches(matches: Sequence[Match]) -> None:
    for position, match in enumerate(matches):
        target = match.catalog_title or "-"
        size = ""
        if isinstance(match.reference, RemoteReference) and match.reference.size:
            size = f" ({format_size(match.reference.size)})"
        print(
            f"[{position:>3}] {match.status:<9} {percent(match.similarity):>4}  "
            f"{match.display_name}{size} -> {target}"
        )


def _print_report(report: CommitReport) -> None:
    print(
        f"Commit: succeeded={report.succeeded} failed={report.failed} "
        f"not_started={report.skipped}{' (cancelled)' if report.cancelled else ''}"
    )
    for failure in report.failures:
        print(f"  failed: {failure.display_name}: {failure.error}")


def _run_source(app: MediaLinkApp, args: argparse.Namespace) -> None:
    session = app.session
    session.start()

    if args.command == "files":
        batch_matches = session.run_source(app.local_files(), args.paths)
    elif args.command == "urls":
        batch_matches = session.run_source(app.url_list(), _read_text(args.file))
    elif args.command == "remote":
        batch_matches = session.run_source(app.remote_links(), _read_text(args.file))
    else:
        batch_matches = session.run_source(app.manual_picker(), _parse_picks(args.picks))

    if session.last_batch is not None:
        _print_batch(session.last_batch)
    if not batch_matches:
        print("Nothing to review.")
        return

    for position, catalog_id in _parse_overrides(args.override):
        session.override(position, catalog_id)

    _print_matches(session.get_matches())
    stats = session.stats()
    print(f"Matches: matched={stats.matched} partial={stats.partial} unmatched={stats.unmatched}")

    if args.commit:
        report = session.commit(progress=_print_progress)
        _print_report(report)


def _print_progress(position: int, total: int) -> None:
    log.debug("Committing %s/%s", position + 1, total)


def _search(app: MediaLinkApp, query: str) -> None:
    for record in app.manual_picker().search(query):
        media = record.media_url or "-"
        print(f"{record.id}  {record.title}  {media}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    global _active  # noqa: PLW0603
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        if parsed_args.command in _SOURCE_COMMANDS:
            _parse_overrides(parsed_args.override)
            if parsed_args.command == "manual":
                _parse_picks(parsed_args.picks)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "catalog" and parsed_args.catalog_command == "add":
            record = add_catalog_record(code=parsed_args.code, title=parsed_args.title)
            print(record.id)
        elif parsed_args.command == "stage":
            materialization = stage_remote_media(parsed_args.link, owner_id=parsed_args.owner)
            print(materialization.temp_url)
            log.info("Temporary copy stays available until the cleanup delay has passed")
            materialization.wait_for_cleanup()
        elif parsed_args.command == "search":
            _active = open_session()
            _search(_active, parsed_args.query)
        elif parsed_args.command in _SOURCE_COMMANDS:
            images = parsed_args.command == "files" and parsed_args.images
            _active = open_session(media_kind=MediaKind.IMAGE if images else MediaKind.VIDEO)
            _run_source(_active, parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    finally:
        if _active is not None:
            _active.close()
        _active = None


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Cancel a running commit on the first Ctrl+C, exit otherwise."""
    app = _active
    if app is not None and app.session.state is SessionState.COMMITTING:
        log.info("Cancelling commit; the current item will finish first")
        app.session.cancel()
        return
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
