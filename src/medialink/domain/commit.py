"""Apply accepted matches to object storage and the catalog database.

Items run in input order and each gets its own ``CommitResult``; a failing item
never stops the batch. Binary uploads buffer whole files, so they always run one
at a time. Metadata-only modes may fan out over a small thread pool.

Cancellation is cooperative: the token is checked before an item starts, and an
item that already started is allowed to finish.
"""

from __future__ import annotations

import mimetypes
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from logging import getLogger
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Final

from medialink.domain.errors import CommitFatalError, CommitItemError
from medialink.domain.model import (
    CatalogField,
    CommitMode,
    CommitReport,
    CommitResult,
    LocalFileReference,
    MediaKind,
    RemoteReference,
    UrlReference,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from medialink.domain.model import Match
    from medialink.domain.ports import CatalogDatabase, ObjectStorage

log = getLogger(__name__)

type ProgressCallback = Callable[[int, int], None]

_CATALOG_ID: Final = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_DEFAULT_EXTENSION: Final[dict[MediaKind, str]] = {MediaKind.VIDEO: "mp4", MediaKind.IMAGE: "jpg"}
_KEY_PREFIX: Final[dict[MediaKind, str]] = {MediaKind.VIDEO: "videos", MediaKind.IMAGE: "images"}


class CancellationToken:
    """Abort flag shared between a commit run and whoever may close the session."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def storage_key_for(
    catalog_id: str,
    display_name: str,
    *,
    kind: MediaKind = MediaKind.VIDEO,
    now: datetime | None = None,
) -> str:
    """Deterministic object key for a record's media.

    Videos overwrite ``videos/<id>.<ext>``. Images get a millisecond timestamp
    suffix so a re-upload never collides with a cached copy of the old image.
    """

    suffix = PurePosixPath(display_name).suffix.lstrip(".").lower()
    extension = suffix or _DEFAULT_EXTENSION[kind]
    prefix = _KEY_PREFIX[kind]
    if kind is MediaKind.IMAGE:
        moment = now or datetime.now(UTC)
        return f"{prefix}/{catalog_id}-{int(moment.timestamp() * 1000)}.{extension}"
    return f"{prefix}/{catalog_id}.{extension}"


def content_type_for(display_name: str, kind: MediaKind = MediaKind.VIDEO) -> str:
    guessed, _ = mimetypes.guess_type(display_name)
    if guessed:
        return guessed
    return "video/mp4" if kind is MediaKind.VIDEO else "image/jpeg"


class BatchCommitExecutor:
    def __init__(
        self,
        database: CatalogDatabase,
        storage: ObjectStorage | None = None,
        *,
        metadata_workers: int = 1,
        media_kind: MediaKind = MediaKind.VIDEO,
        on_finished: Callable[[], None] | None = None,
    ) -> None:
        self._database = database
        self._storage = storage
        self._metadata_workers = max(1, metadata_workers)
        self._media_kind = media_kind
        self._on_finished = on_finished

    def validate(self, matches: Sequence[Match], mode: CommitMode) -> None:
        """Reject the whole batch before anything is written."""

        if mode is CommitMode.BINARY_UPLOAD and self._storage is None:
            raise CommitFatalError("Binary uploads need an object storage")
        for position, match in enumerate(matches):
            if match.catalog_id is None:
                continue
            if not _CATALOG_ID.match(match.catalog_id):
                raise CommitFatalError(
                    f"Row {position} ({match.display_name}): invalid catalog id "
                    f"{match.catalog_id!r}"
                )
            if not _reference_fits(match, mode):
                raise CommitFatalError(
                    f"Row {position} ({match.display_name}): "
                    f"{type(match.reference).__name__} cannot be committed in {mode} mode"
                )

    def commit(
        self,
        matches: Sequence[Match],
        mode: CommitMode,
        *,
        token: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
    ) -> CommitReport:
        assigned = [match for match in matches if match.catalog_id is not None]
        self.validate(assigned, mode)
        active_token = token or CancellationToken()
        report = CommitReport(mode=mode, total=len(assigned))

        log.info("Starting commit: mode=%s, items=%s", mode, len(assigned))
        try:
            if mode.is_metadata_only and self._metadata_workers > 1 and len(assigned) > 1:
                report.results.extend(
                    self._run_parallel(assigned, mode, active_token, progress)
                )
            else:
                self._run_sequential(assigned, mode, active_token, progress, report.results)
        finally:
            report.cancelled = active_token.cancelled
            log.info(
                "Finished commit: mode=%s, succeeded=%s, failed=%s, not_started=%s, cancelled=%s",
                mode,
                report.succeeded,
                report.failed,
                report.skipped,
                report.cancelled,
            )
            if self._on_finished is not None:
                self._on_finished()
        return report

    def _run_sequential(
        self,
        matches: list[Match],
        mode: CommitMode,
        token: CancellationToken,
        progress: ProgressCallback | None,
        results: list[CommitResult],
    ) -> None:
        total = len(matches)
        for position, match in enumerate(matches):
            if token.cancelled:
                log.info("Commit cancelled before item %s of %s", position + 1, total)
                break
            if progress is not None:
                progress(position, total)
            results.append(self._commit_one(match, mode))

    def _run_parallel(
        self,
        matches: list[Match],
        mode: CommitMode,
        token: CancellationToken,
        progress: ProgressCallback | None,
    ) -> list[CommitResult]:
        total = len(matches)
        progress_lock = threading.Lock()

        def run(position: int, match: Match) -> CommitResult | None:
            if token.cancelled:
                return None
            if progress is not None:
                with progress_lock:
                    progress(position, total)
            return self._commit_one(match, mode)

        workers = min(self._metadata_workers, total)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="commit") as pool:
            outcomes = list(pool.map(run, range(total), matches))
        return [outcome for outcome in outcomes if outcome is not None]

    def _commit_one(self, match: Match, mode: CommitMode) -> CommitResult:
        catalog_id = match.catalog_id
        if catalog_id is None:
            raise CommitFatalError(f"{match.display_name} has no catalog id")
        try:
            if mode is CommitMode.BINARY_UPLOAD:
                self._upload(match, catalog_id)
            else:
                self._associate_url(match, catalog_id)
        except Exception as exc:  # noqa: BLE001
            error = CommitItemError(str(exc) or type(exc).__name__)
            log.warning("Commit failed for %s: %s", match.display_name, error)
            return CommitResult(display_name=match.display_name, success=False, error=str(error))
        return CommitResult(display_name=match.display_name, success=True)

    def _associate_url(self, match: Match, catalog_id: str) -> None:
        reference = match.reference
        if not isinstance(reference, (UrlReference, RemoteReference)):
            raise CommitItemError(f"{match.display_name} has no URL to store")
        self._database.update_record(catalog_id, {CatalogField.MEDIA_URL: reference.url})

    def _upload(self, match: Match, catalog_id: str) -> None:
        reference = match.reference
        if not isinstance(reference, LocalFileReference):
            raise CommitItemError(f"{match.display_name} is not a local file")
        if self._storage is None:
            raise CommitItemError("No object storage configured")

        key = storage_key_for(catalog_id, match.display_name, kind=self._media_kind)
        data = reference.read_bytes()
        self._storage.upload(
            key,
            data,
            content_type=content_type_for(match.display_name, self._media_kind),
            overwrite=True,
        )
        public_url = self._storage.get_public_url(key)
        self._database.update_record(
            catalog_id,
            {CatalogField.MEDIA_STORAGE_KEY: key, CatalogField.MEDIA_URL: public_url},
        )
        log.debug("Uploaded %s to %s (%s bytes)", match.display_name, key, len(data))


def _reference_fits(match: Match, mode: CommitMode) -> bool:
    reference = match.reference
    if mode is CommitMode.BINARY_UPLOAD:
        return isinstance(reference, LocalFileReference)
    if mode is CommitMode.REMOTE_LINK:
        return isinstance(reference, RemoteReference)
    return isinstance(reference, (UrlReference, RemoteReference))
