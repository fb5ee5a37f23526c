"""Operator-facing reconciliation workflow.

A session walks through ``SELECT_SOURCE -> REVIEWING -> COMMITTING -> DONE``.
``cancel``/``reset`` return to ``SELECT_SOURCE`` from anywhere.
"""

from __future__ import annotations

import threading
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from medialink.domain.commit import CancellationToken
from medialink.domain.errors import CommitFatalError, SessionStateError
from medialink.domain.model import MatchStats

if TYPE_CHECKING:
    from medialink.domain.catalog_index import CatalogIndex
    from medialink.domain.commit import BatchCommitExecutor, ProgressCallback
    from medialink.domain.model import CommitMode, CommitReport, CommitResult, Match
    from medialink.domain.sources import SourceAdapter, SourceBatch

log = getLogger(__name__)


class SessionState(StrEnum):
    SELECT_SOURCE = "select_source"
    REVIEWING = "reviewing"
    COMMITTING = "committing"
    DONE = "done"


class ReconciliationSession:
    def __init__(self, index: CatalogIndex, executor: BatchCommitExecutor) -> None:
        self._index = index
        self._executor = executor
        self._lock = threading.RLock()
        self._state = SessionState.SELECT_SOURCE
        self._matches: list[Match] = []
        self._mode: CommitMode | None = None
        self._batch: SourceBatch | None = None
        self._report: CommitReport | None = None
        self._token: CancellationToken | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def index(self) -> CatalogIndex:
        return self._index

    @property
    def mode(self) -> CommitMode | None:
        return self._mode

    @property
    def last_batch(self) -> SourceBatch | None:
        return self._batch

    @property
    def report(self) -> CommitReport | None:
        return self._report

    @property
    def results(self) -> list[CommitResult]:
        if self._report is None:
            return []
        return list(self._report.results)

    def start(self) -> None:
        """Load the catalog snapshot. ``IndexLoadError`` propagates unchanged."""

        self._require(SessionState.SELECT_SOURCE, action="start")
        self._index.load()

    def run_source(self, adapter: SourceAdapter[Any], raw_input: object) -> list[Match]:
        """Produce and score references from ``raw_input``.

        Batch-level errors propagate and leave the session selecting a source. An
        empty match list also keeps the session in ``SELECT_SOURCE``.
        """

        self._require(SessionState.SELECT_SOURCE, action="run a source")
        batch = adapter.produce_references(raw_input)
        matches = adapter.match_all(batch, self._index) if not batch.is_empty else []

        with self._lock:
            self._batch = batch
            self._matches = matches
            self._mode = adapter.commit_mode
            self._report = None
            if matches:
                self._state = SessionState.REVIEWING
        stats = MatchStats.of(matches)
        log.info(
            "Source %s produced %s match(es): matched=%s, partial=%s, unmatched=%s",
            type(adapter).__name__,
            stats.total,
            stats.matched,
            stats.partial,
            stats.unmatched,
        )
        return list(matches)

    def get_matches(self) -> list[Match]:
        return list(self._matches)

    def stats(self) -> MatchStats:
        return MatchStats.of(self._matches)

    def override(self, position: int, catalog_id: str) -> Match:
        """Assign row ``position`` to ``catalog_id`` as an operator-confirmed match."""

        self._require(SessionState.REVIEWING, action="override")
        if not 0 <= position < len(self._matches):
            raise IndexError(f"No match at position {position}")
        record = self._index.get(catalog_id)
        if record is None:
            raise KeyError(f"Unknown catalog id {catalog_id}")
        with self._lock:
            updated = self._matches[position].assign(record.record)
            self._matches[position] = updated
        log.debug("Override row %s -> %s", position, catalog_id)
        return updated

    def commit(self, progress: ProgressCallback | None = None) -> CommitReport:
        with self._lock:
            self._require(SessionState.REVIEWING, action="commit")
            mode = self._mode
            if mode is None:
                raise SessionStateError("No source has been run")
            token = CancellationToken()
            self._token = token
            self._state = SessionState.COMMITTING
        assigned = [match for match in self._matches if match.catalog_id is not None]

        try:
            self._check_ids_exist(assigned)
            report = self._executor.commit(assigned, mode, token=token, progress=progress)
        except Exception:
            log.exception("Commit aborted")
            self._discard()
            raise

        with self._lock:
            if self._token is token and not token.cancelled:
                self._report = report
                self._state = SessionState.DONE
            self._token = None
        return report

    def cancel(self) -> None:
        """Abort any in-flight commit and return to source selection."""

        with self._lock:
            if self._token is not None:
                self._token.cancel()
                log.info("Cancellation requested for the running commit")
            self._discard()

    def reset(self) -> None:
        self.cancel()

    def _check_ids_exist(self, matches: list[Match]) -> None:
        for match in matches:
            catalog_id = match.catalog_id or ""
            if not catalog_id.strip():
                raise CommitFatalError(f"{match.display_name} has a blank catalog id")
            if self._index.get(catalog_id) is None:
                raise CommitFatalError(
                    f"{match.display_name} points at unknown catalog id {catalog_id}"
                )

    def _discard(self) -> None:
        with self._lock:
            self._matches = []
            self._batch = None
            self._mode = None
            self._report = None
            self._token = None
            self._state = SessionState.SELECT_SOURCE

    def _require(self, expected: SessionState, *, action: str) -> None:
        if self._state is not expected:
            raise SessionStateError(f"Cannot {action} while {self._state}")
