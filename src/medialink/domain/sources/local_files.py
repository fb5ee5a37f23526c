"""Operator-selected files from the local disk."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from medialink.domain.errors import AdapterInputError
from medialink.domain.model import CommitMode, LocalFileReference

from .base import MatchingSource, SourceBatch

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)


class LocalFileAdapter(MatchingSource):
    """Match files by name; bytes are only read when the batch is committed."""

    commit_mode: ClassVar[CommitMode] = CommitMode.BINARY_UPLOAD

    def produce_references(self, raw_input: Iterable[Path | str]) -> SourceBatch:
        batch = SourceBatch()
        for entry in raw_input:
            path = Path(entry).expanduser()
            if not path.is_file():
                batch.invalid_count += 1
                batch.errors.append(AdapterInputError(f"Not a file: {path}", item=str(path)))
                continue
            batch.references.append(LocalFileReference(path=path))
        if batch.invalid_count:
            log.warning("Skipped %s unreadable file(s)", batch.invalid_count)
        return batch
