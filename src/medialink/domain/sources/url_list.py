"""Pasted lists of direct media URLs."""

from __future__ import annotations

from logging import getLogger
from typing import ClassVar

from medialink.domain.errors import AdapterInputError
from medialink.domain.model import CommitMode, UrlReference

from .base import MatchingSource, SourceBatch, is_http_url, split_lines

log = getLogger(__name__)


class UrlListAdapter(MatchingSource):
    """One URL per line; the file name in the URL path is what gets matched."""

    commit_mode: ClassVar[CommitMode] = CommitMode.URL

    def produce_references(self, raw_input: str) -> SourceBatch:
        batch = SourceBatch()
        seen: set[str] = set()
        for line in split_lines(raw_input):
            if not is_http_url(line):
                batch.invalid_count += 1
                batch.errors.append(AdapterInputError("Not an http(s) URL", item=line))
                continue
            if line in seen:
                batch.duplicate_count += 1
                continue
            seen.add(line)
            batch.references.append(UrlReference(url=line))

        log.info(
            "Parsed URL list: accepted=%s, invalid=%s, duplicates=%s",
            len(batch.references),
            batch.invalid_count,
            batch.duplicate_count,
        )
        return batch
