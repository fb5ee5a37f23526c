"""Links to files hosted by a remote cloud-file provider.

Only link metadata is fetched here (name and size, concurrently and with a small
worker pool). The file bytes stay with the provider; committing stores the link.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from medialink.common.formatting import format_size, shorten
from medialink.config.remote import RemoteConfig
from medialink.domain.errors import AdapterInputError, RemoteResolutionError, ResolverError
from medialink.domain.model import CommitMode, RemoteReference

from .base import MatchingSource, SourceBatch, split_lines

if TYPE_CHECKING:
    from medialink.domain.ports import RemoteFileMetadata, RemoteFileResolver

log = getLogger(__name__)


class RemoteLinkAdapter(MatchingSource):
    commit_mode: ClassVar[CommitMode] = CommitMode.REMOTE_LINK

    def __init__(self, resolver: RemoteFileResolver, config: RemoteConfig | None = None) -> None:
        self._resolver = resolver
        self._config = config or RemoteConfig()

    def accepts(self, link: str) -> bool:
        return self._config.link_pattern.match(link) is not None

    def produce_references(self, raw_input: str) -> SourceBatch:
        batch = SourceBatch()
        links: list[str] = []
        for line in split_lines(raw_input):
            if not self.accepts(line):
                batch.invalid_count += 1
                batch.errors.append(AdapterInputError("Unsupported link", item=line))
                continue
            if line in links:
                batch.duplicate_count += 1
                continue
            links.append(line)

        if not links:
            return batch

        outcomes = self._resolve_all(links)
        resolved: list[RemoteReference] = []
        resolver_errors: list[ResolverError] = []
        for link, outcome in zip(links, outcomes, strict=True):
            if isinstance(outcome, ResolverError):
                resolver_errors.append(outcome)
                continue
            resolved.append(RemoteReference(link=link, name=outcome.name, size=outcome.size))
        batch.references.extend(resolved)
        batch.errors.extend(resolver_errors)

        if not resolved:
            details = "; ".join(f"{shorten(err.link)}: {err}" for err in resolver_errors)
            raise RemoteResolutionError(
                f"None of {len(links)} link(s) could be resolved: {details}",
                errors=resolver_errors,
            )

        total_size = sum(reference.size for reference in resolved)
        if total_size > self._config.large_batch_threshold:
            batch.advisories.append(
                f"Total size of linked files is {format_size(total_size)}; "
                "large files can take a long time to process downstream."
            )

        log.info(
            "Resolved remote links: resolved=%s, failed=%s, invalid=%s, total_size=%s",
            len(resolved),
            len(resolver_errors),
            batch.invalid_count,
            format_size(total_size),
        )
        return batch

    def _resolve_all(self, links: list[str]) -> list[RemoteFileMetadata | ResolverError]:
        workers = max(1, min(self._config.resolver_workers, len(links)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resolver") as pool:
            return list(pool.map(self._resolve_one, links))

    def _resolve_one(self, link: str) -> RemoteFileMetadata | ResolverError:
        try:
            return self._resolver.resolve_metadata(link)
        except ResolverError as exc:
            log.warning("Could not resolve %s: %s", shorten(link), exc)
            return exc
        except Exception as exc:  # noqa: BLE001
            log.warning("Resolver crashed for %s", shorten(link), exc_info=True)
            return ResolverError(str(exc) or type(exc).__name__, link=link)
