"""Error taxonomy for reconciliation and commit.

Item-level errors (``AdapterInputError``, ``ResolverError``, ``CommitItemError``) are
collected and counted; they never abort a batch. Batch-level errors
(``IndexLoadError``, ``RemoteResolutionError``, ``CommitFatalError``) surface to
the caller and leave the session selecting a source again.
"""

from __future__ import annotations


class MediaLinkError(RuntimeError):
    """Base class for pipeline errors."""


class IndexLoadError(MediaLinkError):
    """The catalog could not be read in full."""


class AdapterInputError(MediaLinkError):
    """One line or file of operator input was rejected."""

    def __init__(self, message: str, *, item: str) -> None:
        super().__init__(message)
        self.item = item


class ResolverError(MediaLinkError):
    """Metadata for a single remote link could not be resolved."""

    def __init__(self, message: str, *, link: str) -> None:
        super().__init__(message)
        self.link = link


class RemoteResolutionError(MediaLinkError):
    """None of the submitted remote links could be resolved."""

    def __init__(self, message: str, *, errors: list[ResolverError]) -> None:
        super().__init__(message)
        self.errors = errors


class CommitItemError(MediaLinkError):
    """Writing one match failed; recorded on its ``CommitResult``."""


class CommitFatalError(MediaLinkError):
    """The batch failed validation before any item was written."""


class SessionStateError(MediaLinkError):
    """An operation was requested in a session state that does not allow it."""
