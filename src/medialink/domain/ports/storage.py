"""Port for the object storage that receives uploaded media."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class ObjectStorage(Protocol):
    """Key/value blob store with public URLs.

    Implementations raise on failure; callers turn the exception into a per-item
    result. ``overwrite=True`` makes ``upload`` an idempotent upsert.
    """

    def upload(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        overwrite: bool = True,
    ) -> None: ...

    def get_public_url(self, key: str) -> str: ...

    def remove(self, keys: Sequence[str]) -> None: ...


__all__ = ["ObjectStorage"]
