"""Port for resolving remote-cloud file links."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemoteFileMetadata:
    name: str
    size: int


@dataclass(slots=True)
class TempMaterialization:
    """A remote file copied into temporary public storage.

    ``cleanup`` deletes the temporary copy. It runs at most once no matter how
    often it is called or scheduled.
    """

    temp_url: str
    _cleanup: Callable[[], None]
    _done: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _timer: threading.Timer | None = None

    @property
    def cleaned_up(self) -> bool:
        return self._done

    def cleanup(self) -> None:
        with self._lock:
            if self._done:
                return
            self._done = True
        try:
            self._cleanup()
        except Exception:  # noqa: BLE001
            log.warning("Failed to delete temporary copy behind %s", self.temp_url, exc_info=True)

    def schedule_cleanup(self, delay_seconds: float) -> threading.Timer:
        """Run ``cleanup`` after ``delay_seconds`` so readers of ``temp_url`` can finish."""

        timer = threading.Timer(delay_seconds, self.cleanup)
        self._timer = timer
        timer.start()
        return timer

    def wait_for_cleanup(self) -> None:
        """Block until the scheduled cleanup has run, or run it now if none is scheduled.

        An interrupt while waiting deletes the copy immediately.
        """

        timer = self._timer
        try:
            if timer is not None:
                timer.join()
        finally:
            if timer is not None:
                timer.cancel()
            self.cleanup()


@runtime_checkable
class RemoteFileResolver(Protocol):
    """External collaborator that knows how to talk to one cloud-file provider.

    ``resolve_metadata`` raises ``ResolverError`` for links it cannot resolve.
    """

    def resolve_metadata(self, link: str) -> RemoteFileMetadata: ...

    def materialize_to_temp_storage(self, link: str, owner_id: str) -> TempMaterialization: ...


__all__ = ["RemoteFileMetadata", "RemoteFileResolver", "TempMaterialization"]
