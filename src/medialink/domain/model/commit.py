"""Per-item commit outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import CommitMode


@dataclass(frozen=True, slots=True)
class CommitResult:
    display_name: str
    success: bool
    error: str | None = None


@dataclass(slots=True)
class CommitReport:
    """Terminal summary of one commit run."""

    mode: CommitMode
    total: int
    results: list[CommitResult] = field(default_factory=list[CommitResult])
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.success)

    @property
    def skipped(self) -> int:
        """Items never started because the run was cancelled."""

        return self.total - len(self.results)

    @property
    def failures(self) -> list[CommitResult]:
        return [result for result in self.results if not result.success]
