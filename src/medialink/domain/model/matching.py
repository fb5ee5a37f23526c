"""Match rows reviewed by the operator."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .enums import MatchStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .catalog import CatalogRecord
    from .references import MediaReference


@dataclass(frozen=True, slots=True)
class Match:
    reference: MediaReference
    display_name: str
    catalog_id: str | None
    catalog_title: str | None
    similarity: float
    status: MatchStatus

    def __post_init__(self) -> None:
        if self.status is MatchStatus.UNMATCHED and self.catalog_id is not None:
            raise ValueError("Unmatched rows cannot carry a catalog id")
        if self.status is not MatchStatus.UNMATCHED and self.catalog_id is None:
            raise ValueError(f"{self.status} rows require a catalog id")
        if not 0.0 <= self.similarity <= 1.0:
            raise ValueError(f"Similarity out of range: {self.similarity}")

    @property
    def is_assigned(self) -> bool:
        return self.catalog_id is not None

    def assign(self, record: CatalogRecord) -> Match:
        """Return the operator-confirmed version of this row."""

        return replace(
            self,
            catalog_id=record.id,
            catalog_title=record.title,
            similarity=1.0,
            status=MatchStatus.MATCHED,
        )


@dataclass(frozen=True, slots=True)
class MatchStats:
    matched: int = 0
    partial: int = 0
    unmatched: int = 0

    @property
    def total(self) -> int:
        return self.matched + self.partial + self.unmatched

    @classmethod
    def of(cls, matches: Iterable[Match]) -> MatchStats:
        counts = dict.fromkeys(MatchStatus, 0)
        for match in matches:
            counts[match.status] += 1
        return cls(
            matched=counts[MatchStatus.MATCHED],
            partial=counts[MatchStatus.PARTIAL],
            unmatched=counts[MatchStatus.UNMATCHED],
        )
