"""Tri-state classification of the best catalog candidate for a reference."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from medialink.domain.model import Match, MatchStatus

from .normalize import normalize
from .similarity import similarity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from medialink.domain.model import MediaReference, NormalizedCatalogRecord

# Product constants shared by every adapter; the review screen relies on them.
MATCHED_THRESHOLD: Final[float] = 0.70
PARTIAL_THRESHOLD: Final[float] = 0.40


def classify(score: float) -> MatchStatus:
    if score >= MATCHED_THRESHOLD:
        return MatchStatus.MATCHED
    if score >= PARTIAL_THRESHOLD:
        return MatchStatus.PARTIAL
    return MatchStatus.UNMATCHED


def best_match(
    reference: MediaReference,
    records: Iterable[NormalizedCatalogRecord],
) -> Match:
    """Score ``reference`` against every record and classify the best candidate.

    Only strictly better scores replace the current candidate, so ties keep the
    record that appears first in the index.
    """

    display_name = reference.display_name
    normalized_name = normalize(display_name)
    best_score = 0.0
    best: NormalizedCatalogRecord | None = None
    for record in records:
        score = similarity(normalized_name, record.normalized_title)
        if score > best_score:
            best_score = score
            best = record

    status = classify(best_score)
    if best is None or status is MatchStatus.UNMATCHED:
        return Match(
            reference=reference,
            display_name=display_name,
            catalog_id=None,
            catalog_title=None,
            similarity=best_score,
            status=MatchStatus.UNMATCHED,
        )
    return Match(
        reference=reference,
        display_name=display_name,
        catalog_id=best.id,
        catalog_title=best.title,
        similarity=best_score,
        status=status,
    )
