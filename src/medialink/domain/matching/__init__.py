"""Name matching shared by every source adapter."""

from __future__ import annotations

from .classify import MATCHED_THRESHOLD, PARTIAL_THRESHOLD, best_match, classify
from .normalize import normalize
from .similarity import lcs_length, similarity

__all__ = [
    "MATCHED_THRESHOLD",
    "PARTIAL_THRESHOLD",
    "best_match",
    "classify",
    "lcs_length",
    "normalize",
    "similarity",
]
