"""Longest-common-subsequence similarity."""

from __future__ import annotations


def lcs_length(a: str, b: str) -> int:
    """Length of the longest common subsequence of ``a`` and ``b``."""

    # rolling rows of the classic (len(a)+1) x (len(b)+1) table
    previous = [0] * (len(b) + 1)
    for char_a in a:
        current = [0] * (len(b) + 1)
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current[j] = previous[j - 1] + 1
            else:
                current[j] = max(previous[j], current[j - 1])
        previous = current
    return previous[len(b)]


def similarity(a: str, b: str) -> float:
    """LCS length over the longer input's length; 0.0 when either side is empty."""

    if not a or not b:
        return 0.0
    return lcs_length(a, b) / max(len(a), len(b))
