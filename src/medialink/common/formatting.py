"""Display helpers shared by the CLI and adapter advisories."""

from __future__ import annotations

from typing import Final

_KIB: Final[int] = 1024
_MIB: Final[int] = 1024 * 1024
_GIB: Final[int] = 1024 * 1024 * 1024


def format_size(num_bytes: int) -> str:
    if num_bytes < _MIB:
        return f"{num_bytes / _KIB:.1f} KB"
    if num_bytes < _GIB:
        return f"{num_bytes / _MIB:.1f} MB"
    return f"{num_bytes / _GIB:.2f} GB"


def shorten(text: str, limit: int = 50) -> str:
    """Trim long links for log lines and error listings."""

    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def percent(value: float) -> str:
    return f"{round(value * 100)}%"
