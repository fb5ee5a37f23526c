"""Helpers shared across layers."""

from __future__ import annotations

from .formatting import format_size, percent, shorten

__all__ = ["format_size", "percent", "shorten"]
