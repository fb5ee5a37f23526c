"""Adapters for remote-cloud file links."""

from __future__ import annotations

from .resolver import HttpRemoteFileResolver, content_length, filename_from_headers

__all__ = ["HttpRemoteFileResolver", "content_length", "filename_from_headers"]
