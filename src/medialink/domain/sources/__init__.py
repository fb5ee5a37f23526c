"""Source adapters: one per kind of operator input, one shared matching path."""

from __future__ import annotations

from .base import MatchingSource, SourceAdapter, SourceBatch, match_references
from .local_files import LocalFileAdapter
from .manual_picker import ManualPick, ManualPickerAdapter
from .remote_links import RemoteLinkAdapter
from .url_list import UrlListAdapter

__all__ = [
    "LocalFileAdapter",
    "ManualPick",
    "ManualPickerAdapter",
    "MatchingSource",
    "RemoteLinkAdapter",
    "SourceAdapter",
    "SourceBatch",
    "UrlListAdapter",
    "match_references",
]
