"""Batch commit defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_int

DEFAULT_METADATA_WORKERS: Final[int] = 4
CATALOG_PAGE_SIZE: Final[int] = 1000


@dataclass(frozen=True, slots=True)
class CommitConfig:
    # binary uploads ignore this and always run one at a time
    metadata_workers: int = DEFAULT_METADATA_WORKERS
    catalog_page_size: int = CATALOG_PAGE_SIZE


def get_commit_config() -> CommitConfig:
    return CommitConfig(
        metadata_workers=env_int("MEDIALINK_METADATA_WORKERS", DEFAULT_METADATA_WORKERS, minimum=1),
    )
