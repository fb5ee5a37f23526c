"""Object storage adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from medialink.config.errors import ConfigurationError

from .errors import InvalidObjectKeyError, ObjectStorageError
from .filesystem import FilesystemObjectStorage
from .http import HttpObjectStorage
from .keys import validate_key

if TYPE_CHECKING:
    from medialink.config.object_storage import ObjectStorageConfig
    from medialink.domain.ports import ObjectStorage


def build_object_storage(config: ObjectStorageConfig) -> ObjectStorage:
    if config.backend == "http":
        return HttpObjectStorage(config)
    if config.root is None:
        raise ConfigurationError("Filesystem object storage needs a root directory")
    return FilesystemObjectStorage(config.root, config.public_base_url)


__all__ = [
    "FilesystemObjectStorage",
    "HttpObjectStorage",
    "InvalidObjectKeyError",
    "ObjectStorageError",
    "build_object_storage",
    "validate_key",
]
