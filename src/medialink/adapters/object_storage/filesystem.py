"""Object storage on the local filesystem, used for development and tests."""

from __future__ import annotations

import os
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from .keys import validate_key

if TYPE_CHECKING:
    from collections.abc import Sequence

log = getLogger(__name__)


class FilesystemObjectStorage:
    def __init__(self, root: Path, public_base_url: str | None = None) -> None:
        self.root = root.expanduser().resolve()
        self.public_base_url = (public_base_url or self.root.as_uri()).rstrip("/")

    def path_for(self, key: str) -> Path:
        path = (self.root / validate_key(key)).resolve()
        if not path.is_relative_to(self.root):
            raise ValueError(f"Object key escapes the storage root: {key!r}")
        return path

    def upload(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        overwrite: bool = True,
    ) -> None:
        path = self.path_for(key)
        if path.exists() and not overwrite:
            raise FileExistsError(f"Object already exists: {key}")
        path.parent.mkdir(parents=True, exist_ok=True)

        # write next to the target and swap in, so readers never see a partial file
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            Path(tmp_name).replace(path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("Stored %s (%s, %s bytes)", key, content_type, len(data))

    def get_public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{quote(validate_key(key))}"

    def remove(self, keys: Sequence[str]) -> None:
        for key in keys:
            self.path_for(key).unlink(missing_ok=True)
        if keys:
            log.debug("Removed %s object(s)", len(keys))

    def read(self, key: str) -> bytes:
        return self.path_for(key).read_bytes()


if TYPE_CHECKING:
    from medialink.domain.ports import ObjectStorage

    _storage_check: ObjectStorage = FilesystemObjectStorage(Path())
