"""Media references produced by source adapters.

Every reference carries a ``display_name``; it is the only thing the matcher looks
at. The concrete type decides which commit modes can consume it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlsplit


@dataclass(frozen=True, slots=True)
class LocalFileReference:
    path: Path

    @property
    def display_name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True, slots=True)
class UrlReference:
    url: str

    @property
    def display_name(self) -> str:
        return filename_from_url(self.url)


@dataclass(frozen=True, slots=True)
class RemoteReference:
    link: str
    name: str
    size: int = 0

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def url(self) -> str:
        return self.link


type MediaReference = LocalFileReference | UrlReference | RemoteReference


def filename_from_url(url: str) -> str:
    """Return the URL-decoded last path segment of ``url``.

    Falls back to the raw text after the last slash when the URL cannot be parsed.
    """

    try:
        path = urlsplit(url).path
        name = unquote(path.rsplit("/", 1)[-1], errors="strict")
    except (ValueError, UnicodeDecodeError):
        name = ""
    return name or url.rsplit("/", 1)[-1] or url


def reference_url(reference: MediaReference) -> str | None:
    if isinstance(reference, (UrlReference, RemoteReference)):
        return reference.url
    return None
