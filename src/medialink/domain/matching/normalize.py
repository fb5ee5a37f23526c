"""Canonical form of free-form media and catalog names."""

from __future__ import annotations

import re

# an extension never contains whitespace, so "Dr. No" keeps its second word
_EXTENSION = re.compile(r"\.[^/.\s]+$")
_SEPARATORS = re.compile(r"[-_.]")


def strip_extension(name: str) -> str:
    """Remove a single trailing ``.ext`` suffix."""

    return _EXTENSION.sub("", name)


def normalize(raw: str) -> str:
    """Strip the extension, turn ``-``/``_``/``.`` into spaces, lower-case and trim.

    Dots left after the extension is gone become spaces, which keeps
    dot-separated names such as ``Pan.Tadeusz.1999.mkv`` comparable and makes
    the function idempotent.

    >>> normalize("Ogniem-i-Mieczem.mp4")
    'ogniem i mieczem'
    >>> normalize("Pan.Tadeusz.1999.mkv")
    'pan tadeusz 1999'
    """

    return _SEPARATORS.sub(" ", strip_extension(raw)).lower().strip()
