from __future__ import annotations


class ObjectStorageError(RuntimeError):
    """Raised when the object storage rejects a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidObjectKeyError(ObjectStorageError, ValueError):
    """Raised for keys that are empty or would escape the storage root."""
