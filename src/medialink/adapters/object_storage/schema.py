"""Pydantic models for the storage REST API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StorageBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UploadResponse(StorageBaseModel):
    key: str = Field(alias="Key")


class ErrorResponse(StorageBaseModel):
    status_code: str | None = Field(default=None, alias="statusCode")
    error: str | None = None
    message: str = "Unknown storage error"

    @field_validator("status_code", mode="before")
    @classmethod
    def _stringify_status(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value
