"""
API-layer request/response models.

The POST body contract lives in packages/contracts (ErrorReportV1); the
models here cover the DELETE body and the JSON envelopes the routes return.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class DeleteErrorsRequest(BaseModel):
    """Exactly one selector is honoured, in order: id, ids, projectId, deleteAll."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    ids: list[str] = Field(default_factory=list)
    project_id: Optional[str] = Field(default=None, alias="projectId")
    delete_all: bool = Field(default=False, alias="deleteAll", strict=True)

    @field_validator("ids")
    @classmethod
    def clean_ids(cls, v: list[str]) -> list[str]:
        return [x.strip() for x in v if x and x.strip()]


class ContactRequest(BaseModel):
    employee_hash: Optional[str] = None
    hash: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class MessageResponse(BaseModel):
    success: bool = True
    message: Any = ""


class CreateErrorResponse(MessageResponse):
    id: str
    mapped_frames: int = Field(default=0, serialization_alias="mappedFrames")


class ListErrorsResponse(BaseModel):
    success: bool = True
    filtered: bool
    count: int
    data: list[dict[str, Any]] = Field(default_factory=list)


class FailureResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
