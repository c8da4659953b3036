from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientErrorV1(BaseModel):
    """The ``error`` object a browser client reports (serialised JS Error)."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    message: str = Field(min_length=1)
    # kept as sent; the symbolicator rejects non-strings and the report is stored unmapped
    stack: Optional[Any] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("error.message must not be blank")
        return v


class GeoPointV1(BaseModel):
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)


class ErrorReportV1(BaseModel):
    """
    Public input contract (v1).
    What the client-side error reporter POSTs to the ingestion endpoint.
    Wire names are camelCase; python attribute names are snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_version: str = Field(default="error_report.v1", alias="schemaVersion")

    error: ClientErrorV1
    device_info: Optional[Any] = Field(default=None, alias="deviceInfo")
    location_info: Optional[Any] = Field(default=None, alias="locationInfo")
    geo: GeoPointV1 = Field(default_factory=GeoPointV1)
    project_id: str = Field(default="unknown", alias="projectId")

    @field_validator("project_id")
    @classmethod
    def clean_project_id(cls, v: str) -> str:
        return v.strip() or "unknown"
