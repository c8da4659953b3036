"""
Error ingestion endpoints.

GET    /api/error?projectId=  → latest 100 reports, newest first
POST   /api/error             → symbolicate stack, reverse-geocode, persist
DELETE /api/error             → {id} | {ids: [...]} | {projectId} | {deleteAll: true}
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from contracts.error_report_v1 import ErrorReportV1
from contracts.mapped_stack_v1 import validate_mapped_stack
from symbolicator import SymbolicationPipeline
from symbolicator.logs import log_event

from src.dependencies import (
    get_errors_store,
    get_geocoder,
    get_pipeline,
    get_settings,
)
from src.geocode import ReverseGeocoder
from src.models import (
    CreateErrorResponse,
    DeleteErrorsRequest,
    FailureResponse,
    ListErrorsResponse,
    MessageResponse,
)
from src.settings import Settings
from src.stores.errors_store import ErrorRecord, ErrorsStore

router = APIRouter(prefix="/api/error", tags=["errors"])

INVALID_PAYLOAD = "Invalid payload."


def _failure(status_code: int, message: str, exc: Optional[Exception] = None,
             settings: Optional[Settings] = None) -> JSONResponse:
    detail = str(exc) if exc is not None and settings is not None and settings.expose_error_details else None
    body = FailureResponse(message=message, error=detail).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def map_stack(pipeline: SymbolicationPipeline, stack: Any, error_id: str) -> list[dict]:
    """Symbolicate a reported stack; any pipeline failure yields ``[]``."""
    if not stack:
        return []
    try:
        records = pipeline.symbolicate(stack).to_records()
        validate_mapped_stack(records)
        return records
    except Exception as e:
        log_event("symbolicate_failed", error_id=error_id, error=f"{type(e).__name__}: {e}"[:300])
        return []


# ─── GET /api/error ───────────────────────────────────────────────
@router.get("", response_model=ListErrorsResponse)
def list_errors(
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    store: ErrorsStore = Depends(get_errors_store),
    settings: Settings = Depends(get_settings),
):
    project_id = (project_id or "").strip() or None
    try:
        items = store.list_recent(project_id, limit=settings.errors_list_limit)
    except Exception as e:
        log_event("list_errors_failed", project_id=project_id, error=str(e)[:300])
        return _failure(500, "Failed to fetch errors.", e, settings)

    return ListErrorsResponse(filtered=bool(project_id), count=len(items), data=items)


# ─── POST /api/error ──────────────────────────────────────────────
@router.post("", response_model=CreateErrorResponse)
def report_error(
    payload: Any = Body(default=None),
    store: ErrorsStore = Depends(get_errors_store),
    pipeline: SymbolicationPipeline = Depends(get_pipeline),
    geocoder: ReverseGeocoder = Depends(get_geocoder),
    settings: Settings = Depends(get_settings),
):
    try:
        report = ErrorReportV1.model_validate(payload)
    except ValidationError:
        return _failure(400, INVALID_PAYLOAD)

    error_id = uuid4().hex
    mapped_stack = map_stack(pipeline, report.error.stack, error_id)

    location = geocoder.reverse(report.geo.lat, report.geo.lon)

    rec = ErrorRecord(
        error_id=error_id,
        project_id=report.project_id,
        created_at=datetime.now(timezone.utc).isoformat(),
        error=report.error.model_dump(),
        mapped_stack=mapped_stack,
        device_info=report.device_info,
        location_info=report.location_info,
        geo=report.geo.model_dump(exclude_none=True),
        city=location.get("city"),
        state=location.get("state"),
        country=location.get("country"),
    )
    try:
        store.insert(rec)
    except Exception as e:
        log_event("error_insert_failed", error_id=error_id, project_id=rec.project_id, error=str(e)[:300])
        return _failure(500, "Failed to log error.", e, settings)

    mapped_frames = sum(1 for r in mapped_stack if not r.get("separator"))
    log_event(
        "error_logged",
        error_id=error_id,
        project_id=rec.project_id,
        error_name=report.error.name,
        mapped_frames=mapped_frames,
    )
    return CreateErrorResponse(message="Logged with source map.", id=error_id, mapped_frames=mapped_frames)


# ─── DELETE /api/error ────────────────────────────────────────────
@router.delete("", response_model=MessageResponse)
def delete_errors(
    payload: Any = Body(default=None),
    store: ErrorsStore = Depends(get_errors_store),
    settings: Settings = Depends(get_settings),
):
    try:
        req = DeleteErrorsRequest.model_validate(payload)
    except ValidationError:
        return _failure(400, INVALID_PAYLOAD)

    try:
        if req.id:
            if not store.delete_one(req.id):
                return _failure(404, "Record not found.")
            return MessageResponse(message="Record deleted.")

        if req.ids:
            deleted = store.delete_many(req.ids)
            return MessageResponse(message=f"Deleted {deleted} record(s).")

        if req.project_id:
            deleted = store.delete_by_project(req.project_id)
            return MessageResponse(message=f"Deleted {deleted} record(s) for project '{req.project_id}'.")

        if req.delete_all:
            deleted = store.delete_all()
            return MessageResponse(message=f"All {deleted} record(s) deleted.")
    except Exception as e:
        log_event("delete_errors_failed", error=str(e)[:300])
        return _failure(500, "Failed to delete errors.", e, settings)

    return _failure(400, INVALID_PAYLOAD)
