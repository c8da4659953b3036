from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from symbolicator.logs import log_event

from ..contact_client import ContactClient
from ..dependencies import get_contact_client
from ..models import ContactRequest, MessageResponse

router = APIRouter(prefix="/api/bio-data", tags=["bio-data"])


@router.post("", response_model=MessageResponse)
def forward_contact(
    payload: Optional[dict] = Body(default=None),
    client: ContactClient = Depends(get_contact_client),
):
    try:
        req = ContactRequest.model_validate(payload or {})
    except ValidationError:
        req = ContactRequest()
    if not req.employee_hash or not req.hash:
        return JSONResponse(status_code=400, content={"success": False, "message": "Give the data first"})

    try:
        result = client.notify(req.employee_hash, req.hash)
    except RuntimeError as e:
        log_event("contact_forward_failed", employee_hash=req.employee_hash, error=str(e)[:300])
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Request failed", "error": str(e)},
        )

    return MessageResponse(message=result)
