from __future__ import annotations

from typing import Any

from ..common.datetime_utils import parse_iso_timestamp
from ..core.enums import CorrectionField, CorrectionStatus
from ..core.exceptions import InputError
from .model import CorrectionRequest


def to_document(req: CorrectionRequest) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "id": str(req.request_id),
        "userId": req.user_id,
        "userName": req.user_name,
        "field": req.field.value,
        "oldValue": req.old_value,
        "newValue": req.new_value,
        "status": req.status.value,
        "requestDate": req.request_date.isoformat(),
    }
    if req.approved_at is not None:
        doc["approvedAt"] = req.approved_at.isoformat()
    return doc


def from_document(doc: dict[str, Any]) -> CorrectionRequest:
    try:
        field = CorrectionField(doc["field"])
        status = CorrectionStatus(doc["status"])
        request_id = int(doc.get("id", 0))
        user_id = str(doc["userId"])
        request_date = parse_iso_timestamp(str(doc["requestDate"]))
    except (KeyError, ValueError) as e:
        raise InputError(f"Malformed correction document: {e}")

    approved_raw = doc.get("approvedAt")
    return CorrectionRequest(
        request_id=request_id,
        user_id=user_id,
        user_name=str(doc.get("userName", "")),
        field=field,
        old_value=str(doc.get("oldValue", "")),
        new_value=str(doc.get("newValue", "")),
        status=status,
        request_date=request_date,
        approved_at=parse_iso_timestamp(str(approved_raw)) if approved_raw else None,
    )
