"""Mapping between AttendanceRecord and the document shape of the existing store.

Documents keep camelCase keys, ``YYYY-MM-DD`` dates, ``HH:MM AM/PM`` times and
the overtime hours as a two-decimal string.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import format_clock_time, format_iso_date, parse_clock_time, parse_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import InputError
from ..geofence.model import Coordinate
from .model import AttendanceRecord, OvertimeRecord


def to_document(record: AttendanceRecord) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "userId": record.user_id,
        "userName": record.user_name,
        "date": format_iso_date(record.work_date),
        "inTime": format_clock_time(record.in_time),
        "photoBase64": record.captured_image_ref or "",
        "status": record.status.value,
    }
    if record.attendance_id is not None:
        doc["id"] = str(record.attendance_id)
    if record.out_time is not None:
        doc["outTime"] = format_clock_time(record.out_time)
    if record.coordinate is not None:
        doc["latitude"] = record.coordinate.latitude
        doc["longitude"] = record.coordinate.longitude

    ot = record.overtime
    if ot.start_time is not None:
        doc["overtimeStartTime"] = format_clock_time(ot.start_time)
    if ot.end_time is not None:
        doc["overtimeEndTime"] = format_clock_time(ot.end_time)
    if ot.hours is not None:
        doc["overtimeHours"] = f"{ot.hours:.2f}"
    if ot.needs_review:
        doc["overtimeNeedsReview"] = True

    if record.fun_reaction:
        doc["funReaction"] = record.fun_reaction
    if record.challenge_text:
        doc["challengeText"] = record.challenge_text
        doc["challengeCompleted"] = bool(record.challenge_completed)
    return doc


def _clock_on(work_date, value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.combine(work_date, parse_clock_time(value))


def from_document(doc: dict[str, Any]) -> AttendanceRecord:
    try:
        work_date = parse_iso_date(str(doc["date"]))
        in_time = _clock_on(work_date, doc["inTime"])
        status = AttendanceStatus(doc["status"])
        user_id = str(doc["userId"])

        coordinate = None
        if doc.get("latitude") is not None and doc.get("longitude") is not None:
            coordinate = Coordinate(float(doc["latitude"]), float(doc["longitude"]))

        hours = doc.get("overtimeHours")
        hours = float(hours) if hours not in (None, "") else None
    except (KeyError, TypeError, ValueError) as e:
        raise InputError(f"Malformed attendance document: {e}")
    if in_time is None:
        raise InputError("Malformed attendance document: empty inTime")

    raw_id = doc.get("id")
    return AttendanceRecord(
        attendance_id=int(raw_id) if raw_id is not None and str(raw_id).isdigit() else None,
        user_id=user_id,
        user_name=str(doc.get("userName", "")),
        work_date=work_date,
        in_time=in_time,
        status=status,
        coordinate=coordinate,
        captured_image_ref=doc.get("photoBase64") or None,
        out_time=_clock_on(work_date, doc.get("outTime")),
        overtime=OvertimeRecord(
            start_time=_clock_on(work_date, doc.get("overtimeStartTime")),
            end_time=_clock_on(work_date, doc.get("overtimeEndTime")),
            hours=hours,
            needs_review=bool(doc.get("overtimeNeedsReview", False)),
        ),
        fun_reaction=doc.get("funReaction"),
        challenge_text=doc.get("challengeText"),
        challenge_completed=bool(doc.get("challengeCompleted", False)),
    )
