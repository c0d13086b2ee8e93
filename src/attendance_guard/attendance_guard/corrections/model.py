from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from ..core.enums import CorrectionField, CorrectionStatus


@dataclass(frozen=True)
class CorrectionRequest:
    request_id: int
    user_id: str
    user_name: str
    field: CorrectionField
    old_value: str
    new_value: str
    status: CorrectionStatus
    request_date: datetime
    approved_at: Optional[datetime] = None


@dataclass(frozen=True)
class EditGrant:
    """Derived view of a request's edit window; recomputed on every read."""

    request: CorrectionRequest
    active: bool
    remaining_seconds: int


# One variant per correctable profile field.
@dataclass(frozen=True)
class NameUpdate:
    value: str


@dataclass(frozen=True)
class PhoneUpdate:
    value: str


@dataclass(frozen=True)
class AddressUpdate:
    value: str


@dataclass(frozen=True)
class PhotoUpdate:
    image_ref: str = field(repr=False)


ProfileUpdate = Union[NameUpdate, PhoneUpdate, AddressUpdate, PhotoUpdate]


def field_of(update: ProfileUpdate) -> CorrectionField:
    if isinstance(update, NameUpdate):
        return CorrectionField.NAME
    if isinstance(update, PhoneUpdate):
        return CorrectionField.PHONE
    if isinstance(update, AddressUpdate):
        return CorrectionField.ADDRESS
    if isinstance(update, PhotoUpdate):
        return CorrectionField.PHOTO
    raise TypeError(f"Unknown profile update: {type(update).__name__}")
