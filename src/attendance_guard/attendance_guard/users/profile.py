from __future__ import annotations

from dataclasses import replace

from ..common.validators import require_non_empty
from ..core.enums import CorrectionField
from ..corrections.model import AddressUpdate, NameUpdate, PhoneUpdate, PhotoUpdate, ProfileUpdate
from .model import UserProfile

CURRENT_PHOTO_PLACEHOLDER = "Current Photo"


def current_value(profile: UserProfile, field: CorrectionField) -> str:
    """The value a correction request records as ``old_value``."""
    if field == CorrectionField.NAME:
        return profile.name
    if field == CorrectionField.PHONE:
        return profile.phone
    if field == CorrectionField.ADDRESS:
        return profile.address
    if field == CorrectionField.PHOTO:
        return CURRENT_PHOTO_PLACEHOLDER
    raise ValueError(f"Unknown correction field: {field!r}")


def apply_update(profile: UserProfile, update: ProfileUpdate) -> UserProfile:
    """Return ``profile`` with exactly the one field named by ``update`` changed."""
    if isinstance(update, NameUpdate):
        return replace(profile, name=require_non_empty(update.value, "Name"))
    if isinstance(update, PhoneUpdate):
        return replace(profile, phone=require_non_empty(update.value, "Phone"))
    if isinstance(update, AddressUpdate):
        return replace(profile, address=require_non_empty(update.value, "Address"))
    if isinstance(update, PhotoUpdate):
        return replace(profile, photo_ref=require_non_empty(update.image_ref, "Photo"))
    raise TypeError(f"Unknown profile update: {type(update).__name__}")
