from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class UserProfile:
    """Domain entity: staff profile fields a correction may change."""

    user_id: str
    name: str
    phone: str = ""
    address: str = ""
    photo_ref: Optional[str] = field(default=None, repr=False)
    profile_completed: bool = False
    is_active: bool = True
