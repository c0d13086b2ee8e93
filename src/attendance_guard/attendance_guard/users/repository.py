from __future__ import annotations

from typing import Optional, Protocol

from .model import UserProfile


class UserRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def save_profile(self, profile: UserProfile) -> bool:
        raise NotImplementedError
