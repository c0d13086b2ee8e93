from __future__ import annotations

import threading
from typing import Iterable, Optional

from .model import UserProfile
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self, profiles: Iterable[UserProfile] = ()):
        self._by_id: dict[str, UserProfile] = {p.user_id: p for p in profiles}
        self._lock = threading.Lock()

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        with self._lock:
            return self._by_id.get(user_id)

    def save_profile(self, profile: UserProfile) -> bool:
        with self._lock:
            if profile.user_id not in self._by_id:
                return False
            self._by_id[profile.user_id] = profile
            return True

    def add(self, profile: UserProfile) -> None:
        with self._lock:
            self._by_id[profile.user_id] = profile
