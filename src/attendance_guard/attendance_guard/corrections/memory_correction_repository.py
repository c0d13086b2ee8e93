from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import CorrectionField, CorrectionStatus
from .model import CorrectionRequest
from .repository import CorrectionRepository


class InMemoryCorrectionRepository(CorrectionRepository):
    def __init__(self):
        self._by_id: dict[int, CorrectionRequest] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(
        self,
        *,
        user_id: str,
        user_name: str,
        field: CorrectionField,
        old_value: str,
        new_value: str,
        request_date: datetime,
    ) -> int:
        with self._lock:
            rid = self._next_id
            self._next_id += 1
            self._by_id[rid] = CorrectionRequest(
                request_id=rid,
                user_id=user_id,
                user_name=user_name,
                field=field,
                old_value=old_value,
                new_value=new_value,
                status=CorrectionStatus.PENDING,
                request_date=request_date,
            )
            return rid

    def get(self, *, request_id: int) -> Optional[CorrectionRequest]:
        with self._lock:
            return self._by_id.get(int(request_id))

    def list_for_user(self, *, user_id: str) -> Sequence[CorrectionRequest]:
        with self._lock:
            items = [r for r in self._by_id.values() if r.user_id == user_id]
        items.sort(key=lambda r: (r.request_date, r.request_id), reverse=True)
        return items

    def list_all(self, *, status: Optional[CorrectionStatus] = None, limit: int = 500) -> Sequence[CorrectionRequest]:
        with self._lock:
            items = [r for r in self._by_id.values() if status is None or r.status == status]
        items.sort(key=lambda r: (r.request_date, r.request_id), reverse=True)
        return items[: int(limit)]

    def conditional_update(
        self,
        *,
        request_id: int,
        expected_status: CorrectionStatus,
        status: CorrectionStatus,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        with self._lock:
            req = self._by_id.get(int(request_id))
            if not req or req.status != expected_status:
                return False
            self._by_id[req.request_id] = replace(
                req,
                status=status,
                approved_at=approved_at if approved_at is not None else req.approved_at,
            )
            return True
