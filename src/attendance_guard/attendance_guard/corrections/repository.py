from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CorrectionField, CorrectionStatus
from .model import CorrectionRequest


class CorrectionRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[CorrectionRequest]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: str) -> Sequence[CorrectionRequest]:
        raise NotImplementedError

    def list_all(self, *, status: Optional[CorrectionStatus] = None, limit: int = 500) -> Sequence[CorrectionRequest]:
        """Newest request first."""
        raise NotImplementedError

    def conditional_update(
        self,
        *,
        request_id: int,
        expected_status: CorrectionStatus,
        status: CorrectionStatus,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        """Set ``status`` (and ``approved_at`` when given) only if the current status is ``expected_status``."""
        raise NotImplementedError
