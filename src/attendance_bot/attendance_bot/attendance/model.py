from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RejectReason, WorkType


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one person's work status for one calendar day."""

    person_id: str
    work_date: date
    work_type: WorkType
    recorded_at: datetime
    overridden_by: Optional[str] = None


@dataclass(frozen=True)
class CheckInDecision:
    reason: Optional[RejectReason] = None

    @property
    def allowed(self) -> bool:
        return self.reason is None

    @classmethod
    def allow(cls) -> "CheckInDecision":
        return cls()

    @classmethod
    def reject(cls, reason: RejectReason) -> "CheckInDecision":
        return cls(reason=reason)
