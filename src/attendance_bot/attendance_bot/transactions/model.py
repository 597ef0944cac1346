from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal

from ..core.enums import TransactionKind


@dataclass(frozen=True)
class TransactionWindow:
    """Weekday plus a half-open ``[start, end)`` time-of-day span."""

    weekday: int
    start: time
    end: time

    def contains(self, now: datetime) -> bool:
        if now.weekday() != self.weekday:
            return False
        t = now.time().replace(tzinfo=None)
        return self.start <= t < self.end


@dataclass(frozen=True)
class TransactionEntry:
    """Domain entity: one cash advance or one debt repayment in the open pay cycle."""

    person_id: str
    kind: TransactionKind
    amount: Decimal
    recorded_at: datetime

    @property
    def work_date(self) -> date:
        return self.recorded_at.date()
