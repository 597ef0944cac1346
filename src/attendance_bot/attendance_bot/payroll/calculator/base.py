from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable

from ...attendance.model import AttendanceEntry


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def work_units(self, entries: Iterable[AttendanceEntry]) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def net_pay(self, gross: Decimal, advance: Decimal, repaid: Decimal) -> Decimal:
        raise NotImplementedError

    def gross_pay(self, units: Decimal, daily_rate: Decimal) -> Decimal:
        return units * daily_rate
