from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ...attendance.model import AttendanceEntry
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: full day 1.0, half day 0.5, off 0; net = gross - advance - repaid.

    Net pay is reported as-is (it may be negative) unless ``floor_at_zero`` is set.
    """

    def __init__(self, *, floor_at_zero: bool = False):
        self._floor_at_zero = floor_at_zero

    def work_units(self, entries: Iterable[AttendanceEntry]) -> Decimal:
        return sum((e.work_type.units for e in entries), Decimal("0"))

    def net_pay(self, gross: Decimal, advance: Decimal, repaid: Decimal) -> Decimal:
        net = gross - advance - repaid
        if self._floor_at_zero:
            return max(net, Decimal("0"))
        return net
