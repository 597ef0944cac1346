from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..attendance.service import AttendanceLedger
from ..core.constants import CYCLE_LENGTH_DAYS
from ..directory.service import Directory
from ..transactions.service import TransactionLedger
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import Payslip, PayrollSummary

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class PayrollService:
    """Closes a weekly pay cycle.

    Reads the roster and both ledgers, builds one payslip per active person,
    then clears the cycle's advances and repayments. Attendance history is
    kept (subject to the optional retention window).
    """

    def __init__(
        self,
        directory: Directory,
        attendance: AttendanceLedger,
        transactions: TransactionLedger,
        *,
        calculator: Optional[PayrollCalculator] = None,
        retention_days: Optional[int] = None,
    ):
        self._directory = directory
        self._attendance = attendance
        self._transactions = transactions
        self._calculator = calculator or StandardPayrollCalculator()
        self._retention_days = retention_days
        self._last_closed_on: Optional[date] = None

    @property
    def last_closed_on(self) -> Optional[date]:
        return self._last_closed_on

    def mark_closed(self, closed_on: date) -> None:
        """Record a close date; the last close never moves backwards."""
        if self._last_closed_on is None or closed_on > self._last_closed_on:
            self._last_closed_on = closed_on

    def is_closed_for(self, today: date) -> bool:
        return self._last_closed_on is not None and self._last_closed_on >= today

    def cycle_bounds(self, today: date) -> tuple[date, date]:
        """``(last close, today]``; empty (start after end) once today is closed."""
        if self._last_closed_on is not None:
            return self._last_closed_on + timedelta(days=1), today
        return today - timedelta(days=CYCLE_LENGTH_DAYS - 1), today

    def apply_retention(self) -> int:
        """Drop attendance older than the retention window, counted back from the last close."""
        if self._retention_days is None or self._last_closed_on is None:
            return 0
        purged = self._attendance.purge_before(self._last_closed_on - timedelta(days=self._retention_days))
        if purged:
            logger.info("retention: purged %d attendance entries", purged)
        return purged

    def preview(self, now: datetime) -> PayrollSummary:
        """Compute the payslips of the open cycle without closing it."""
        start, end = self.cycle_bounds(now.date())
        advances = self._transactions.advances_for_cycle()
        repayments = self._transactions.repayments_for_cycle()

        by_person: dict[str, list] = {}
        for entry in self._attendance.entries_between(start, end):
            by_person.setdefault(entry.person_id, []).append(entry)

        payslips: list[Payslip] = []
        for person in sorted(self._directory.active_people(), key=lambda p: p.name.lower()):
            units = self._calculator.work_units(by_person.get(person.person_id, []))
            gross = self._calculator.gross_pay(units, person.daily_rate)
            advance = advances.get(person.person_id, ZERO)
            repaid = repayments.get(person.person_id, ZERO)
            payslips.append(
                Payslip(
                    person_id=person.person_id,
                    name=person.name,
                    cycle_start=start,
                    cycle_end=end,
                    work_units=units,
                    daily_rate=person.daily_rate,
                    gross_pay=gross,
                    advance=advance,
                    repaid=repaid,
                    net_pay=self._calculator.net_pay(gross, advance, repaid),
                    remaining_debt=person.total_debt,
                )
            )

        return PayrollSummary(cycle_start=start, cycle_end=end, closed_at=now, payslips=payslips)

    def close_cycle(self, now: datetime) -> PayrollSummary:
        summary = self.preview(now)

        self._transactions.clear_cycle()
        self.mark_closed(summary.cycle_end)
        self.apply_retention()

        logger.info(
            "pay cycle %s..%s closed: %d payslips, net total %s",
            summary.cycle_start,
            summary.cycle_end,
            len(summary.payslips),
            summary.total_net,
        )
        return summary
