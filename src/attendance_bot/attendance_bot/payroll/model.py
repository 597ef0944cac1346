from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal


@dataclass(frozen=True)
class Payslip:
    person_id: str
    name: str
    cycle_start: date
    cycle_end: date
    work_units: Decimal
    daily_rate: Decimal
    gross_pay: Decimal
    advance: Decimal
    repaid: Decimal
    net_pay: Decimal
    remaining_debt: Decimal


@dataclass(frozen=True)
class PayrollSummary:
    """Read-model for the admin report of one closed cycle."""

    cycle_start: date
    cycle_end: date
    closed_at: datetime
    payslips: list[Payslip] = field(default_factory=list)

    @property
    def total_gross(self) -> Decimal:
        return sum((p.gross_pay for p in self.payslips), Decimal("0"))

    @property
    def total_advances(self) -> Decimal:
        return sum((p.advance for p in self.payslips), Decimal("0"))

    @property
    def total_repaid(self) -> Decimal:
        return sum((p.repaid for p in self.payslips), Decimal("0"))

    @property
    def total_net(self) -> Decimal:
        return sum((p.net_pay for p in self.payslips), Decimal("0"))
