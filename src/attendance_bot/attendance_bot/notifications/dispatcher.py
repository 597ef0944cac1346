from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..attendance.service import AttendanceLedger
from ..common.clock import Clock
from ..core.enums import TransactionKind
from ..directory.service import Directory
from ..payroll.model import PayrollSummary
from ..transactions.service import TransactionLedger
from . import messages
from .push import PushChannel

logger = logging.getLogger(__name__)


@dataclass
class DeliveryReport:
    sent: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    skipped: bool = False

    def merge(self, other: "DeliveryReport") -> "DeliveryReport":
        self.sent.extend(other.sent)
        self.failed.update(other.failed)
        return self

    def as_dict(self) -> dict:
        return {"sent": list(self.sent), "failed": dict(self.failed), "skipped": self.skipped}


class NotificationDispatcher:
    """Decides who is told what; delivery goes through the push channel.

    Fan-out is bounded by ``concurrency``. Each recipient is tried on its own:
    one failed push is logged and recorded, the rest still go out.
    """

    def __init__(
        self,
        directory: Directory,
        attendance: AttendanceLedger,
        transactions: TransactionLedger,
        push: PushChannel,
        clock: Clock,
        *,
        rest_day: int,
        concurrency: int = 5,
        advance_keyword: str = "advance",
        repayment_keyword: str = "repay",
    ):
        self._directory = directory
        self._attendance = attendance
        self._transactions = transactions
        self._push = push
        self._clock = clock
        self._rest_day = int(rest_day)
        self._concurrency = max(1, int(concurrency))
        self._keywords = {
            TransactionKind.ADVANCE: advance_keyword,
            TransactionKind.REPAYMENT: repayment_keyword,
        }

    async def fan_out(self, outbox: Sequence[tuple[str, str]]) -> DeliveryReport:
        report = DeliveryReport()
        sem = asyncio.Semaphore(self._concurrency)

        async def deliver(person_id: str, text: str) -> None:
            async with sem:
                try:
                    await self._push.push(person_id, text)
                except Exception as exc:
                    logger.warning("push to %s failed: %r", person_id, exc)
                    report.failed[person_id] = str(exc) or exc.__class__.__name__
                else:
                    report.sent.append(person_id)

        await asyncio.gather(*(deliver(pid, text) for pid, text in outbox))
        return report

    def _is_rest_day(self) -> bool:
        return self._clock.now().weekday() == self._rest_day

    def reminder_outbox(self, label: str) -> list[tuple[str, str]]:
        today = self._clock.today()
        return [
            (p.person_id, messages.reminder(label, today, p.name))
            for p in self._directory.active_people()
            if not self._attendance.has_entry_for_date(p.person_id, today)
        ]

    async def daily_reminder(self, label: str) -> DeliveryReport:
        if self._is_rest_day():
            return DeliveryReport(skipped=True)
        return await self.fan_out(self.reminder_outbox(label))

    def daily_report_text(self) -> str:
        today = self._clock.today()
        entries = {e.person_id: e for e in self._attendance.entries_for_date(today)}
        checked: list = []
        missing: list[str] = []
        for p in sorted(self._directory.active_people(), key=lambda x: x.name.lower()):
            entry = entries.get(p.person_id)
            if entry:
                checked.append((p.name, entry.work_type))
            else:
                missing.append(p.name)
        return messages.daily_report(today, checked, missing)

    async def daily_report(self) -> DeliveryReport:
        if self._is_rest_day():
            return DeliveryReport(skipped=True)
        text = self.daily_report_text()
        return await self.fan_out([(aid, text) for aid in self._directory.admin_ids()])

    async def announce_window(self, kind: TransactionKind, *, opened: bool) -> DeliveryReport:
        if opened:
            text = messages.window_opened(kind, self._transactions.window_for(kind), self._keywords[kind])
        else:
            text = messages.window_closed(kind)
        return await self.fan_out([(p.person_id, text) for p in self._directory.active_people()])

    async def deliver_payroll(self, summary: PayrollSummary) -> DeliveryReport:
        outbox = [(p.person_id, messages.payslip(p)) for p in summary.payslips]
        report = await self.fan_out(outbox)
        text = messages.payroll_summary(summary)
        return report.merge(await self.fan_out([(aid, text) for aid in self._directory.admin_ids()]))
