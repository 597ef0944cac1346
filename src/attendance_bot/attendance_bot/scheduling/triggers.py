from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..common.clock import Clock
from ..core.enums import TransactionKind
from ..core.exceptions import ExternalIOError
from ..notifications.dispatcher import DeliveryReport, NotificationDispatcher
from ..payroll.service import PayrollService
from ..storage import records
from ..storage.gateway import PersistenceGateway
from ..storage.store import Table
from .hooks import Hook

logger = logging.getLogger(__name__)

_WINDOW_HOOKS = {
    Hook.OPEN_ADVANCE_WINDOW: (TransactionKind.ADVANCE, True),
    Hook.CLOSE_ADVANCE_WINDOW: (TransactionKind.ADVANCE, False),
    Hook.OPEN_REPAYMENT_WINDOW: (TransactionKind.REPAYMENT, True),
    Hook.CLOSE_REPAYMENT_WINDOW: (TransactionKind.REPAYMENT, False),
}


class ScheduledTriggers:
    """Runs scheduled hooks one at a time.

    ``trigger_lock`` keeps hooks from overlapping each other; ``state_lock`` is
    shared with the command handler and guards the payroll close.
    """

    def __init__(
        self,
        *,
        dispatcher: NotificationDispatcher,
        payroll: PayrollService,
        gateway: PersistenceGateway,
        clock: Clock,
        state_lock: asyncio.Lock,
        trigger_lock: asyncio.Lock,
        default_reminder_label: str = "⏰ Reminder",
    ):
        self._dispatcher = dispatcher
        self._payroll = payroll
        self._gateway = gateway
        self._clock = clock
        self._state_lock = state_lock
        self._trigger_lock = trigger_lock
        self._default_label = default_reminder_label

    async def run(self, hook: Hook, *, label: Optional[str] = None) -> DeliveryReport:
        async with self._trigger_lock:
            logger.info("running hook %s", hook.value)
            if hook == Hook.DAILY_REMINDER:
                return await self._dispatcher.daily_reminder(label or self._default_label)
            if hook == Hook.DAILY_REPORT:
                return await self._dispatcher.daily_report()
            if hook in _WINDOW_HOOKS:
                kind, opened = _WINDOW_HOOKS[hook]
                return await self._dispatcher.announce_window(kind, opened=opened)
            if hook == Hook.WEEKLY_PAYROLL:
                return await self._weekly_payroll()
        raise ValueError(f"Unhandled hook: {hook}")

    async def _weekly_payroll(self) -> DeliveryReport:
        async with self._state_lock:
            now = self._clock.now()
            if self._payroll.is_closed_for(now.date()):
                logger.warning("pay cycle already closed on %s; weeklyPayroll ignored", self._payroll.last_closed_on)
                return DeliveryReport(skipped=True)
            summary = self._payroll.close_cycle(now)

        try:
            await self._gateway.append(Table.PAYROLL_RUNS, records.payroll_run_record(summary))
        except ExternalIOError:
            logger.exception("payroll run %s..%s not written to store", summary.cycle_start, summary.cycle_end)

        return await self._dispatcher.deliver_payroll(summary)
