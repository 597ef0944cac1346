from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from .attendance.factory import CheckInRuleFactory
from .attendance.service import AttendanceLedger
from .commands.handler import CommandHandler, ProfileSource
from .commands.parser import CommandParser
from .common.clock import Clock
from .core.enums import Role
from .directory.service import Directory
from .notifications.dispatcher import NotificationDispatcher
from .notifications.push import LoggingPushChannel, PushChannel
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import PayrollService
from .scheduling.timetable import Timetable
from .scheduling.triggers import ScheduledTriggers
from .settings import BotSettings
from .storage.gateway import PersistenceGateway
from .storage.reconcile import ReconcileResult, load_state
from .storage.store import DurableStore, InMemoryStore
from .transactions.service import TransactionLedger


@dataclass(frozen=True)
class BotContext:
    """Everything one bot process owns, built once at startup and passed explicitly."""

    settings: BotSettings
    clock: Clock
    store: DurableStore
    gateway: PersistenceGateway

    directory: Directory
    attendance: AttendanceLedger
    transactions: TransactionLedger
    payroll: PayrollService
    dispatcher: NotificationDispatcher

    handler: CommandHandler
    triggers: ScheduledTriggers
    timetable: Timetable

    state_lock: asyncio.Lock
    trigger_lock: asyncio.Lock

    async def reconcile(self) -> ReconcileResult:
        return await load_state(
            self.gateway,
            directory=self.directory,
            attendance=self.attendance,
            transactions=self.transactions,
            payroll=self.payroll,
        )


def build_context(
    settings: BotSettings,
    *,
    store: Optional[DurableStore] = None,
    push: Optional[PushChannel] = None,
    profiles: Optional[ProfileSource] = None,
    clock: Optional[Clock] = None,
) -> BotContext:
    clock = clock or Clock(settings.timezone)
    store = store if store is not None else InMemoryStore()
    gateway = PersistenceGateway(store, retries=settings.store_retries, timeout=settings.store_timeout_seconds)

    directory = Directory(superadmin_id=settings.superadmin_id)
    for admin_id in settings.admin_ids:
        directory.register_or_update(admin_id, admin_id, Role.ADMIN, True)

    attendance = AttendanceLedger(
        directory,
        rule_factory=CheckInRuleFactory(
            cutoff=settings.daily_cutoff,
            rest_day=settings.rest_day,
            admins_exempt_from_rest_day=settings.admins_exempt_from_rest_day,
        ),
    )
    transactions = TransactionLedger(
        directory,
        advance_window=settings.advance_window,
        repayment_window=settings.repayment_window,
    )
    payroll = PayrollService(
        directory,
        attendance,
        transactions,
        calculator=StandardPayrollCalculator(floor_at_zero=settings.floor_net_pay_at_zero),
        retention_days=settings.attendance_retention_days,
    )
    dispatcher = NotificationDispatcher(
        directory,
        attendance,
        transactions,
        push or LoggingPushChannel(),
        clock,
        rest_day=settings.rest_day,
        concurrency=settings.push_concurrency,
        advance_keyword=settings.advance_keywords[0] if settings.advance_keywords else "advance",
        repayment_keyword=settings.repayment_keywords[0] if settings.repayment_keywords else "repay",
    )

    state_lock = asyncio.Lock()
    trigger_lock = asyncio.Lock()

    handler = CommandHandler(
        directory=directory,
        attendance=attendance,
        transactions=transactions,
        gateway=gateway,
        clock=clock,
        parser=CommandParser(
            advance_keywords=settings.advance_keywords,
            repayment_keywords=settings.repayment_keywords,
        ),
        state_lock=state_lock,
        profiles=profiles,
        auto_register=settings.auto_register,
    )
    triggers = ScheduledTriggers(
        dispatcher=dispatcher,
        payroll=payroll,
        gateway=gateway,
        clock=clock,
        state_lock=state_lock,
        trigger_lock=trigger_lock,
    )

    return BotContext(
        settings=settings,
        clock=clock,
        store=store,
        gateway=gateway,
        directory=directory,
        attendance=attendance,
        transactions=transactions,
        payroll=payroll,
        dispatcher=dispatcher,
        handler=handler,
        triggers=triggers,
        timetable=Timetable.from_settings(settings),
        state_lock=state_lock,
        trigger_lock=trigger_lock,
    )
