"""Rebuild in-memory state from the durable store.

The store is an append log. Each table is folded in its native order: a
later record for the same key replaces an earlier one, so the result is
deterministic for a given log.

* roster: key ``person_id``; each record is a full snapshot (debt included).
* payroll_runs: the latest ``closed_at`` marks the end of the last cycle.
* attendance: key ``(person_id, work_date)``; overrides are later records.
* advances / repayments: key ``person_id``; only records made after the last
  payroll run belong to the open cycle. Debts are not re-applied, the roster
  snapshot already carries them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..attendance.service import AttendanceLedger
from ..directory.service import Directory
from ..payroll.service import PayrollService
from ..transactions.service import TransactionLedger
from . import records
from .gateway import PersistenceGateway
from .store import Table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    people: int
    attendance: int
    open_transactions: int
    last_closed_at: Optional[datetime]


def fold(
    tables: Mapping[Table, Sequence[dict]],
    *,
    directory: Directory,
    attendance: AttendanceLedger,
    transactions: TransactionLedger,
    payroll: PayrollService,
) -> ReconcileResult:
    people = {}
    for r in tables.get(Table.ROSTER, ()):
        p = records.person_from_record(r)
        people[p.person_id] = p
    for p in people.values():
        directory.register_or_update(p.person_id, p.name, p.role, p.active, p.daily_rate, p.total_debt)

    last_closed_at: Optional[datetime] = None
    for r in tables.get(Table.PAYROLL_RUNS, ()):
        closed_at = datetime.fromisoformat(r["closed_at"])
        if last_closed_at is None or closed_at > last_closed_at:
            last_closed_at = closed_at
    if last_closed_at is not None:
        payroll.mark_closed(last_closed_at.date())

    entries = {}
    for r in tables.get(Table.ATTENDANCE, ()):
        e = records.attendance_from_record(r)
        entries[(e.person_id, e.work_date)] = e
    for e in entries.values():
        attendance.restore(e)
    payroll.apply_retention()

    pending = {}
    for table in (Table.ADVANCES, Table.REPAYMENTS):
        for r in tables.get(table, ()):
            e = records.transaction_from_record(r)
            if last_closed_at is not None and e.recorded_at <= last_closed_at:
                continue
            pending[(e.person_id, e.kind)] = e
    for e in pending.values():
        transactions.restore(e)

    return ReconcileResult(
        people=len(people),
        attendance=len(entries),
        open_transactions=len(pending),
        last_closed_at=last_closed_at,
    )


async def load_state(
    gateway: PersistenceGateway,
    *,
    directory: Directory,
    attendance: AttendanceLedger,
    transactions: TransactionLedger,
    payroll: PayrollService,
) -> ReconcileResult:
    tables = {table: await gateway.read(table) for table in Table}
    result = fold(tables, directory=directory, attendance=attendance, transactions=transactions, payroll=payroll)
    logger.info(
        "state loaded: %d people, %d attendance entries, %d open transactions",
        result.people,
        result.attendance,
        result.open_transactions,
    )
    return result
