from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence


class Table(str, Enum):
    ROSTER = "roster"
    ATTENDANCE = "attendance"
    ADVANCES = "advances"
    REPAYMENTS = "repayments"
    DEBT_ADJUSTMENTS = "debt_adjustments"
    PAYROLL_RUNS = "payroll_runs"


class DurableStore(Protocol):
    """Append-only copy of record.

    ``read`` returns records in the store's native (append) order.
    """

    def append(self, table: Table, record: dict) -> None:
        raise NotImplementedError

    def read(self, table: Table) -> Sequence[dict]:
        raise NotImplementedError


class InMemoryStore(DurableStore):
    def __init__(self):
        self._tables: dict[Table, list[dict]] = {t: [] for t in Table}

    def append(self, table: Table, record: dict) -> None:
        self._tables[Table(table)].append(dict(record))

    def read(self, table: Table) -> Sequence[dict]:
        return [dict(r) for r in self._tables[Table(table)]]
