from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.validators import parse_amount
from ..core.enums import RejectReason, TransactionKind
from ..core.exceptions import PolicyRejection
from ..directory.service import Directory
from .model import TransactionEntry, TransactionWindow

logger = logging.getLogger(__name__)


class TransactionLedger:
    """Advances and repayments of the open pay cycle.

    Each person has at most one pending advance and one pending repayment per
    cycle; asking again replaces the earlier answer. The weekly payroll run
    clears the ledger.
    """

    def __init__(
        self,
        directory: Directory,
        *,
        advance_window: TransactionWindow,
        repayment_window: TransactionWindow,
    ):
        self._directory = directory
        self._windows = {
            TransactionKind.ADVANCE: advance_window,
            TransactionKind.REPAYMENT: repayment_window,
        }
        self._advances: dict[str, TransactionEntry] = {}
        self._repayments: dict[str, TransactionEntry] = {}

    def window_for(self, kind: TransactionKind) -> TransactionWindow:
        return self._windows[kind]

    def is_transaction_window(self, now: datetime, kind: TransactionKind) -> bool:
        return self._windows[kind].contains(now)

    def _require_window(self, now: datetime, kind: TransactionKind) -> None:
        if not self.is_transaction_window(now, kind):
            raise PolicyRejection(RejectReason.OUTSIDE_WINDOW, f"{kind.value} is not open right now")

    def record_advance(self, person_id: str, amount, now: datetime) -> TransactionEntry:
        self._require_window(now, TransactionKind.ADVANCE)
        value = parse_amount(amount)

        entry = TransactionEntry(person_id=person_id, kind=TransactionKind.ADVANCE, amount=value, recorded_at=now)
        replaced = self._advances.get(person_id)
        self._advances[person_id] = entry
        if replaced:
            logger.info("advance for %s replaced: %s -> %s", person_id, replaced.amount, value)
        return entry

    def record_repayment(self, person_id: str, amount, now: datetime, current_debt: Decimal) -> TransactionEntry:
        """Record a repayment and apply it to the running debt right away.

        ``current_debt`` is the debt the repayment is checked against; a
        replaced repayment of the same cycle is credited back before the new
        amount is applied, so the cycle's effect on the debt equals the final answer.
        """
        self._require_window(now, TransactionKind.REPAYMENT)
        value = parse_amount(amount)
        if value > current_debt:
            raise PolicyRejection(RejectReason.EXCEEDS_DEBT, f"{value} is more than the outstanding debt of {current_debt}")

        replaced = self._repayments.get(person_id)
        if replaced:
            self._directory.adjust_debt(person_id, replaced.amount)
        self._directory.adjust_debt(person_id, -value)

        entry = TransactionEntry(person_id=person_id, kind=TransactionKind.REPAYMENT, amount=value, recorded_at=now)
        self._repayments[person_id] = entry
        return entry

    def restore(self, entry: TransactionEntry) -> None:
        """Put a pending entry back without touching debts (startup reconciliation only)."""
        target = self._advances if entry.kind == TransactionKind.ADVANCE else self._repayments
        target[entry.person_id] = entry

    def pending_repayment(self, person_id: str) -> Decimal:
        entry = self._repayments.get(person_id)
        return entry.amount if entry else Decimal("0")

    def pending(self, person_id: str, kind: TransactionKind) -> Optional[TransactionEntry]:
        source = self._advances if kind == TransactionKind.ADVANCE else self._repayments
        return source.get(person_id)

    def advances_for_cycle(self) -> dict[str, Decimal]:
        return {pid: e.amount for pid, e in self._advances.items()}

    def repayments_for_cycle(self) -> dict[str, Decimal]:
        return {pid: e.amount for pid, e in self._repayments.items()}

    def entries(self) -> Sequence[TransactionEntry]:
        items = list(self._advances.values()) + list(self._repayments.values())
        items.sort(key=lambda e: e.recorded_at)
        return items

    def clear_cycle(self) -> None:
        self._advances.clear()
        self._repayments.clear()
