from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from ..core.enums import WorkType
from ..core.exceptions import AuthorizationError, DuplicateEntryError
from ..directory.service import Directory
from .factory import CheckInRuleFactory
from .model import AttendanceEntry, CheckInDecision
from .rules.base import CheckInContext, CheckInRule

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """At most one attendance entry per (person, day).

    A second ``record_entry`` for the same day is refused; only an admin
    ``override_entry`` can replace what was recorded.
    """

    def __init__(
        self,
        directory: Directory,
        *,
        rule_factory: CheckInRuleFactory,
    ):
        self._directory = directory
        self._rules: list[CheckInRule] = rule_factory.build()
        self._entries: dict[tuple[str, date], AttendanceEntry] = {}

    def can_check_in(self, person_id: str, now: datetime) -> CheckInDecision:
        person = self._directory.find(person_id)
        ctx = CheckInContext(
            person_id=person_id,
            now=now,
            registered=bool(person and person.active),
            is_admin=self._directory.is_admin(person_id),
            has_entry_today=self.has_entry_for_date(person_id, now.date()),
        )
        for rule in self._rules:
            reason = rule.check(ctx)
            if reason is not None:
                return CheckInDecision.reject(reason)
        return CheckInDecision.allow()

    def record_entry(self, person_id: str, work_date: date, work_type: WorkType, recorded_at: datetime) -> AttendanceEntry:
        if (person_id, work_date) in self._entries:
            raise DuplicateEntryError(f"{person_id} already has an entry for {work_date.isoformat()}")

        entry = AttendanceEntry(person_id=person_id, work_date=work_date, work_type=work_type, recorded_at=recorded_at)
        self._entries[(person_id, work_date)] = entry
        return entry

    def override_entry(
        self,
        person_id: str,
        work_date: date,
        work_type: WorkType,
        by: str,
        *,
        recorded_at: Optional[datetime] = None,
    ) -> AttendanceEntry:
        if not self._directory.is_admin(by):
            raise AuthorizationError("Only admins can override attendance")

        previous = self._entries.get((person_id, work_date))
        entry = AttendanceEntry(
            person_id=person_id,
            work_date=work_date,
            work_type=work_type,
            recorded_at=recorded_at or datetime.now(timezone.utc),
            overridden_by=by,
        )
        self._entries[(person_id, work_date)] = entry
        logger.info(
            "attendance override %s %s: %s -> %s by %s",
            person_id,
            work_date,
            previous.work_type.value if previous else "-",
            work_type.value,
            by,
        )
        return entry

    def restore(self, entry: AttendanceEntry) -> None:
        """Put an entry back as-is (startup reconciliation only)."""
        self._entries[(entry.person_id, entry.work_date)] = entry

    def has_entry_for_date(self, person_id: str, work_date: date) -> bool:
        return (person_id, work_date) in self._entries

    def get(self, person_id: str, work_date: date) -> Optional[AttendanceEntry]:
        return self._entries.get((person_id, work_date))

    def entries_for_person(self, person_id: str) -> Sequence[AttendanceEntry]:
        items = [e for (pid, _), e in self._entries.items() if pid == person_id]
        items.sort(key=lambda e: e.work_date)
        return items

    def entries_for_date(self, work_date: date) -> Sequence[AttendanceEntry]:
        return [e for (_, d), e in self._entries.items() if d == work_date]

    def entries_between(self, start: date, end: date) -> Sequence[AttendanceEntry]:
        """Entries with ``start <= work_date <= end``."""
        items = [e for (_, d), e in self._entries.items() if start <= d <= end]
        items.sort(key=lambda e: (e.work_date, e.person_id))
        return items

    def purge_before(self, cutoff: date) -> int:
        stale = [k for k in self._entries if k[1] < cutoff]
        for k in stale:
            del self._entries[k]
        return len(stale)
