from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from ..attendance.service import AttendanceLedger
from ..common.clock import Clock
from ..core.enums import RejectReason, Role, TransactionKind, WorkType
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    ExternalIOError,
    NotFoundError,
    PolicyRejection,
    ValidationError,
)
from ..directory.model import Person
from ..directory.service import Directory
from ..notifications import messages
from ..storage import records
from ..storage.gateway import PersistenceGateway
from ..storage.store import Table
from ..transactions.service import TransactionLedger
from .model import (
    AddPerson,
    AdjustDebt,
    Balance,
    CheckIn,
    ChooseWork,
    Command,
    InboundCommand,
    OverrideAttendance,
    RemovePerson,
    RequestAdvance,
    RequestRepayment,
    SetRate,
    WhoAmI,
)
from .parser import CommandParser
from .replies import MenuChoice, MenuReply, Reply, TextReply

logger = logging.getLogger(__name__)

CHECKIN_CHOICES = tuple(MenuChoice(label=w.label, value=f"work:{w.value}") for w in WorkType)


class ProfileSource(Protocol):
    """Looks up a display name on the messaging platform."""

    async def display_name(self, person_id: str) -> Optional[str]:
        raise NotImplementedError


class CommandHandler:
    """Processes one inbound command and returns exactly one reply.

    Mutations happen under ``state_lock`` with no await inside; durable writes
    happen afterwards. Anything checked before an await (the profile lookup)
    is checked again once the handler resumes.
    """

    def __init__(
        self,
        *,
        directory: Directory,
        attendance: AttendanceLedger,
        transactions: TransactionLedger,
        gateway: PersistenceGateway,
        clock: Clock,
        parser: CommandParser,
        state_lock: asyncio.Lock,
        profiles: Optional[ProfileSource] = None,
        auto_register: bool = True,
    ):
        self._directory = directory
        self._attendance = attendance
        self._transactions = transactions
        self._gateway = gateway
        self._clock = clock
        self._parser = parser
        self._lock = state_lock
        self._profiles = profiles
        self._auto_register = auto_register

    async def handle(self, inbound: InboundCommand) -> Reply:
        now = self._clock.localize(inbound.timestamp) if inbound.timestamp else self._clock.now()
        pid = inbound.person_id
        known = self._directory.find(pid)
        name = known.name if known else pid
        command: Optional[Command] = None

        try:
            command = self._parser.parse(inbound.text)

            if isinstance(command, ChooseWork) and (known is not None or not self._auto_register):
                # fail fast before waiting on the platform
                self._require_check_in(pid, now)

            name = await self._resolve_name(inbound, known)
            await self._register_on_contact(pid, name)
            return await self._dispatch(command, pid, name, now)
        except ValidationError as exc:
            return TextReply(f"❌ {exc}")
        except PolicyRejection as exc:
            logger.info("rejected %r from %s: %s", inbound.text, pid, exc.reason.value)
            window = None
            if exc.reason == RejectReason.OUTSIDE_WINDOW and isinstance(command, (RequestAdvance, RequestRepayment)):
                kind = TransactionKind.ADVANCE if isinstance(command, RequestAdvance) else TransactionKind.REPAYMENT
                window = self._transactions.window_for(kind)
            return TextReply(messages.rejection(exc.reason, name, detail=str(exc), window=window))
        except NotFoundError as exc:
            return TextReply(f"❓ {exc}")
        except DomainError as exc:
            return TextReply(f"❌ {exc}")

    async def _resolve_name(self, inbound: InboundCommand, known: Optional[Person]) -> str:
        if inbound.display_name:
            return inbound.display_name
        if self._profiles is not None:
            try:
                found = await self._profiles.display_name(inbound.person_id)
            except Exception:
                logger.exception("profile lookup for %s failed", inbound.person_id)
                found = None
            if found:
                return found
        return known.name if known else inbound.person_id

    async def _register_on_contact(self, pid: str, name: str) -> None:
        if not self._auto_register:
            return
        async with self._lock:
            before = self._directory.find(pid)
            person = self._directory.touch(pid, name)
        if before != person:
            await self._persist([(Table.ROSTER, records.person_to_record(person))])

    async def _dispatch(self, command: Command, pid: str, name: str, now: datetime) -> Reply:
        if isinstance(command, WhoAmI):
            return self._whoami(pid, name)
        if isinstance(command, Balance):
            return self._balance(pid, name)
        if isinstance(command, CheckIn):
            self._require_check_in(pid, now)
            return MenuReply(text=messages.checkin_prompt(now.date(), name), choices=CHECKIN_CHOICES)
        if isinstance(command, ChooseWork):
            return await self._choose_work(pid, name, command.work_type, now)
        if isinstance(command, RequestAdvance):
            return await self._advance(pid, name, command.amount, now)
        if isinstance(command, RequestRepayment):
            return await self._repayment(pid, name, command.amount, now)

        self._require_admin(pid)
        if isinstance(command, AddPerson):
            return await self._add_person(command)
        if isinstance(command, RemovePerson):
            return await self._remove_person(command)
        if isinstance(command, OverrideAttendance):
            return await self._override(pid, command, now)
        if isinstance(command, AdjustDebt):
            return await self._adjust_debt(pid, command, now)
        if isinstance(command, SetRate):
            return await self._set_rate(command)
        raise ValidationError("Unsupported command")

    def _require_check_in(self, pid: str, now: datetime) -> None:
        decision = self._attendance.can_check_in(pid, now)
        if not decision.allowed:
            raise PolicyRejection(decision.reason)

    def _require_member(self, pid: str) -> Person:
        person = self._directory.find(pid)
        if person is None or (not person.active and not self._directory.is_admin(pid)):
            raise PolicyRejection(RejectReason.NOT_REGISTERED)
        return person

    def _require_admin(self, pid: str) -> None:
        if not self._directory.is_admin(pid):
            raise AuthorizationError()

    async def _persist(self, writes: list[tuple[Table, dict]]) -> bool:
        ok = True
        for table, record in writes:
            try:
                await self._gateway.append(table, record)
            except ExternalIOError:
                logger.exception("durable write to %s failed; in-memory state kept", table.value)
                ok = False
        return ok

    def _whoami(self, pid: str, name: str) -> Reply:
        person = self._directory.find(pid)
        if self._directory.is_superadmin(pid):
            role = Role.SUPERADMIN.value
        else:
            role = person.role.value if person is not None else "-"
        status = "active" if person and person.active else "not registered"
        return TextReply(f"👤 {name}\nuserId:\n{pid}\nrole: {role} ({status})")

    def _balance(self, pid: str, name: str) -> Reply:
        person = self._require_member(pid)
        advance = self._transactions.pending(pid, TransactionKind.ADVANCE)
        repaid = self._transactions.pending(pid, TransactionKind.REPAYMENT)
        return TextReply(
            f"💼 {name}\n"
            f"Daily rate: {messages.money(person.daily_rate)}\n"
            f"Debt: {messages.money(person.total_debt)}\n"
            f"Advance this week: {messages.money(advance.amount) if advance else '-'}\n"
            f"Repaid this week: {messages.money(repaid.amount) if repaid else '-'}"
        )

    async def _choose_work(self, pid: str, name: str, work_type: WorkType, now: datetime) -> Reply:
        async with self._lock:
            # re-validate: another check-in may have landed while we were suspended
            self._require_check_in(pid, now)
            entry = self._attendance.record_entry(pid, now.date(), work_type, now)

        saved = await self._persist([(Table.ATTENDANCE, records.attendance_to_record(entry, name=name))])
        text = messages.checkin_recorded(now.date(), name, work_type)
        if not saved:
            text = f"{text}\n{messages.durable_write_failed()}"
        return TextReply(text)

    async def _advance(self, pid: str, name: str, amount: str, now: datetime) -> Reply:
        async with self._lock:
            self._require_member(pid)
            entry = self._transactions.record_advance(pid, amount, now)

        saved = await self._persist([(Table.ADVANCES, records.transaction_to_record(entry))])
        text = messages.advance_recorded(name, entry.amount)
        if not saved:
            text = f"{text}\n{messages.durable_write_failed()}"
        return TextReply(text)

    async def _repayment(self, pid: str, name: str, amount: str, now: datetime) -> Reply:
        async with self._lock:
            person = self._require_member(pid)
            # a replaced repayment of this cycle is credited back first
            current_debt = person.total_debt + self._transactions.pending_repayment(pid)
            entry = self._transactions.record_repayment(pid, amount, now, current_debt)
            person = self._directory.get(pid)

        saved = await self._persist(
            [
                (Table.REPAYMENTS, records.transaction_to_record(entry)),
                (Table.ROSTER, records.person_to_record(person)),
            ]
        )
        text = messages.repayment_recorded(name, entry.amount, person.total_debt)
        if not saved:
            text = f"{text}\n{messages.durable_write_failed()}"
        return TextReply(text)

    async def _add_person(self, command: AddPerson) -> Reply:
        async with self._lock:
            existing = self._directory.find(command.target_id)
            person = self._directory.register_or_update(command.target_id, command.name, command.role, True)

        await self._persist([(Table.ROSTER, records.person_to_record(person))])
        verb = "updated" if existing else "added"
        return TextReply(f"✅ {person.role.value} {person.name} ({person.person_id}) {verb}")

    async def _remove_person(self, command: RemovePerson) -> Reply:
        async with self._lock:
            person = self._directory.find(command.target_id)
            if person is None:
                raise NotFoundError(f"No one with id {command.target_id}")

            if command.role == Role.ADMIN:
                if not person.has_admin_role:
                    raise NotFoundError(f"{person.name} is not an admin")
                person = self._directory.register_or_update(person.person_id, person.name, Role.EMPLOYEE, person.active)
                verb = "is no longer an admin"
            else:
                self._directory.deactivate(person.person_id)
                person = self._directory.get(person.person_id)
                verb = "deactivated"

        await self._persist([(Table.ROSTER, records.person_to_record(person))])
        return TextReply(f"✅ {person.name} ({person.person_id}) {verb}")

    async def _override(self, pid: str, command: OverrideAttendance, now: datetime) -> Reply:
        work_date = command.work_date or now.date()
        async with self._lock:
            target = self._directory.find(command.target_id)
            if target is None:
                raise NotFoundError(f"No one with id {command.target_id}")
            entry = self._attendance.override_entry(target.person_id, work_date, command.work_type, by=pid, recorded_at=now)

        saved = await self._persist([(Table.ATTENDANCE, records.attendance_to_record(entry, name=target.name))])
        text = f"✅ {target.name} {work_date.isoformat()} set to {command.work_type.label}"
        if not saved:
            text = f"{text}\n{messages.durable_write_failed()}"
        return TextReply(text)

    async def _adjust_debt(self, pid: str, command: AdjustDebt, now: datetime) -> Reply:
        async with self._lock:
            person = self._directory.adjust_debt(command.target_id, command.delta)

        await self._persist(
            [
                (
                    Table.DEBT_ADJUSTMENTS,
                    records.debt_adjustment_record(person.person_id, command.delta, by=pid, at=now, balance=person.total_debt),
                ),
                (Table.ROSTER, records.person_to_record(person)),
            ]
        )
        return TextReply(f"✅ {person.name} debt is now {messages.money(person.total_debt)}")

    async def _set_rate(self, command: SetRate) -> Reply:
        async with self._lock:
            person = self._directory.set_rate(command.target_id, Decimal(command.daily_rate))

        await self._persist([(Table.ROSTER, records.person_to_record(person))])
        return TextReply(f"✅ {person.name} daily rate is now {messages.money(person.daily_rate)}")
