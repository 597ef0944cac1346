"""Flat dict shapes written to the durable store, and their inverse."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from ..attendance.model import AttendanceEntry
from ..core.enums import Role, TransactionKind, WorkType
from ..directory.model import Person
from ..payroll.model import PayrollSummary
from ..transactions.model import TransactionEntry


def person_to_record(p: Person) -> dict:
    return {
        "person_id": p.person_id,
        "name": p.name,
        "role": p.role.value,
        "active": p.active,
        "daily_rate": str(p.daily_rate),
        "total_debt": str(p.total_debt),
    }


def person_from_record(r: dict) -> Person:
    return Person(
        person_id=str(r["person_id"]),
        name=str(r.get("name") or r["person_id"]),
        role=Role(r.get("role", Role.EMPLOYEE.value)),
        active=bool(r.get("active", True)),
        daily_rate=Decimal(str(r.get("daily_rate", "0"))),
        total_debt=Decimal(str(r.get("total_debt", "0"))),
    )


def attendance_to_record(e: AttendanceEntry, *, name: str = "") -> dict:
    return {
        "person_id": e.person_id,
        "name": name,
        "work_date": e.work_date.isoformat(),
        "work_type": e.work_type.value,
        "recorded_at": e.recorded_at.isoformat(),
        "overridden_by": e.overridden_by,
    }


def attendance_from_record(r: dict) -> AttendanceEntry:
    return AttendanceEntry(
        person_id=str(r["person_id"]),
        work_date=date.fromisoformat(r["work_date"]),
        work_type=WorkType(r["work_type"]),
        recorded_at=datetime.fromisoformat(r["recorded_at"]),
        overridden_by=r.get("overridden_by"),
    )


def transaction_to_record(e: TransactionEntry) -> dict:
    return {
        "person_id": e.person_id,
        "kind": e.kind.value,
        "amount": str(e.amount),
        "recorded_at": e.recorded_at.isoformat(),
    }


def transaction_from_record(r: dict) -> TransactionEntry:
    return TransactionEntry(
        person_id=str(r["person_id"]),
        kind=TransactionKind(r["kind"]),
        amount=Decimal(str(r["amount"])),
        recorded_at=datetime.fromisoformat(r["recorded_at"]),
    )


def debt_adjustment_record(person_id: str, delta: Decimal, *, by: str, at: datetime, balance: Decimal) -> dict:
    return {
        "person_id": person_id,
        "delta": str(delta),
        "by": by,
        "at": at.isoformat(),
        "balance": str(balance),
    }


def payroll_run_record(summary: PayrollSummary) -> dict:
    return {
        "cycle_start": summary.cycle_start.isoformat(),
        "cycle_end": summary.cycle_end.isoformat(),
        "closed_at": summary.closed_at.isoformat(),
        "payslips": len(summary.payslips),
        "total_gross": str(summary.total_gross),
        "total_net": str(summary.total_net),
    }
