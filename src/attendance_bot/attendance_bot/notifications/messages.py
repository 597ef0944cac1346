"""User-facing texts."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..common.clock import WEEKDAYS, format_long_date
from ..core.enums import RejectReason, TransactionKind, WorkType
from ..payroll.model import Payslip, PayrollSummary
from ..transactions.model import TransactionWindow


def money(value: Decimal) -> str:
    if value == value.to_integral_value():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


def units(value: Decimal) -> str:
    return f"{value.normalize():f}" if value else "0"


def _bullets(names: Iterable[str]) -> str:
    return "\n".join(f"• {n}" for n in names) or "-"


def reminder(label: str, today: date, name: str) -> str:
    return f"{label}\n{format_long_date(today)}\n{name}, don't forget to check in"


def daily_report(today: date, checked: list[tuple[str, WorkType]], missing: list[str]) -> str:
    return (
        "📊 Daily attendance summary\n"
        f"{format_long_date(today)}\n\n"
        f"✅ Checked in ({len(checked)})\n"
        f"{_bullets(f'{n} ({w.label})' for n, w in checked)}\n\n"
        f"❌ Not checked in ({len(missing)})\n"
        f"{_bullets(missing)}"
    )


def checkin_prompt(today: date, name: str) -> str:
    return f"{format_long_date(today)}\n{name}, how are you working today?"


def checkin_recorded(today: date, name: str, work_type: WorkType) -> str:
    return f"✅ Saved\n{format_long_date(today)}\n{name} ({work_type.label})"


def durable_write_failed() -> str:
    return "⚠️ The record could not be written to storage yet; please tell an admin."


def _describe(window: TransactionWindow) -> str:
    return f"{WEEKDAYS[window.weekday].capitalize()} {window.start:%H:%M}-{window.end:%H:%M}"


def rejection(reason: RejectReason, name: str, *, detail: Optional[str] = None, window: Optional[TransactionWindow] = None) -> str:
    if reason == RejectReason.NOT_REGISTERED:
        return f"⛔ {name}, you are not registered. Please ask an admin to add you."
    if reason == RejectReason.REST_DAY:
        return "❌ Today is the weekly rest day, no check-in needed."
    if reason == RejectReason.PAST_CUTOFF:
        return f"⛔ {name}, check-in is closed for today."
    if reason == RejectReason.ALREADY_RECORDED:
        return f"⚠️ {name}, you have already checked in today."
    if reason == RejectReason.OUTSIDE_WINDOW:
        opens = f" It is open {_describe(window)}." if window else ""
        return f"⏳ {name}, this request is not open right now.{opens}"
    if reason == RejectReason.EXCEEDS_DEBT:
        return f"⚠️ {name}, {detail or 'the amount is more than your outstanding debt'}."
    if reason == RejectReason.NOT_AUTHORIZED:
        return "⛔ Only admins can do that."
    return f"⛔ {detail or reason.value}"


def window_opened(kind: TransactionKind, window: TransactionWindow, keyword: str) -> str:
    what = "Cash advance" if kind == TransactionKind.ADVANCE else "Debt repayment"
    return (
        f"🔔 {what} requests are open until {window.end:%H:%M}.\n"
        f"Reply '{keyword} <amount>' to send yours."
    )


def window_closed(kind: TransactionKind) -> str:
    what = "Cash advance" if kind == TransactionKind.ADVANCE else "Debt repayment"
    return f"🔕 {what} requests are closed for this week."


def advance_recorded(name: str, amount: Decimal) -> str:
    return f"✅ {name}, advance of {money(amount)} recorded for this week."


def repayment_recorded(name: str, amount: Decimal, remaining: Decimal) -> str:
    return f"✅ {name}, repayment of {money(amount)} recorded. Remaining debt: {money(remaining)}"


def payslip(p: Payslip) -> str:
    return (
        f"💰 Payslip {p.cycle_start:%d/%m}-{p.cycle_end:%d/%m}\n"
        f"{p.name}\n"
        f"Days worked: {units(p.work_units)} x {money(p.daily_rate)} = {money(p.gross_pay)}\n"
        f"Advance: -{money(p.advance)}\n"
        f"Repayment: -{money(p.repaid)}\n"
        f"Net pay: {money(p.net_pay)}\n"
        f"Remaining debt: {money(p.remaining_debt)}"
    )


def payroll_summary(summary: PayrollSummary) -> str:
    lines = [
        f"📒 Payroll {summary.cycle_start:%d/%m}-{summary.cycle_end:%d/%m}",
        "",
    ]
    for p in summary.payslips:
        lines.append(f"• {p.name}: {units(p.work_units)} days, net {money(p.net_pay)}, debt {money(p.remaining_debt)}")
    if not summary.payslips:
        lines.append("-")
    lines += [
        "",
        f"Gross: {money(summary.total_gross)}",
        f"Advances: {money(summary.total_advances)}",
        f"Repayments: {money(summary.total_repaid)}",
        f"Net: {money(summary.total_net)}",
    ]
    return "\n".join(lines)
