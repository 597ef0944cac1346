from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.validators import parse_amount, parse_signed_amount, require_non_empty
from ..core.enums import Role, WorkType
from ..core.exceptions import ValidationError
from .model import (
    AddPerson,
    AdjustDebt,
    Balance,
    CheckIn,
    ChooseWork,
    Command,
    OverrideAttendance,
    RemovePerson,
    RequestAdvance,
    RequestRepayment,
    SetRate,
    WhoAmI,
)

_ROLE_WORDS = {"employee": Role.EMPLOYEE, "admin": Role.ADMIN}


def _work_type(value: str) -> WorkType:
    try:
        return WorkType(value)
    except ValueError:
        choices = ", ".join(w.value for w in WorkType)
        raise ValidationError(f"Unknown work type {value!r} (expected one of: {choices})")


class CommandParser:
    """Turns raw chat text into a command. Matching is case-insensitive."""

    def __init__(self, *, advance_keywords: Sequence[str], repayment_keywords: Sequence[str]):
        self._advance = {k.lower() for k in advance_keywords}
        self._repayment = {k.lower() for k in repayment_keywords}

    def parse(self, text: str) -> Command:
        raw = require_non_empty(text or "", "Command")
        tokens = raw.split()
        head = tokens[0].lower()
        args = tokens[1:]

        if head == "checkin" and not args:
            return CheckIn()
        if head == "whoami" and not args:
            return WhoAmI()
        if head == "balance" and not args:
            return Balance()

        if head.startswith("work:") and not args:
            return ChooseWork(_work_type(head[len("work:"):]))

        if head in self._advance:
            return RequestAdvance(self._single_amount(args, head))
        if head in self._repayment:
            return RequestRepayment(self._single_amount(args, head))

        if head in {"add", "remove"}:
            return self._roster_command(head, args)

        if head == "override":
            return self._override(args)
        if head == "debt":
            if len(args) != 2:
                raise ValidationError("Usage: debt <id> <+amount|-amount>")
            return AdjustDebt(target_id=args[0], delta=parse_signed_amount(args[1]))
        if head == "rate":
            if len(args) != 2:
                raise ValidationError("Usage: rate <id> <amount>")
            return SetRate(target_id=args[0], daily_rate=parse_amount(args[1], allow_zero=True))

        raise ValidationError(f"Unknown command: {raw}")

    @staticmethod
    def _single_amount(args: list[str], keyword: str) -> str:
        if len(args) != 1:
            raise ValidationError(f"Usage: {keyword} <amount>")
        return args[0]

    @staticmethod
    def _roster_command(head: str, args: list[str]) -> Command:
        if not args or args[0].lower() not in _ROLE_WORDS:
            raise ValidationError(f"Usage: {head} employee|admin <id>" + (" <name>" if head == "add" else ""))
        role = _ROLE_WORDS[args[0].lower()]

        if head == "add":
            if len(args) < 3:
                raise ValidationError(f"Usage: add {role.value} <id> <name>")
            # ids are opaque platform ids; keep their original case
            return AddPerson(role=role, target_id=args[1], name=" ".join(args[2:]))

        if len(args) != 2:
            raise ValidationError(f"Usage: remove {role.value} <id>")
        return RemovePerson(role=role, target_id=args[1])

    @staticmethod
    def _override(args: list[str]) -> OverrideAttendance:
        if len(args) not in (2, 3):
            raise ValidationError("Usage: override <id> <work-type> [YYYY-MM-DD]")
        work_date = None
        if len(args) == 3:
            try:
                work_date = date.fromisoformat(args[2])
            except ValueError:
                raise ValidationError(f"Invalid date {args[2]!r} (YYYY-MM-DD)")
        return OverrideAttendance(target_id=args[0], work_type=_work_type(args[1].lower()), work_date=work_date)
