from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from ..core.enums import Role, WorkType


@dataclass(frozen=True)
class InboundCommand:
    """One message from the chat platform, already stripped of transport details."""

    person_id: str
    text: str
    timestamp: Optional[datetime] = None
    display_name: Optional[str] = None


@dataclass(frozen=True)
class CheckIn:
    pass


@dataclass(frozen=True)
class ChooseWork:
    work_type: WorkType


@dataclass(frozen=True)
class RequestAdvance:
    amount: str


@dataclass(frozen=True)
class RequestRepayment:
    amount: str


@dataclass(frozen=True)
class AddPerson:
    role: Role
    target_id: str
    name: str


@dataclass(frozen=True)
class RemovePerson:
    role: Role
    target_id: str


@dataclass(frozen=True)
class WhoAmI:
    pass


@dataclass(frozen=True)
class Balance:
    pass


@dataclass(frozen=True)
class OverrideAttendance:
    target_id: str
    work_type: WorkType
    work_date: Optional[date] = None


@dataclass(frozen=True)
class AdjustDebt:
    target_id: str
    delta: Decimal


@dataclass(frozen=True)
class SetRate:
    target_id: str
    daily_rate: Decimal


Command = Union[
    CheckIn,
    ChooseWork,
    RequestAdvance,
    RequestRepayment,
    AddPerson,
    RemovePerson,
    WhoAmI,
    Balance,
    OverrideAttendance,
    AdjustDebt,
    SetRate,
]
