from __future__ import annotations

from decimal import Decimal
from enum import Enum


class Role(str, Enum):
    """Role of a person in the roster."""

    EMPLOYEE = "employee"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def is_admin_role(self) -> bool:
        return self in (Role.ADMIN, Role.SUPERADMIN)


class WorkType(str, Enum):
    """Work status chosen in the check-in menu."""

    FULL = "full"
    HALF_MORNING = "half-morning"
    HALF_AFTERNOON = "half-afternoon"
    OFF = "off"

    @property
    def units(self) -> Decimal:
        return {
            WorkType.FULL: Decimal("1"),
            WorkType.HALF_MORNING: Decimal("0.5"),
            WorkType.HALF_AFTERNOON: Decimal("0.5"),
            WorkType.OFF: Decimal("0"),
        }[self]

    @property
    def label(self) -> str:
        return {
            WorkType.FULL: "Full day",
            WorkType.HALF_MORNING: "Half day (morning)",
            WorkType.HALF_AFTERNOON: "Half day (afternoon)",
            WorkType.OFF: "Day off",
        }[self]


class TransactionKind(str, Enum):
    ADVANCE = "advance"
    REPAYMENT = "repayment"


class RejectReason(str, Enum):
    """Why a command was refused by a business rule."""

    NOT_REGISTERED = "NotRegistered"
    REST_DAY = "RestDay"
    PAST_CUTOFF = "PastCutoff"
    ALREADY_RECORDED = "AlreadyRecorded"
    OUTSIDE_WINDOW = "OutsideWindow"
    EXCEEDS_DEBT = "ExceedsDebt"
    NOT_AUTHORIZED = "NotAuthorized"
