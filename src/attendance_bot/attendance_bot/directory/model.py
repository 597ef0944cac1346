from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import Role


@dataclass(frozen=True)
class Person:
    """Domain entity: someone on the roster.

    People are never deleted, only deactivated, so ledger entries stay attributable.
    """

    person_id: str
    name: str
    role: Role = Role.EMPLOYEE
    active: bool = True
    daily_rate: Decimal = Decimal("0")
    total_debt: Decimal = Decimal("0")

    @property
    def has_admin_role(self) -> bool:
        return self.role.is_admin_role
