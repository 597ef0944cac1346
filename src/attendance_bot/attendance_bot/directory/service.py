from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import Person

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class Directory:
    """Roster of known people, keyed by their external chat id."""

    def __init__(self, *, superadmin_id: Optional[str] = None):
        self._people: dict[str, Person] = {}
        self._superadmin_id = superadmin_id

    def register_or_update(
        self,
        person_id: str,
        name: str,
        role: Role = Role.EMPLOYEE,
        active: bool = True,
        daily_rate: Optional[Decimal] = None,
        total_debt: Optional[Decimal] = None,
    ) -> Person:
        person_id = require_non_empty(person_id, "Person id")
        if daily_rate is not None and daily_rate < 0:
            raise ValidationError("Daily rate cannot be negative")

        existing = self._people.get(person_id)
        if existing is None:
            person = Person(
                person_id=person_id,
                name=(name or "").strip() or person_id,
                role=role,
                active=active,
                daily_rate=daily_rate if daily_rate is not None else ZERO,
                total_debt=max(ZERO, total_debt) if total_debt is not None else ZERO,
            )
        else:
            person = replace(
                existing,
                name=(name or "").strip() or existing.name,
                role=role,
                active=active,
                daily_rate=daily_rate if daily_rate is not None else existing.daily_rate,
                total_debt=max(ZERO, total_debt) if total_debt is not None else existing.total_debt,
            )

        self._people[person_id] = person
        return person

    def touch(self, person_id: str, name: str) -> Person:
        """First contact registers an employee; later contacts only refresh the name."""
        existing = self._people.get(person_id)
        if existing is None:
            logger.info("auto-registering %s (%s)", person_id, name)
            return self.register_or_update(person_id, name)
        if name and name != existing.name:
            existing = replace(existing, name=name)
            self._people[person_id] = existing
        return existing

    def deactivate(self, person_id: str) -> None:
        person = self._people.get(person_id)
        if person is None:
            return
        self._people[person_id] = replace(person, active=False)

    def find(self, person_id: str) -> Optional[Person]:
        return self._people.get(person_id)

    def get(self, person_id: str) -> Person:
        person = self._people.get(person_id)
        if person is None:
            raise NotFoundError(f"Unknown person: {person_id}")
        return person

    def is_superadmin(self, person_id: str) -> bool:
        return bool(self._superadmin_id) and person_id == self._superadmin_id

    def is_admin(self, person_id: str) -> bool:
        if self.is_superadmin(person_id):
            return True
        person = self._people.get(person_id)
        return bool(person and person.active and person.has_admin_role)

    def adjust_debt(self, person_id: str, delta: Decimal) -> Person:
        person = self.get(person_id)
        updated = replace(person, total_debt=max(ZERO, person.total_debt + delta))
        self._people[person_id] = updated
        return updated

    def set_rate(self, person_id: str, daily_rate: Decimal) -> Person:
        if daily_rate < 0:
            raise ValidationError("Daily rate cannot be negative")
        person = self.get(person_id)
        updated = replace(person, daily_rate=daily_rate)
        self._people[person_id] = updated
        return updated

    def all_people(self) -> Sequence[Person]:
        return list(self._people.values())

    def active_people(self) -> Sequence[Person]:
        return [p for p in self._people.values() if p.active]

    def admins(self) -> Sequence[Person]:
        return [p for p in self._people.values() if self.is_admin(p.person_id)]

    def admin_ids(self) -> list[str]:
        ids = [p.person_id for p in self.admins()]
        if self._superadmin_id and self._superadmin_id not in ids:
            ids.append(self._superadmin_id)
        return ids
