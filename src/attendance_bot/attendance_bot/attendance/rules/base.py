from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import RejectReason


@dataclass(frozen=True)
class CheckInContext:
    """Facts about one check-in attempt, gathered once and shared by every rule."""

    person_id: str
    now: datetime
    registered: bool
    is_admin: bool
    has_entry_today: bool


class CheckInRule(ABC):
    """Strategy Pattern: one reason a check-in can be refused."""

    @abstractmethod
    def check(self, ctx: CheckInContext) -> Optional[RejectReason]:
        raise NotImplementedError
