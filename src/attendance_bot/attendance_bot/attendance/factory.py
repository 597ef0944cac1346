from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .rules.base import CheckInRule
from .rules.cutoff_rule import CutoffRule
from .rules.duplicate_rule import DuplicateRule
from .rules.registration_rule import RegistrationRule
from .rules.rest_day_rule import RestDayRule


@dataclass
class CheckInRuleFactory:
    """Factory Pattern: build the check-in rules in priority order."""

    cutoff: time
    rest_day: int
    admins_exempt_from_rest_day: bool = False

    def build(self) -> list[CheckInRule]:
        return [
            RegistrationRule(),
            RestDayRule(self.rest_day, admins_exempt=self.admins_exempt_from_rest_day),
            CutoffRule(self.cutoff),
            DuplicateRule(),
        ]
