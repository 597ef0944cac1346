from __future__ import annotations

from typing import Optional

from ...core.enums import RejectReason
from .base import CheckInContext, CheckInRule


class RegistrationRule(CheckInRule):
    """Unknown or deactivated people cannot check in (admins always can)."""

    def check(self, ctx: CheckInContext) -> Optional[RejectReason]:
        if ctx.registered or ctx.is_admin:
            return None
        return RejectReason.NOT_REGISTERED
