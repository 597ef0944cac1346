from __future__ import annotations

from typing import Optional

from ...core.enums import RejectReason
from .base import CheckInContext, CheckInRule


class RestDayRule(CheckInRule):
    """No check-in on the weekly rest day."""

    def __init__(self, rest_day: int, *, admins_exempt: bool = False):
        self._rest_day = int(rest_day)
        self._admins_exempt = admins_exempt

    def check(self, ctx: CheckInContext) -> Optional[RejectReason]:
        if ctx.now.weekday() != self._rest_day:
            return None
        if ctx.is_admin and self._admins_exempt:
            return None
        return RejectReason.REST_DAY
