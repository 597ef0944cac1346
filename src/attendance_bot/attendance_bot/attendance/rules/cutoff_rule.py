from __future__ import annotations

from datetime import time
from typing import Optional

from ...core.enums import RejectReason
from .base import CheckInContext, CheckInRule


class CutoffRule(CheckInRule):
    """Check-in closes at the daily cutoff (inclusive); admins are exempt."""

    def __init__(self, cutoff: time):
        self._cutoff = cutoff

    def check(self, ctx: CheckInContext) -> Optional[RejectReason]:
        if ctx.is_admin:
            return None
        if ctx.now.time().replace(tzinfo=None) >= self._cutoff:
            return RejectReason.PAST_CUTOFF
        return None
