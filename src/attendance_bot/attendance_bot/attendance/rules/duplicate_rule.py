from __future__ import annotations

from typing import Optional

from ...core.enums import RejectReason
from .base import CheckInContext, CheckInRule


class DuplicateRule(CheckInRule):
    def check(self, ctx: CheckInContext) -> Optional[RejectReason]:
        return RejectReason.ALREADY_RECORDED if ctx.has_entry_today else None
