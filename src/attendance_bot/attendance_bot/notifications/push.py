from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class PushChannel(Protocol):
    """Unsolicited delivery to one person (reminders, reports, payslips)."""

    async def push(self, person_id: str, text: str) -> None:
        raise NotImplementedError


class LoggingPushChannel(PushChannel):
    """Writes pushes to the log; used when no messaging platform is wired in."""

    async def push(self, person_id: str, text: str) -> None:
        logger.info("push -> %s: %s", person_id, text.replace("\n", " | "))
