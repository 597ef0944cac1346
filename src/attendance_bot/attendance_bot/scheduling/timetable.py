from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional, Sequence

from ..settings import BotSettings
from .hooks import Hook


@dataclass(frozen=True)
class TimetableEntry:
    hook: Hook
    at: time
    weekday: Optional[int] = None  # None = every day
    label: Optional[str] = None

    def is_due(self, now: datetime) -> bool:
        if self.weekday is not None and now.weekday() != self.weekday:
            return False
        return (now.hour, now.minute) == (self.at.hour, self.at.minute)

    def cron(self) -> str:
        """Crontab-style expression (cron counts Sunday as 0)."""
        dow = "*" if self.weekday is None else str((self.weekday + 1) % 7)
        return f"{self.at.minute} {self.at.hour} * * {dow}"


class Timetable:
    """When each hook fires, in the bot's timezone."""

    def __init__(self, entries: Sequence[TimetableEntry]):
        self._entries = list(entries)

    @property
    def entries(self) -> list[TimetableEntry]:
        return list(self._entries)

    def due(self, now: datetime) -> list[TimetableEntry]:
        return [e for e in self._entries if e.is_due(now)]

    @classmethod
    def from_settings(cls, settings: BotSettings) -> "Timetable":
        entries: list[TimetableEntry] = []
        reminders = list(settings.reminder_times)
        for idx, at in enumerate(reminders):
            if idx == len(reminders) - 1 and len(reminders) > 1:
                label = f"⚠️ Last reminder {at:%H:%M}\nCheck-in closes at {settings.daily_cutoff:%H:%M}"
            else:
                label = f"⏰ Reminder {at:%H:%M}"
            entries.append(TimetableEntry(Hook.DAILY_REMINDER, at, label=label))

        entries.append(TimetableEntry(Hook.DAILY_REPORT, settings.daily_report_time))

        adv = settings.advance_window
        entries.append(TimetableEntry(Hook.OPEN_ADVANCE_WINDOW, adv.start, adv.weekday))
        entries.append(TimetableEntry(Hook.CLOSE_ADVANCE_WINDOW, adv.end, adv.weekday))

        rep = settings.repayment_window
        entries.append(TimetableEntry(Hook.OPEN_REPAYMENT_WINDOW, rep.start, rep.weekday))
        entries.append(TimetableEntry(Hook.CLOSE_REPAYMENT_WINDOW, rep.end, rep.weekday))

        entries.append(TimetableEntry(Hook.WEEKLY_PAYROLL, settings.payroll_at.at, settings.payroll_at.weekday))
        return cls(entries)
