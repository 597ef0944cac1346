from __future__ import annotations

from datetime import date, datetime, time, tzinfo

import pytz

from ..core.exceptions import ConfigurationError

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class Clock:
    """Current date and time in the bot's fixed timezone.

    Everything that depends on "now" takes it from here so tests can pin it.
    """

    def __init__(self, timezone: str | tzinfo):
        self._tz = pytz.timezone(timezone) if isinstance(timezone, str) else timezone

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def today(self) -> date:
        return self.now().date()

    def localize(self, value: datetime) -> datetime:
        """Attach (naive) or convert (aware) a datetime to the bot's timezone."""
        if value.tzinfo is None:
            return self._tz.localize(value) if hasattr(self._tz, "localize") else value.replace(tzinfo=self._tz)
        return value.astimezone(self._tz)


class FrozenClock(Clock):
    """Clock pinned to a fixed instant; ``set`` moves it."""

    def __init__(self, at: datetime, timezone: str | tzinfo = "UTC"):
        super().__init__(timezone)
        self._at = self.localize(at)

    def set(self, at: datetime) -> None:
        self._at = self.localize(at)

    def now(self) -> datetime:
        return self._at


def weekday_from_name(value: str) -> int:
    """Map ``monday``..``sunday`` (or a 3-letter prefix) to ``date.weekday()`` numbers."""
    v = (value or "").strip().lower()
    for idx, name in enumerate(WEEKDAYS):
        if v == name or (len(v) >= 3 and name.startswith(v)):
            return idx
    raise ConfigurationError(f"Unknown weekday: {value!r}")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ConfigurationError(f"Invalid time of day (HH:MM): {value!r}")


def format_long_date(d: date) -> str:
    """``Monday 6 January 2025``, used at the top of bot messages."""
    return f"{WEEKDAYS[d.weekday()].capitalize()} {d.day} {_MONTHS[d.month - 1]} {d.year}"
