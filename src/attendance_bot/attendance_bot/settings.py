from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from types import ModuleType
from typing import Any, Optional

import pytz

from .common.clock import parse_hhmm, weekday_from_name
from .core import constants
from .core.exceptions import ConfigurationError
from .transactions.model import TransactionWindow


@dataclass(frozen=True)
class WeeklyTime:
    weekday: int
    at: time


@dataclass(frozen=True)
class BotSettings:
    """Typed view of a settings module (see ``config/``)."""

    timezone: str = constants.DEFAULT_TIMEZONE
    daily_cutoff: time = time(9, 30)
    rest_day: int = 6
    advance_window: TransactionWindow = TransactionWindow(2, time(10, 0), time(13, 0))
    repayment_window: TransactionWindow = TransactionWindow(4, time(10, 0), time(13, 0))
    payroll_at: WeeklyTime = WeeklyTime(5, time(18, 0))
    reminder_times: tuple[time, ...] = (time(9, 0), time(9, 20))
    daily_report_time: time = time(9, 45)
    superadmin_id: Optional[str] = None
    admin_ids: tuple[str, ...] = ()
    auto_register: bool = True
    admins_exempt_from_rest_day: bool = False
    floor_net_pay_at_zero: bool = False
    attendance_retention_days: Optional[int] = None
    advance_keywords: tuple[str, ...] = ("advance", "borrow")
    repayment_keywords: tuple[str, ...] = ("repay", "repayment")
    push_concurrency: int = constants.DEFAULT_PUSH_CONCURRENCY
    store_retries: int = constants.DEFAULT_STORE_RETRIES
    store_timeout_seconds: float = constants.DEFAULT_STORE_TIMEOUT_SECONDS
    store_backend: str = "memory"
    db_config: dict = field(default_factory=dict)
    auto_init_db: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_module(cls, settings: ModuleType) -> "BotSettings":
        def get(name: str, default: Any = None) -> Any:
            return getattr(settings, name, default)

        tz_name = str(get("TIMEZONE", constants.DEFAULT_TIMEZONE))
        try:
            pytz.timezone(tz_name)
        except pytz.UnknownTimeZoneError:
            raise ConfigurationError(f"Unknown timezone: {tz_name!r}")

        backend = str(get("STORE_BACKEND", "memory")).lower()
        if backend not in {"memory", "mysql"}:
            raise ConfigurationError(f"Unsupported STORE_BACKEND: {backend!r}")

        retention = get("ATTENDANCE_RETENTION_DAYS")
        superadmin = (get("SUPERADMIN_ID") or "").strip() or None

        return cls(
            timezone=tz_name,
            daily_cutoff=parse_hhmm(get("DAILY_CUTOFF", constants.DEFAULT_DAILY_CUTOFF)),
            rest_day=weekday_from_name(get("REST_DAY", constants.DEFAULT_REST_DAY)),
            advance_window=parse_window(get("ADVANCE_WINDOW", constants.DEFAULT_ADVANCE_WINDOW)),
            repayment_window=parse_window(get("REPAYMENT_WINDOW", constants.DEFAULT_REPAYMENT_WINDOW)),
            payroll_at=parse_weekly_time(get("PAYROLL_AT", constants.DEFAULT_PAYROLL_AT)),
            reminder_times=tuple(parse_hhmm(t) for t in split_csv(get("REMINDER_TIMES", constants.DEFAULT_REMINDER_TIMES))),
            daily_report_time=parse_hhmm(get("DAILY_REPORT_TIME", constants.DEFAULT_DAILY_REPORT_TIME)),
            superadmin_id=superadmin,
            admin_ids=split_csv(get("ADMIN_IDS", "")),
            auto_register=bool(get("AUTO_REGISTER", True)),
            admins_exempt_from_rest_day=bool(get("ADMINS_EXEMPT_FROM_REST_DAY", False)),
            floor_net_pay_at_zero=bool(get("FLOOR_NET_PAY_AT_ZERO", False)),
            attendance_retention_days=int(retention) if retention not in (None, "") else None,
            advance_keywords=tuple(k.lower() for k in split_csv(get("ADVANCE_KEYWORDS", constants.DEFAULT_ADVANCE_KEYWORDS))),
            repayment_keywords=tuple(k.lower() for k in split_csv(get("REPAYMENT_KEYWORDS", constants.DEFAULT_REPAYMENT_KEYWORDS))),
            push_concurrency=max(1, int(get("PUSH_CONCURRENCY", constants.DEFAULT_PUSH_CONCURRENCY))),
            store_retries=max(0, int(get("STORE_RETRIES", constants.DEFAULT_STORE_RETRIES))),
            store_timeout_seconds=float(get("STORE_TIMEOUT_SECONDS", constants.DEFAULT_STORE_TIMEOUT_SECONDS)),
            store_backend=backend,
            db_config=dict(get("DB_CONFIG", {}) or {}),
            auto_init_db=bool(get("AUTO_INIT_DB", False)),
            log_level=str(get("LOG_LEVEL", "INFO")).upper(),
        )


def split_csv(value: str | None) -> tuple[str, ...]:
    return tuple(p.strip() for p in (value or "").split(",") if p.strip())


def parse_window(value: str) -> TransactionWindow:
    """``wednesday 10:00-13:00`` -> TransactionWindow."""
    try:
        day, span = value.split()
        start, end = span.split("-")
    except ValueError:
        raise ConfigurationError(f"Invalid window (expected 'day HH:MM-HH:MM'): {value!r}")

    window = TransactionWindow(weekday_from_name(day), parse_hhmm(start), parse_hhmm(end))
    if window.start >= window.end:
        raise ConfigurationError(f"Window start must be before end: {value!r}")
    return window


def parse_weekly_time(value: str) -> WeeklyTime:
    """``saturday 18:00`` -> WeeklyTime."""
    try:
        day, at = value.split()
    except ValueError:
        raise ConfigurationError(f"Invalid weekly time (expected 'day HH:MM'): {value!r}")
    return WeeklyTime(weekday_from_name(day), parse_hhmm(at))
