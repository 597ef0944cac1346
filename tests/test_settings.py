from __future__ import annotations

import importlib
from datetime import time
from types import SimpleNamespace

import pytest

from attendance_bot.core.exceptions import ConfigurationError
from attendance_bot.settings import BotSettings, parse_weekly_time, parse_window
from config import get_settings_module


def test_testing_module_loads(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    module = importlib.import_module(get_settings_module())

    settings = BotSettings.from_module(module)

    assert settings.timezone == "Asia/Bangkok"
    assert settings.superadmin_id == "U-super"
    assert settings.store_backend == "memory"
    assert settings.rest_day == 6
    assert settings.advance_window.weekday == 2
    assert settings.payroll_at.weekday == 5
    assert settings.reminder_times == (time(9, 0), time(9, 20))


@pytest.mark.parametrize(
    "env, expected",
    [("production", "config.production"), ("TEST", "config.testing"), ("whatever", "config.development")],
)
def test_settings_module_by_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_overrides_are_parsed():
    module = SimpleNamespace(
        DAILY_CUTOFF="10:15",
        REST_DAY="Sat",
        ADVANCE_WINDOW="tuesday 08:00-09:00",
        ADMIN_IDS="A1, A2,,",
        ADVANCE_KEYWORDS="Advance,Borrow",
        ATTENDANCE_RETENTION_DAYS="90",
        PUSH_CONCURRENCY=0,
    )

    settings = BotSettings.from_module(module)

    assert settings.daily_cutoff == time(10, 15)
    assert settings.rest_day == 5
    assert (settings.advance_window.weekday, settings.advance_window.start) == (1, time(8, 0))
    assert settings.admin_ids == ("A1", "A2")
    assert settings.advance_keywords == ("advance", "borrow")
    assert settings.attendance_retention_days == 90
    assert settings.push_concurrency == 1


@pytest.mark.parametrize(
    "field, value",
    [
        ("TIMEZONE", "Mars/Olympus"),
        ("DAILY_CUTOFF", "9.30"),
        ("REST_DAY", "someday"),
        ("ADVANCE_WINDOW", "wednesday 13:00-10:00"),
        ("ADVANCE_WINDOW", "wednesday"),
        ("PAYROLL_AT", "saturday"),
        ("STORE_BACKEND", "sheets"),
    ],
)
def test_invalid_values_raise(field, value):
    with pytest.raises(ConfigurationError):
        BotSettings.from_module(SimpleNamespace(**{field: value}))


def test_window_and_weekly_time_helpers():
    window = parse_window("friday 10:00-13:00")
    assert (window.weekday, window.start, window.end) == (4, time(10, 0), time(13, 0))
    assert parse_weekly_time("saturday 18:00").at == time(18, 0)
