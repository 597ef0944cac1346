from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from attendance_bot.common.clock import FrozenClock
from attendance_bot.context import build_context
from attendance_bot.settings import BotSettings

BKK = "Asia/Bangkok"

# 2025-01-06 is a Monday
MONDAY_0900 = datetime(2025, 1, 6, 9, 0)


class RecordingPush:
    def __init__(self, fail_for=()):
        self.sent: list[tuple[str, str]] = []
        self._fail_for = set(fail_for)

    async def push(self, person_id: str, text: str) -> None:
        if person_id in self._fail_for:
            raise ConnectionError(f"push to {person_id} rejected")
        self.sent.append((person_id, text))

    def to(self, person_id: str) -> list[str]:
        return [t for pid, t in self.sent if pid == person_id]


class BrokenStore:
    """Durable store that is always down."""

    def __init__(self):
        self.append_calls = 0

    def append(self, table, record):
        self.append_calls += 1
        raise ConnectionError("store unavailable")

    def read(self, table):
        return []


@pytest.fixture
def fixed_now():
    return MONDAY_0900


@pytest.fixture
def settings():
    return BotSettings(timezone=BKK, superadmin_id="U-super", store_timeout_seconds=2.0)


@pytest.fixture
def clock(fixed_now):
    return FrozenClock(fixed_now, BKK)


@pytest.fixture
def push():
    return RecordingPush()


@pytest.fixture
def make_context(settings, clock, push):
    def _make(*, store=None, push_channel=None, profiles=None, **overrides):
        s = replace(settings, **overrides) if overrides else settings
        return build_context(s, store=store, push=push_channel or push, profiles=profiles, clock=clock)

    return _make


@pytest.fixture
def broken_store():
    return BrokenStore()


@pytest.fixture
def push_failing_for():
    def _make(*person_ids):
        return RecordingPush(fail_for=person_ids)

    return _make
