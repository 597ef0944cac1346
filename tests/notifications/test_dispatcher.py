from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from attendance_bot.core.enums import Role, TransactionKind, WorkType

SUNDAY_0900 = datetime(2025, 1, 12, 9, 0)
WEDNESDAY_1000 = datetime(2025, 1, 8, 10, 0)


@pytest.fixture
def ctx(make_context):
    c = make_context()
    c.directory.register_or_update("E1", "Somchai", daily_rate=Decimal("500"))
    c.directory.register_or_update("E2", "Anong", daily_rate=Decimal("400"))
    c.directory.register_or_update("A1", "Boss", Role.ADMIN)
    c.directory.register_or_update("X1", "Gone", active=False)
    return c


def check_in(ctx, pid, work_type=WorkType.FULL):
    now = ctx.clock.now()
    ctx.attendance.record_entry(pid, now.date(), work_type, now)


@pytest.mark.asyncio
async def test_reminder_goes_to_active_people_without_entry(ctx, push):
    check_in(ctx, "E1")

    report = await ctx.dispatcher.daily_reminder("⏰ Reminder 09:00")

    assert sorted(report.sent) == ["A1", "E2"]
    assert push.to("E1") == []
    assert push.to("X1") == []
    assert push.to("E2")[0].startswith("⏰ Reminder 09:00\nMonday 6 January 2025")


@pytest.mark.asyncio
async def test_nothing_sent_on_rest_day(ctx, push, clock):
    clock.set(SUNDAY_0900)

    reminder = await ctx.dispatcher.daily_reminder("⏰")
    report = await ctx.dispatcher.daily_report()

    assert reminder.skipped and report.skipped
    assert push.sent == []


@pytest.mark.asyncio
async def test_one_failed_push_does_not_stop_the_rest(make_context, push_failing_for):
    channel = push_failing_for("E1")
    ctx = make_context(push_channel=channel)
    for pid in ("E1", "E2", "E3"):
        ctx.directory.register_or_update(pid, pid)

    report = await ctx.dispatcher.daily_reminder("⏰")

    assert sorted(report.sent) == ["E2", "E3"]
    assert list(report.failed) == ["E1"]
    assert len(channel.sent) == 2


@pytest.mark.asyncio
async def test_daily_report_lists_checked_and_missing(ctx, push):
    check_in(ctx, "E1", WorkType.HALF_MORNING)

    await ctx.dispatcher.daily_report()

    text = push.to("A1")[0]
    assert push.to("U-super") == [text]
    assert "Checked in (1)\n• Somchai (Half day (morning))" in text
    assert "Not checked in (2)\n• Anong\n• Boss" in text
    assert push.to("E1") == []


@pytest.mark.asyncio
async def test_window_announcements(ctx, push, clock):
    clock.set(WEDNESDAY_1000)

    await ctx.dispatcher.announce_window(TransactionKind.ADVANCE, opened=True)
    await ctx.dispatcher.announce_window(TransactionKind.ADVANCE, opened=False)

    opened, closed = push.to("E1")
    assert "open until 13:00" in opened
    assert "'advance <amount>'" in opened
    assert "closed for this week" in closed


@pytest.mark.asyncio
async def test_deliver_payroll(ctx, push, clock):
    check_in(ctx, "E1")
    clock.set(datetime(2025, 1, 11, 18, 0))
    summary = ctx.payroll.close_cycle(clock.now())

    report = await ctx.dispatcher.deliver_payroll(summary)

    assert "Net pay: 500" in push.to("E1")[0]
    assert "Net pay: 0" in push.to("E2")[0]
    admin_texts = push.to("A1")
    assert any(t.startswith("📒 Payroll 05/01-11/01") for t in admin_texts)
    assert report.failed == {}
    assert summary.cycle_end == date(2025, 1, 11)
