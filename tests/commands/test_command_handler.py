from __future__ import annotations

import asyncio
from datetime import date, datetime
from decimal import Decimal

import pytest

from attendance_bot.commands.model import InboundCommand
from attendance_bot.commands.replies import MenuReply, TextReply
from attendance_bot.core.enums import Role, WorkType
from attendance_bot.storage.store import InMemoryStore, Table

MONDAY_0900 = datetime(2025, 1, 6, 9, 0)
MONDAY_0945 = datetime(2025, 1, 6, 9, 45)
WEDNESDAY_1100 = datetime(2025, 1, 8, 11, 0)
FRIDAY_1100 = datetime(2025, 1, 10, 11, 0)
SUNDAY_0900 = datetime(2025, 1, 12, 9, 0)


class SlowProfiles:
    """Profile lookup that yields to the loop before answering."""

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.calls = 0

    async def display_name(self, person_id):
        self.calls += 1
        await asyncio.sleep(self.delay)
        return f"name-{person_id}"


def say(ctx, pid, text, at=MONDAY_0900, name=None):
    return ctx.handler.handle(InboundCommand(person_id=pid, text=text, timestamp=at, display_name=name))


@pytest.fixture
def ctx(make_context):
    c = make_context(store=InMemoryStore())
    c.directory.register_or_update("P1", "Somchai", daily_rate=Decimal("500"), total_debt=Decimal("1000"))
    return c


@pytest.mark.asyncio
async def test_checkin_returns_menu_with_four_choices(ctx):
    reply = await say(ctx, "P1", "checkin")

    assert isinstance(reply, MenuReply)
    assert [c.value for c in reply.choices] == ["work:full", "work:half-morning", "work:half-afternoon", "work:off"]
    assert "Monday 6 January 2025" in reply.text


@pytest.mark.asyncio
async def test_choose_work_records_and_persists(ctx):
    reply = await say(ctx, "P1", "work:full")

    assert isinstance(reply, TextReply)
    assert reply.text.startswith("✅")
    assert ctx.attendance.get("P1", date(2025, 1, 6)).work_type == WorkType.FULL
    rows = ctx.store.read(Table.ATTENDANCE)
    assert [(r["person_id"], r["work_type"]) for r in rows] == [("P1", "full")]


@pytest.mark.asyncio
async def test_second_check_in_is_rejected(ctx):
    await say(ctx, "P1", "work:full")
    reply = await say(ctx, "P1", "work:off")

    assert "already checked in" in reply.text
    assert ctx.attendance.get("P1", date(2025, 1, 6)).work_type == WorkType.FULL


@pytest.mark.asyncio
async def test_check_in_after_cutoff_and_on_rest_day(ctx):
    late = await say(ctx, "P1", "checkin", at=MONDAY_0945)
    sunday = await say(ctx, "P1", "work:full", at=SUNDAY_0900)

    assert "check-in is closed" in late.text
    assert "rest day" in sunday.text
    assert ctx.attendance.entries_for_person("P1") == []


@pytest.mark.asyncio
async def test_concurrent_check_ins_record_exactly_one(make_context):
    ctx = make_context(store=InMemoryStore(), profiles=SlowProfiles())
    ctx.directory.register_or_update("P1", "Somchai")

    first, second = await asyncio.gather(say(ctx, "P1", "work:full"), say(ctx, "P1", "work:half-morning"))

    texts = sorted([first.text, second.text])
    assert sum("already checked in" in t for t in texts) == 1
    assert len(ctx.attendance.entries_for_person("P1")) == 1
    assert len(ctx.store.read(Table.ATTENDANCE)) == 1


@pytest.mark.asyncio
async def test_failed_durable_write_is_reported_and_state_kept(make_context, broken_store):
    ctx = make_context(store=broken_store, store_retries=1)
    ctx.directory.register_or_update("P1", "Somchai")

    reply = await say(ctx, "P1", "work:full")

    assert "could not be written" in reply.text
    assert ctx.attendance.has_entry_for_date("P1", date(2025, 1, 6))
    assert broken_store.append_calls == 2


@pytest.mark.asyncio
async def test_first_contact_auto_registers(ctx):
    reply = await say(ctx, "U-new", "whoami", name="Anong")

    person = ctx.directory.get("U-new")
    assert person.name == "Anong"
    assert person.role == Role.EMPLOYEE
    assert "U-new" in reply.text
    assert any(r["person_id"] == "U-new" for r in ctx.store.read(Table.ROSTER))


@pytest.mark.asyncio
async def test_unknown_person_rejected_without_auto_register(make_context):
    ctx = make_context(store=InMemoryStore(), auto_register=False)

    reply = await say(ctx, "U-new", "checkin")

    assert "not registered" in reply.text
    assert ctx.directory.find("U-new") is None


@pytest.mark.asyncio
async def test_deactivated_person_cannot_check_in(ctx):
    ctx.directory.deactivate("P1")

    reply = await say(ctx, "P1", "work:full")

    assert "not registered" in reply.text
    assert not ctx.directory.get("P1").active


@pytest.mark.asyncio
async def test_unknown_text_gets_a_reply(ctx):
    reply = await say(ctx, "P1", "hello there")
    assert reply.text.startswith("❌")


@pytest.mark.asyncio
async def test_advance_outside_window_names_the_window(ctx):
    reply = await say(ctx, "P1", "advance 500")

    assert "not open" in reply.text
    assert "Wednesday 10:00-13:00" in reply.text
    assert ctx.transactions.advances_for_cycle() == {}


@pytest.mark.asyncio
async def test_invalid_amount_inside_window(ctx):
    reply = await say(ctx, "P1", "advance lots", at=WEDNESDAY_1100)

    assert reply.text.startswith("❌")
    assert ctx.transactions.advances_for_cycle() == {}


@pytest.mark.asyncio
async def test_advance_and_repayment(ctx):
    advance = await say(ctx, "P1", "advance 300", at=WEDNESDAY_1100)
    repay = await say(ctx, "P1", "repay 200", at=FRIDAY_1100)

    assert "300" in advance.text
    assert "Remaining debt: 800" in repay.text
    assert ctx.directory.get("P1").total_debt == Decimal("800")
    assert [r["amount"] for r in ctx.store.read(Table.REPAYMENTS)] == ["200"]
    assert ctx.store.read(Table.ROSTER)[-1]["total_debt"] == "800"


@pytest.mark.asyncio
async def test_repayment_rerequest_uses_final_answer(ctx):
    await say(ctx, "P1", "repay 300", at=FRIDAY_1100)
    await say(ctx, "P1", "repay 1000", at=FRIDAY_1100)

    assert ctx.directory.get("P1").total_debt == Decimal("0")
    assert ctx.transactions.repayments_for_cycle() == {"P1": Decimal("1000")}


@pytest.mark.asyncio
async def test_repayment_above_debt_rejected(ctx):
    reply = await say(ctx, "P1", "repay 1500", at=FRIDAY_1100)

    assert reply.text.startswith("⚠️")
    assert ctx.directory.get("P1").total_debt == Decimal("1000")
    assert ctx.store.read(Table.REPAYMENTS) == []


@pytest.mark.asyncio
async def test_admin_commands_require_admin(ctx):
    reply = await say(ctx, "P1", "add employee U2 Anong")

    assert "Only admins" in reply.text
    assert ctx.directory.find("U2") is None


@pytest.mark.asyncio
async def test_superadmin_manages_roster(ctx):
    added = await say(ctx, "U-super", "add admin U2 Anong Sukjai")
    assert "added" in added.text
    assert ctx.directory.is_admin("U2")

    demoted = await say(ctx, "U-super", "remove admin U2")
    assert "no longer an admin" in demoted.text
    assert ctx.directory.get("U2").role == Role.EMPLOYEE
    assert ctx.directory.get("U2").active

    removed = await say(ctx, "U2", "remove employee P1")
    assert "Only admins" in removed.text

    removed = await say(ctx, "U-super", "remove employee P1")
    assert "deactivated" in removed.text
    assert not ctx.directory.get("P1").active


@pytest.mark.asyncio
async def test_remove_unknown_target(ctx):
    reply = await say(ctx, "U-super", "remove employee U404")
    assert reply.text.startswith("❓")


@pytest.mark.asyncio
async def test_override_debt_and_rate(ctx):
    await say(ctx, "P1", "work:full")

    override = await say(ctx, "U-super", "override P1 half-afternoon 2025-01-06")
    debt = await say(ctx, "U-super", "debt P1 -1500")
    rate = await say(ctx, "U-super", "rate P1 450")

    entry = ctx.attendance.get("P1", date(2025, 1, 6))
    assert entry.work_type == WorkType.HALF_AFTERNOON
    assert entry.overridden_by == "U-super"
    assert override.text.startswith("✅")
    assert "debt is now 0" in debt.text
    assert ctx.directory.get("P1").daily_rate == Decimal("450")
    assert "450" in rate.text
    assert [r["delta"] for r in ctx.store.read(Table.DEBT_ADJUSTMENTS)] == ["-1500"]


@pytest.mark.asyncio
async def test_balance(ctx):
    await say(ctx, "P1", "advance 300", at=WEDNESDAY_1100)

    reply = await say(ctx, "P1", "balance", at=WEDNESDAY_1100)

    assert "Debt: 1,000" in reply.text
    assert "Advance this week: 300" in reply.text


@pytest.mark.asyncio
async def test_oversized_amounts_get_a_reply(ctx):
    rate = await say(ctx, "U-super", "rate P1 1e30")
    advance = await say(ctx, "P1", "advance 1" + "0" * 29, at=WEDNESDAY_1100)

    assert rate.text.startswith("❌")
    assert advance.text.startswith("❌")
    assert ctx.directory.get("P1").daily_rate == Decimal("500")
    assert ctx.transactions.advances_for_cycle() == {}


@pytest.mark.asyncio
async def test_rate_can_be_set_to_zero(ctx):
    reply = await say(ctx, "U-super", "rate P1 0")

    assert reply.text.startswith("✅")
    assert ctx.directory.get("P1").daily_rate == Decimal("0")


@pytest.mark.asyncio
async def test_whoami_reports_superadmin_after_auto_register(ctx):
    reply = await say(ctx, "U-super", "whoami")

    assert ctx.directory.get("U-super").role == Role.EMPLOYEE
    assert "role: superadmin" in reply.text
