from __future__ import annotations

from datetime import datetime, time

import pytest
import pytz

from attendance_bot.attendance.factory import CheckInRuleFactory
from attendance_bot.attendance.service import AttendanceLedger
from attendance_bot.core.enums import RejectReason, Role, WorkType
from attendance_bot.directory.service import Directory

TZ = pytz.timezone("Asia/Bangkok")


def local(*args) -> datetime:
    return TZ.localize(datetime(*args))


def make_ledger(*, admins_exempt: bool = False) -> tuple[Directory, AttendanceLedger]:
    d = Directory(superadmin_id="U-super")
    d.register_or_update("E1", "Employee")
    d.register_or_update("A1", "Admin", Role.ADMIN, True)
    factory = CheckInRuleFactory(cutoff=time(9, 30), rest_day=6, admins_exempt_from_rest_day=admins_exempt)
    return d, AttendanceLedger(d, rule_factory=factory)


def test_allowed_just_before_cutoff():
    _, ledger = make_ledger()
    assert ledger.can_check_in("E1", local(2025, 1, 6, 9, 29, 59)).allowed


def test_cutoff_is_inclusive_for_employees():
    _, ledger = make_ledger()
    decision = ledger.can_check_in("E1", local(2025, 1, 6, 9, 30))
    assert decision.reason == RejectReason.PAST_CUTOFF


def test_admins_are_not_blocked_by_cutoff():
    _, ledger = make_ledger()
    assert ledger.can_check_in("A1", local(2025, 1, 6, 15, 0)).allowed
    assert ledger.can_check_in("U-super", local(2025, 1, 6, 23, 59)).allowed


@pytest.mark.parametrize("person_id", ["E1", "A1"])
def test_rest_day_blocks_everyone_by_default(person_id):
    _, ledger = make_ledger()
    decision = ledger.can_check_in(person_id, local(2025, 1, 12, 8, 0))
    assert decision.reason == RejectReason.REST_DAY


def test_rest_day_admin_exemption_is_configurable():
    _, ledger = make_ledger(admins_exempt=True)
    assert ledger.can_check_in("A1", local(2025, 1, 12, 8, 0)).allowed
    assert ledger.can_check_in("E1", local(2025, 1, 12, 8, 0)).reason == RejectReason.REST_DAY


def test_unknown_and_inactive_people_are_not_registered():
    d, ledger = make_ledger()
    d.register_or_update("E2", "Left", Role.EMPLOYEE, False)

    assert ledger.can_check_in("ghost", local(2025, 1, 6, 9, 0)).reason == RejectReason.NOT_REGISTERED
    assert ledger.can_check_in("E2", local(2025, 1, 6, 9, 0)).reason == RejectReason.NOT_REGISTERED


def test_reasons_follow_priority_order():
    _, ledger = make_ledger()
    ledger.record_entry("E1", local(2025, 1, 12, 8).date(), WorkType.FULL, local(2025, 1, 12, 8))
    ledger.record_entry("E1", local(2025, 1, 6, 8).date(), WorkType.FULL, local(2025, 1, 6, 8))

    # unknown beats rest day
    assert ledger.can_check_in("ghost", local(2025, 1, 12, 10)).reason == RejectReason.NOT_REGISTERED
    # rest day beats cutoff and duplicate
    assert ledger.can_check_in("E1", local(2025, 1, 12, 10)).reason == RejectReason.REST_DAY
    # cutoff beats duplicate
    assert ledger.can_check_in("E1", local(2025, 1, 6, 10)).reason == RejectReason.PAST_CUTOFF
    assert ledger.can_check_in("E1", local(2025, 1, 6, 9)).reason == RejectReason.ALREADY_RECORDED
