from __future__ import annotations

from enum import Enum


class Hook(str, Enum):
    """Named entry points the external clock source invokes."""

    DAILY_REMINDER = "dailyReminder"
    DAILY_REPORT = "dailyReport"
    OPEN_ADVANCE_WINDOW = "openAdvanceWindow"
    CLOSE_ADVANCE_WINDOW = "closeAdvanceWindow"
    OPEN_REPAYMENT_WINDOW = "openRepaymentWindow"
    CLOSE_REPAYMENT_WINDOW = "closeRepaymentWindow"
    WEEKLY_PAYROLL = "weeklyPayroll"
