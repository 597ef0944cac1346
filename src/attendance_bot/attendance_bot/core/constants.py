"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Bangkok"
DEFAULT_DAILY_CUTOFF = "09:30"
DEFAULT_REST_DAY = "sunday"
DEFAULT_ADVANCE_WINDOW = "wednesday 10:00-13:00"
DEFAULT_REPAYMENT_WINDOW = "friday 10:00-13:00"
DEFAULT_PAYROLL_AT = "saturday 18:00"
DEFAULT_REMINDER_TIMES = "09:00,09:20"
DEFAULT_DAILY_REPORT_TIME = "09:45"
DEFAULT_ADVANCE_KEYWORDS = "advance,borrow"
DEFAULT_REPAYMENT_KEYWORDS = "repay,repayment"

DEFAULT_PUSH_CONCURRENCY = 5
DEFAULT_STORE_RETRIES = 1
DEFAULT_STORE_TIMEOUT_SECONDS = 10.0

CYCLE_LENGTH_DAYS = 7
