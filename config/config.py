"""Shared settings; the per-environment modules import these and override."""

import os

TIMEZONE = os.getenv("TIMEZONE", "Asia/Bangkok")

# Attendance
DAILY_CUTOFF = os.getenv("DAILY_CUTOFF", "09:30")
REST_DAY = os.getenv("REST_DAY", "sunday")
REMINDER_TIMES = os.getenv("REMINDER_TIMES", "09:00,09:20")
DAILY_REPORT_TIME = os.getenv("DAILY_REPORT_TIME", "09:45")
ADMINS_EXEMPT_FROM_REST_DAY = bool(int(os.getenv("ADMINS_EXEMPT_FROM_REST_DAY", "0")))
AUTO_REGISTER = bool(int(os.getenv("AUTO_REGISTER", "1")))
# Empty = keep attendance history forever
ATTENDANCE_RETENTION_DAYS = os.getenv("ATTENDANCE_RETENTION_DAYS") or None

# Advances / repayments / payroll
ADVANCE_WINDOW = os.getenv("ADVANCE_WINDOW", "wednesday 10:00-13:00")
REPAYMENT_WINDOW = os.getenv("REPAYMENT_WINDOW", "friday 10:00-13:00")
PAYROLL_AT = os.getenv("PAYROLL_AT", "saturday 18:00")
FLOOR_NET_PAY_AT_ZERO = bool(int(os.getenv("FLOOR_NET_PAY_AT_ZERO", "0")))
ADVANCE_KEYWORDS = os.getenv("ADVANCE_KEYWORDS", "advance,borrow")
REPAYMENT_KEYWORDS = os.getenv("REPAYMENT_KEYWORDS", "repay,repayment")

# People
SUPERADMIN_ID = os.getenv("SUPERADMIN_ID", "")
ADMIN_IDS = os.getenv("ADMIN_IDS", "")

# Delivery / storage
PUSH_CONCURRENCY = int(os.getenv("PUSH_CONCURRENCY", "5"))
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")
STORE_RETRIES = int(os.getenv("STORE_RETRIES", "1"))
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_bot"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
