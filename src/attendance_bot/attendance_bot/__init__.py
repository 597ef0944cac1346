"""Attendance bot package.

Feature modules (directory, attendance, transactions, payroll, ...) hold the
check-in and weekly payroll rules; a thin Flask layer and the scheduling hooks
drive them through a single ``BotContext``.
"""
