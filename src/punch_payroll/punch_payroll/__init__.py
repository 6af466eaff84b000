"""Punch Payroll package.

Reconciles biometric-clock punches into per-day attendance sessions and derives
payroll figures. Organized by feature modules (punches, employees, sessions,
payroll, reconciliation) with Protocol repositories and MySQL implementations.
"""

__version__ = "0.1.0"
