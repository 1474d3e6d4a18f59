# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Budget Pulse
------------

A small Python application that tracks recurring income and expense
entries and derives a normalized monthly financial summary.

Main capabilities:
- monthly normalization of daily, weekly, monthly and yearly amounts,
- proportional (non-compounding) tax deductions on income entries,
- a monthly summary: total income, taxes, net income, expenses, balance,
- lenient import of ';'-delimited bank statement exports,
- JSON backups and SQLite persistence of the entries.

Budget Pulse separates computation (engine), configuration (TOML),
storage (entry store + SQLite) and presentation (CLI), so the engine can be
reused by any front end.


Version: 0.1.0

Usage:
    python -m budget_pulse.cli --help
"""

__all__ = ["engine", "normalization", "taxes", "io", "store", "backup"]

__version__ = "0.1.0"
