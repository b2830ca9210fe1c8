"""
ATM Ledger

An in-memory account ledger with integer minor-unit money, append-only
per-account entry logs, credential authentication and login lockout.
"""

__version__ = "1.0.0"
