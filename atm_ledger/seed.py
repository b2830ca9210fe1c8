"""
Seed Data

Fixed fixture accounts the directory is populated with at startup.
Tests and demos anchor on these ids, PINs and opening balances.
"""

from decimal import Decimal
from typing import Optional

from .audit import AuditTrail
from .config import LedgerConfig, get_config
from .currency import Currency, Money
from .directory import Directory

# (account id, PIN, holder name, opening balance in major units)
SEED_ACCOUNTS = [
    ("123456", "1234", "Rajesh Kumar", Decimal("50000.00")),
    ("234567", "2345", "Priya Sharma", Decimal("35000.00")),
    ("345678", "3456", "Amit Patel", Decimal("72000.00")),
    ("456789", "4567", "Sunita Verma", Decimal("28000.00")),
]


def seed_directory(directory: Directory) -> Directory:
    """Open every seed account in the given directory"""
    for account_id, pin, holder_name, opening in SEED_ACCOUNTS:
        directory.open_account(
            account_id=account_id,
            holder_name=holder_name,
            credential=pin,
            opening_balance=Money.from_major(opening, directory.currency)
        )
    return directory


def create_default_directory(config: Optional[LedgerConfig] = None) -> Directory:
    """Build a directory from configuration and populate it with the seed accounts"""
    config = config or get_config()
    audit_trail = AuditTrail() if config.enable_audit_logging else None
    directory = Directory(
        name=config.bank_name,
        audit_trail=audit_trail,
        currency=Currency[config.currency.upper()]
    )
    return seed_directory(directory)
