"""
Ledger Errors

Every failure the core reports is a LedgerError subclass. None of them are
fatal: each describes an expected, local condition the caller can recover from.
"""

from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .currency import Money


class LedgerError(Exception):
    """Base class for all ledger errors"""
    code = "ledger_error"


class InvalidAmount(LedgerError):
    """Non-positive or malformed amount supplied to a money operation"""
    code = "invalid_amount"


class InsufficientFunds(LedgerError):
    """Withdrawal or transfer exceeds the available balance"""
    code = "insufficient_funds"

    def __init__(self, requested: 'Money', available: 'Money', operation: str = "withdrawal"):
        self.requested = requested
        self.available = available
        self.operation = operation
        super().__init__(
            f"Insufficient funds for {operation}. "
            f"Requested: {requested.to_string()}, Available: {available.to_string()}"
        )


class SameAccount(LedgerError):
    """Transfer whose destination is the source account"""
    code = "same_account"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Cannot transfer from account {account_id} to itself")


class AccountNotFound(LedgerError):
    """No account registered under the given id"""
    code = "account_not_found"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class DuplicateAccount(LedgerError):
    """An account with this id is already registered"""
    code = "duplicate_account"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id} already exists")


class AuthenticationFailed(LedgerError):
    """Unknown account or wrong credential; the message never says which"""
    code = "authentication_failed"

    def __init__(self):
        super().__init__("Invalid account number or PIN")


class CredentialMismatch(LedgerError):
    """Credential change attempted with the wrong current credential"""
    code = "credential_mismatch"

    def __init__(self):
        super().__init__("Current PIN is incorrect")


class AccountLocked(LedgerError):
    """Login rejected because too many attempts failed recently"""
    code = "account_locked"

    def __init__(self, until: datetime):
        self.until = until
        super().__init__(
            f"Too many failed attempts. Please try again after {until.isoformat()}"
        )
