"""
Account Module

An account owns its balance, its credential and its append-only ledger.
Every balance change is posted together with its ledger entry under the
account's lock, so the balance always equals the signed sum of the history
and never drops below zero.

Transfers lock both accounts in account-id order before touching either,
which keeps two opposing transfers from deadlocking.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Tuple
import threading
import uuid

from .currency import Money, Currency
from .credentials import HashedCredential
from .errors import InvalidAmount, InsufficientFunds, SameAccount, CredentialMismatch
from .ledger import EntryKind, LedgerEntry
from .audit import AuditTrail, AuditEventType
from .logging_config import get_logger, log_action

logger = get_logger("atm_ledger.accounts")


@contextmanager
def _ordered_locks(first: 'Account', second: 'Account') -> Iterator[None]:
    """Hold both account locks, always acquired in account-id order"""
    low, high = sorted((first, second), key=lambda account: account.id)
    with low._lock:
        with high._lock:
            yield


class Account:
    """
    Bank account with an append-only ledger of money movements
    """

    def __init__(
        self,
        account_id: str,
        holder_name: str,
        credential: str,
        opening_balance: Optional[Money] = None,
        currency: Currency = Currency.INR,
        audit_trail: Optional[AuditTrail] = None
    ):
        if not account_id:
            raise ValueError("Account id must be non-empty")
        if opening_balance is not None and opening_balance.currency != currency:
            raise InvalidAmount("Opening balance currency must match account currency")
        if opening_balance is not None and opening_balance.is_negative():
            raise InvalidAmount("Opening balance cannot be negative")

        self._id = str(account_id)
        self._holder_name = holder_name
        self._currency = currency
        self._credential = HashedCredential(credential)
        self._balance = Money.zero(currency)
        self._history: List[LedgerEntry] = []
        self._lock = threading.RLock()
        self._audit_trail = audit_trail

        if opening_balance is not None and opening_balance.is_positive():
            self._post(self._entry(EntryKind.DEPOSIT, opening_balance, self._id,
                                   "Initial deposit"))

    @property
    def id(self) -> str:
        return self._id

    @property
    def holder_name(self) -> str:
        return self._holder_name

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def balance(self) -> Money:
        with self._lock:
            return self._balance

    @property
    def history(self) -> Tuple[LedgerEntry, ...]:
        """Snapshot of the full ledger in chronological order"""
        with self._lock:
            return tuple(self._history)

    def authenticate(self, candidate: str) -> bool:
        """Check a candidate credential. No side effects."""
        return self._credential.matches(candidate)

    def deposit(self, amount: Money, note: str = "Deposit to account") -> LedgerEntry:
        """
        Deposit funds into the account

        Raises:
            InvalidAmount: If amount is not positive or in another currency
        """
        self._validate_amount(amount)
        with self._lock:
            entry = self._entry(EntryKind.DEPOSIT, amount, self._id, note)
            self._post(entry)

        log_action(logger, "info", f"Deposited {amount.to_string()}",
                   account_id=self._id, action="deposit",
                   extra={"minor_units": amount.minor_units})
        return entry

    def withdraw(self, amount: Money, note: str = "Withdrawal from account") -> LedgerEntry:
        """
        Withdraw funds from the account

        Raises:
            InvalidAmount: If amount is not positive or in another currency
            InsufficientFunds: If amount exceeds the balance
        """
        self._validate_amount(amount)
        with self._lock:
            if amount > self._balance:
                log_action(logger, "warning", "Withdrawal rejected: insufficient funds",
                           account_id=self._id, action="withdraw",
                           extra={"requested": amount.minor_units,
                                  "available": self._balance.minor_units})
                raise InsufficientFunds(amount, self._balance, "withdrawal")
            entry = self._entry(EntryKind.WITHDRAWAL, amount, self._id, note)
            self._post(entry)

        log_action(logger, "info", f"Withdrew {amount.to_string()}",
                   account_id=self._id, action="withdraw",
                   extra={"minor_units": amount.minor_units})
        return entry

    def transfer(self, to: 'Account', amount: Money) -> Tuple[LedgerEntry, LedgerEntry]:
        """
        Move funds from this account to another

        Both balances change and both entries are appended, or nothing
        happens at all.

        Args:
            to: Destination account
            amount: Amount to move

        Returns:
            (TransferOut entry on this account, TransferIn entry on the destination)

        Raises:
            InvalidAmount: If amount is not positive or currencies differ
            SameAccount: If the destination is this account
            InsufficientFunds: If amount exceeds this account's balance
        """
        self._validate_amount(amount)
        if to.id == self._id:
            raise SameAccount(self._id)
        if to.currency != self._currency:
            raise InvalidAmount(
                f"Cannot transfer {self._currency.code} to a {to.currency.code} account"
            )

        with _ordered_locks(self, to):
            if amount > self._balance:
                log_action(logger, "warning", "Transfer rejected: insufficient funds",
                           account_id=self._id, action="transfer",
                           extra={"requested": amount.minor_units,
                                  "available": self._balance.minor_units,
                                  "destination": to.id})
                raise InsufficientFunds(amount, self._balance, "transfer")

            transfer_id = str(uuid.uuid4())
            now = datetime.now(timezone.utc)
            out_entry = self._entry(EntryKind.TRANSFER_OUT, amount, to.id,
                                    f"Transfer to account {to.id}", transfer_id, now)
            in_entry = to._entry(EntryKind.TRANSFER_IN, amount, self._id,
                                 f"Transfer from account {self._id}", transfer_id, now)
            self._post(out_entry)
            to._post(in_entry)

        log_action(logger, "info", f"Transferred {amount.to_string()} to {to.id}",
                   account_id=self._id, action="transfer", correlation_id=transfer_id,
                   extra={"minor_units": amount.minor_units, "destination": to.id})
        return out_entry, in_entry

    def change_credential(self, old: str, new: str) -> bool:
        """
        Replace the credential if old matches the current one

        Returns:
            False without any change if old is wrong, True otherwise

        Raises:
            ValueError: If the new credential is empty
        """
        with self._lock:
            if not self._credential.matches(old):
                log_action(logger, "warning", "Credential change rejected",
                           account_id=self._id, action="change_credential")
                return False
            self._credential = HashedCredential(new)

        log_action(logger, "info", "Credential changed",
                   account_id=self._id, action="change_credential")
        if self._audit_trail:
            self._audit_trail.log_event(AuditEventType.CREDENTIAL_CHANGED, self._id)
        return True

    def change_credential_or_raise(self, old: str, new: str) -> None:
        """Like change_credential, but raises CredentialMismatch on a wrong old credential"""
        if not self.change_credential(old, new):
            raise CredentialMismatch()

    def history_filtered(self, kind: Optional[EntryKind] = None) -> Tuple[LedgerEntry, ...]:
        """Snapshot of the ledger, optionally restricted to one kind"""
        with self._lock:
            if kind is None:
                return tuple(self._history)
            return tuple(entry for entry in self._history if entry.kind == kind)

    def recent_entries(self, limit: int) -> Tuple[LedgerEntry, ...]:
        """Most recent entries, oldest first"""
        if limit <= 0:
            return ()
        with self._lock:
            return tuple(self._history[-limit:])

    def total_for(self, kind: EntryKind) -> Money:
        """Sum of amounts of all entries of one kind"""
        total = Money.zero(self._currency)
        for entry in self.history_filtered(kind):
            total = total + entry.amount
        return total

    def check_integrity(self) -> bool:
        """Check that the balance equals the signed sum of the ledger and is not negative"""
        with self._lock:
            total = Money.zero(self._currency)
            for entry in self._history:
                total = total + entry.signed_amount
            return total == self._balance and not self._balance.is_negative()

    def _validate_amount(self, amount: Money) -> None:
        if not isinstance(amount, Money):
            raise InvalidAmount(f"Amount must be Money, got {type(amount).__name__}")
        if amount.currency != self._currency:
            raise InvalidAmount(
                f"Amount currency {amount.currency.code} does not match "
                f"account currency {self._currency.code}"
            )
        if not amount.is_positive():
            raise InvalidAmount(f"Amount must be positive, got {amount.to_string()}")

    def _entry(self, kind: EntryKind, amount: Money, counterparty_id: str, note: str,
               transfer_id: Optional[str] = None,
               timestamp: Optional[datetime] = None) -> LedgerEntry:
        return LedgerEntry(
            id=str(uuid.uuid4()),
            kind=kind,
            amount=amount,
            account_id=self._id,
            counterparty_id=counterparty_id,
            timestamp=timestamp or datetime.now(timezone.utc),
            note=note,
            transfer_id=transfer_id
        )

    def _post(self, entry: LedgerEntry) -> None:
        """Apply an entry to the balance and the ledger. Caller holds the lock."""
        self._balance = self._balance + entry.signed_amount
        self._history.append(entry)

    def __repr__(self) -> str:
        return (f"Account(id={self._id!r}, holder_name={self._holder_name!r}, "
                f"balance={self.balance.to_string()})")
