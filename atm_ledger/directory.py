"""
Directory Module

The bank's registry of accounts. Resolves account ids, authenticates
owners by credential and searches accounts. It never changes an account
except through the account's own operations.
"""

from typing import Callable, List, Optional, Tuple
import secrets

from .accounts import Account
from .audit import AuditTrail, AuditEventType
from .credentials import HashedCredential
from .currency import Money, Currency
from .errors import AccountNotFound, AuthenticationFailed, DuplicateAccount
from .ledger import LedgerEntry
from .storage import AccountStore, InMemoryAccountStore
from .logging_config import get_logger, log_action

logger = get_logger("atm_ledger.directory")


class Directory:
    """
    Registry of accounts keyed by account id
    """

    def __init__(
        self,
        name: str,
        store: Optional[AccountStore] = None,
        audit_trail: Optional[AuditTrail] = None,
        currency: Currency = Currency.INR
    ):
        self.name = name
        self.store = store or InMemoryAccountStore()
        self.audit_trail = audit_trail
        self.currency = currency
        # Unknown ids are checked against this so both miss paths hash once
        self._decoy_credential = HashedCredential(secrets.token_hex(16))

    def register(self, account: Account) -> bool:
        """
        Add an account to the directory

        Returns:
            False without effect if the id is already registered or the
            account is held in another currency, True otherwise

        The directory does not hand its audit trail to accounts registered
        here; pass audit_trail to the Account constructor, or use
        open_account, for credential changes to be audited.
        """
        if account.currency != self.currency:
            log_action(logger, "warning", "Registration rejected: currency mismatch",
                       account_id=account.id, action="register",
                       extra={"account_currency": account.currency.code,
                              "directory_currency": self.currency.code})
            return False

        if not self.store.add(account):
            log_action(logger, "warning", "Registration rejected: duplicate id",
                       account_id=account.id, action="register")
            return False

        log_action(logger, "info", f"Registered account for {account.holder_name}",
                   account_id=account.id, action="register")
        if self.audit_trail:
            self.audit_trail.log_event(
                AuditEventType.ACCOUNT_REGISTERED,
                account.id,
                {"holder_name": account.holder_name,
                 "opening_balance": account.balance.minor_units}
            )
        return True

    def open_account(
        self,
        account_id: str,
        holder_name: str,
        credential: str,
        opening_balance: Optional[Money] = None
    ) -> Account:
        """
        Create and register a new account

        Raises:
            DuplicateAccount: If the id is already registered
        """
        if self.store.exists(account_id):
            raise DuplicateAccount(account_id)

        account = Account(
            account_id=account_id,
            holder_name=holder_name,
            credential=credential,
            opening_balance=opening_balance,
            currency=self.currency,
            audit_trail=self.audit_trail
        )
        if not self.register(account):
            raise DuplicateAccount(account_id)
        return account

    def lookup(self, account_id: str) -> Optional[Account]:
        """Get account by id, None if absent"""
        return self.store.get(account_id)

    def require(self, account_id: str) -> Account:
        """Get account by id or raise AccountNotFound"""
        account = self.lookup(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        return account

    def authenticate(self, account_id: str, credential: str) -> Optional[Account]:
        """
        Resolve an account by id and credential

        Unknown ids and wrong credentials both yield None.
        """
        account = self.lookup(account_id)
        if account is None:
            self._decoy_credential.matches(credential)
            return None
        if not account.authenticate(credential):
            return None
        return account

    def authenticate_or_raise(self, account_id: str, credential: str) -> Account:
        """Like authenticate, but raises AuthenticationFailed on any miss"""
        account = self.authenticate(account_id, credential)
        if account is None:
            raise AuthenticationFailed()
        return account

    def transfer(self, source_id: str, destination_id: str,
                 amount: Money) -> Tuple[LedgerEntry, LedgerEntry]:
        """
        Transfer between two registered accounts

        Raises:
            AccountNotFound: If either id is unknown
            InvalidAmount, SameAccount, InsufficientFunds: From Account.transfer
        """
        source = self.require(source_id)
        destination = self.require(destination_id)
        return source.transfer(destination, amount)

    def find(self, predicate: Callable[[Account], bool]) -> List[Account]:
        """All accounts matching a predicate, in registration order"""
        return [account for account in self.store.values() if predicate(account)]

    def search_by_holder_name(self, text: str) -> List[Account]:
        """Case-insensitive substring search on holder names"""
        needle = text.lower()
        return self.find(lambda account: needle in account.holder_name.lower())

    def find_with_balance_above(self, threshold: Money) -> List[Account]:
        """Accounts whose balance is strictly greater than threshold"""
        return self.find(lambda account: account.balance > threshold)

    def all_accounts(self) -> List[Account]:
        return self.store.values()

    def total_funds(self) -> Money:
        """Sum of all account balances"""
        total = Money.zero(self.currency)
        for account in self.store.values():
            total = total + account.balance
        return total

    def __len__(self) -> int:
        return self.store.count()

    def __contains__(self, account_id: str) -> bool:
        return self.store.exists(account_id)
