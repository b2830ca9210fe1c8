"""
Account Storage Module

Abstract account store plus the in-memory implementation the directory
uses. A durable backend can be slotted in behind the same interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import threading

from .accounts import Account


class AccountStore(ABC):
    """Abstract interface for account storage backends"""

    @abstractmethod
    def add(self, account: Account) -> bool:
        """Insert an account; False without effect if its id is taken"""
        pass

    @abstractmethod
    def get(self, account_id: str) -> Optional[Account]:
        """Get an account by id"""
        pass

    @abstractmethod
    def values(self) -> List[Account]:
        """All accounts in insertion order"""
        pass

    @abstractmethod
    def exists(self, account_id: str) -> bool:
        """Check if an account id is registered"""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of accounts"""
        pass


class InMemoryAccountStore(AccountStore):
    """In-memory account store for the process lifetime"""

    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()

    def add(self, account: Account) -> bool:
        with self._lock:
            if account.id in self._accounts:
                return False
            self._accounts[account.id] = account
            return True

    def get(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_id)

    def values(self) -> List[Account]:
        with self._lock:
            return list(self._accounts.values())

    def exists(self, account_id: str) -> bool:
        with self._lock:
            return account_id in self._accounts

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)
