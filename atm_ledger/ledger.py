"""
Ledger Entries

Immutable records of completed money movements. Each account keeps its own
append-only sequence of these; the account balance is always the signed sum
of its entries. A transfer writes two entries, one on each side, that share
a transfer id, amount and timestamp.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum

from .currency import Money


class EntryKind(Enum):
    """Kinds of money movement recorded in an account ledger"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER_OUT = "transfer_out"
    TRANSFER_IN = "transfer_in"

    @property
    def sign(self) -> int:
        """+1 if the account receives funds, -1 if it pays"""
        if self in (EntryKind.DEPOSIT, EntryKind.TRANSFER_IN):
            return 1
        return -1

    @property
    def involves_cash(self) -> bool:
        """Check if this kind moves physical cash in or out of the bank"""
        return self in (EntryKind.DEPOSIT, EntryKind.WITHDRAWAL)

    @property
    def fee_rate(self) -> Decimal:
        """
        Placeholder fee rate for this kind of movement.
        Reported only; no fee is ever charged against a balance.
        """
        if self == EntryKind.DEPOSIT:
            return Decimal('0')
        if self == EntryKind.WITHDRAWAL:
            return Decimal('0.01')
        return Decimal('0.02')

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()


@dataclass(frozen=True)
class LedgerEntry:
    """
    One completed money movement on one account.
    counterparty_id equals account_id for deposits and withdrawals.
    """
    id: str
    kind: EntryKind
    amount: Money
    account_id: str
    counterparty_id: str
    timestamp: datetime
    note: str = ""
    transfer_id: Optional[str] = None

    def __post_init__(self):
        if not self.amount.is_positive():
            raise ValueError("Ledger entry amount must be positive")

    @property
    def signed_amount(self) -> Money:
        """Amount with the sign of its effect on the account balance"""
        return self.amount if self.kind.sign > 0 else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            'id': self.id,
            'kind': self.kind.value,
            'amount': str(self.amount.to_decimal()),
            'minor_units': self.amount.minor_units,
            'currency': self.amount.currency.code,
            'account_id': self.account_id,
            'counterparty_id': self.counterparty_id,
            'timestamp': self.timestamp.isoformat(),
            'note': self.note,
            'transfer_id': self.transfer_id,
        }

    def __str__(self) -> str:
        return (f"{self.timestamp.strftime('%Y-%m-%d %H:%M:%S')} | {self.kind.label} | "
                f"{self.amount.to_string()} | {self.note}")
