"""
Statements

Mini-statement built from an account's ledger: the most recent entries
plus per-kind totals.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .accounts import Account
from .currency import Money
from .ledger import EntryKind, LedgerEntry


@dataclass(frozen=True)
class Statement:
    """Point-in-time summary of one account"""
    account_id: str
    holder_name: str
    balance: Money
    generated_at: datetime
    entries: Tuple[LedgerEntry, ...]
    totals: Dict[EntryKind, Money]

    @property
    def total_in(self) -> Money:
        return self.totals[EntryKind.DEPOSIT] + self.totals[EntryKind.TRANSFER_IN]

    @property
    def total_out(self) -> Money:
        return self.totals[EntryKind.WITHDRAWAL] + self.totals[EntryKind.TRANSFER_OUT]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'account_id': self.account_id,
            'holder_name': self.holder_name,
            'balance': str(self.balance.to_decimal()),
            'generated_at': self.generated_at.isoformat(),
            'entries': [entry.to_dict() for entry in self.entries],
            'totals': {kind.value: str(total.to_decimal()) for kind, total in self.totals.items()},
        }


def build_statement(account: Account, limit: int = 10) -> Statement:
    """
    Build a mini-statement for an account

    Args:
        account: Account to summarize
        limit: Number of most recent entries to include

    Returns:
        Statement with balance, recent entries and totals for every entry kind
    """
    history = account.history
    totals = {kind: Money.zero(account.currency) for kind in EntryKind}
    balance = Money.zero(account.currency)
    for entry in history:
        totals[entry.kind] = totals[entry.kind] + entry.amount
        balance = balance + entry.signed_amount

    return Statement(
        account_id=account.id,
        holder_name=account.holder_name,
        balance=balance,
        generated_at=datetime.now(timezone.utc),
        entries=history[-limit:] if limit > 0 else (),
        totals=totals
    )
