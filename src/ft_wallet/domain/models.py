"""Domain models for ft_wallet: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Wallet:
    user_id: str
    deposit_balance: int    # cents, user-funded
    winnings_balance: int   # cents, prize-funded; the only withdrawable balance
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_balance(self) -> int:
        return self.deposit_balance + self.winnings_balance

    def balance_of(self, balance_type: str) -> int:
        if balance_type == "deposit":
            return self.deposit_balance
        if balance_type == "winnings":
            return self.winnings_balance
        return self.total_balance


@dataclass
class WalletTransaction:
    id: int                          # BIGSERIAL
    user_id: str
    transaction_type: str            # TransactionType value
    amount: int                      # cents, always >= 0; direction is transaction_type
    balance_type: str                # BalanceType value
    balance_after: int               # cents, snapshot of the touched balance after op
    description: str
    reference_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CombinedDebit:
    """How a combined debit was drawn: deposit first, shortfall from winnings."""

    from_deposit: int
    from_winnings: int

    @property
    def total(self) -> int:
        return self.from_deposit + self.from_winnings


@dataclass
class CombinedDebitResult:
    wallet: Wallet
    split: CombinedDebit
    entries: list[WalletTransaction] = field(default_factory=list)


@dataclass
class AdminLedgerEntry:
    """A ledger row written by an admin action, with the owner's username."""

    entry: WalletTransaction
    username: str
