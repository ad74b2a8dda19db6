"""Pydantic schemas for ft_wallet API."""

from pydantic import BaseModel, Field

from src.ft_common.money import cents_to_display
from src.ft_wallet.domain.models import AdminLedgerEntry, Wallet, WalletTransaction

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to deposit in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    deposit_balance_cents: int
    deposit_balance_display: str
    winnings_balance_cents: int
    winnings_balance_display: str
    total_balance_cents: int
    total_balance_display: str

    @classmethod
    def from_wallet(cls, wallet: Wallet) -> "BalanceResponse":
        return cls(
            user_id=wallet.user_id,
            deposit_balance_cents=wallet.deposit_balance,
            deposit_balance_display=cents_to_display(wallet.deposit_balance),
            winnings_balance_cents=wallet.winnings_balance,
            winnings_balance_display=cents_to_display(wallet.winnings_balance),
            total_balance_cents=wallet.total_balance,
            total_balance_display=cents_to_display(wallet.total_balance),
        )


class DepositResponse(BaseModel):
    deposit_balance_cents: int
    deposit_balance_display: str
    deposited_cents: int
    deposited_display: str
    transaction_id: int


class TransactionItem(BaseModel):
    id: int
    transaction_type: str
    balance_type: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    balance_after_display: str
    reference_type: str | None
    reference_id: str | None
    description: str
    created_at: str  # ISO8601 string

    @classmethod
    def from_entry(cls, e: WalletTransaction) -> "TransactionItem":
        return cls(
            id=e.id,
            transaction_type=e.transaction_type,
            balance_type=e.balance_type,
            amount_cents=e.amount,
            amount_display=cents_to_display(e.amount),
            balance_after_cents=e.balance_after,
            balance_after_display=cents_to_display(e.balance_after),
            reference_type=e.reference_type,
            reference_id=e.reference_id,
            description=e.description,
            created_at=e.created_at.isoformat() if e.created_at else "",
        )


class TransactionsResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool


class AdminTransactionItem(TransactionItem):
    user_id: str
    username: str

    @classmethod
    def from_admin_entry(cls, row: AdminLedgerEntry) -> "AdminTransactionItem":
        item = TransactionItem.from_entry(row.entry)
        return cls(**item.model_dump(), user_id=row.entry.user_id, username=row.username)


class AdminTransactionsResponse(BaseModel):
    items: list[AdminTransactionItem]
    next_cursor: str | None
    has_more: bool
