"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock or an in-memory store conforming to this Protocol.
Infrastructure layer provides the real implementation.

Balance mutators return None when their guard fails (missing wallet or
not enough funds); WalletLedger turns that into the right error.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_wallet.domain.models import (
    AdminLedgerEntry,
    CombinedDebit,
    Wallet,
    WalletTransaction,
)


class WalletRepositoryProtocol(Protocol):
    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None: ...

    async def lock_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None: ...

    async def add_to_balance(
        self, db: AsyncSession, user_id: str, balance_type: str, amount: int
    ) -> Wallet | None: ...

    async def take_from_balance(
        self, db: AsyncSession, user_id: str, balance_type: str, amount: int
    ) -> Wallet | None: ...

    async def apply_combined_debit(
        self, db: AsyncSession, user_id: str, split: CombinedDebit
    ) -> Wallet | None: ...

    async def append_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        transaction_type: str,
        amount: int,
        balance_type: str,
        balance_after: int,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> WalletTransaction: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        balance_type: str | None,
    ) -> list[WalletTransaction]: ...

    async def list_admin_transactions(
        self, db: AsyncSession, cursor_id: int | None, limit: int
    ) -> list[AdminLedgerEntry]: ...
