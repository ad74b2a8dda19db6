"""WalletApplicationService: balance reads, deposits, transaction history.

Deposit runs in an explicit commit/rollback block; reads run without one.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.enums import BalanceType, WalletOperation
from src.ft_common.errors import InvalidInputError
from src.ft_common.money import cents_to_display
from src.ft_common.pagination import cursor_decode, cursor_encode
from src.ft_wallet.application.schemas import (
    BalanceResponse,
    DepositResponse,
    TransactionItem,
    TransactionsResponse,
)
from src.ft_wallet.domain.ledger import WalletLedger
from src.ft_wallet.domain.maintenance import WalletMaintenance
from src.ft_wallet.domain.repository import WalletRepositoryProtocol
from src.ft_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)

DEPOSIT_DESCRIPTION = "Wallet deposit"


class WalletApplicationService:
    def __init__(
        self,
        repo: WalletRepositoryProtocol | None = None,
        maintenance: WalletMaintenance | None = None,
    ) -> None:
        self._repo: WalletRepositoryProtocol = repo or WalletRepository()
        self._ledger = WalletLedger(self._repo)
        self._maintenance = maintenance or WalletMaintenance()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        wallet = await self._ledger.get_wallet(db, user_id)
        return BalanceResponse.from_wallet(wallet)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> DepositResponse:
        await self._maintenance.ensure_allowed(WalletOperation.DEPOSIT)
        try:
            wallet, entry = await self._ledger.credit(
                db, user_id, amount_cents, BalanceType.DEPOSIT, DEPOSIT_DESCRIPTION,
                reference_type="DEPOSIT",
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deposit user=%s amount=%d", user_id, amount_cents)
        return DepositResponse(
            deposit_balance_cents=wallet.deposit_balance,
            deposit_balance_display=cents_to_display(wallet.deposit_balance),
            deposited_cents=amount_cents,
            deposited_display=cents_to_display(amount_cents),
            transaction_id=entry.id,
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        balance_type: str | None,
    ) -> TransactionsResponse:
        if balance_type is not None:
            try:
                balance_type = BalanceType(balance_type).value
            except ValueError:
                raise InvalidInputError(f"Unknown balance type: {balance_type!r}") from None
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_transactions(
            db, user_id, cursor_id, limit + 1, balance_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionsResponse(
            items=[TransactionItem.from_entry(e) for e in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
