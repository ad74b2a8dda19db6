"""PayoutService: withdrawal requests and their admin resolution.

Withdrawals debit winnings immediately (the funds are held while an admin
reviews the request). Rejection credits the same amount back; approval
changes no balance. Each operation is one transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ft_common.enums import BalanceType, PayoutAction, PayoutStatus, WalletOperation
from src.ft_common.errors import AlreadyProcessedError, InvalidInputError, PayoutNotFoundError
from src.ft_common.money import cents_to_display
from src.ft_payout.application.schemas import PayoutOut, WithdrawalResponse
from src.ft_payout.domain.models import next_status
from src.ft_payout.domain.repository import PayoutRepositoryProtocol
from src.ft_payout.infrastructure.persistence import PayoutRepository
from src.ft_wallet.domain.ledger import WalletLedger
from src.ft_wallet.domain.maintenance import WalletMaintenance
from src.ft_wallet.domain.repository import WalletRepositoryProtocol
from src.ft_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)

REFERENCE_TYPE = "PAYOUT"
WITHDRAWAL_DESCRIPTION = "Winnings withdrawal request"
REFUND_DESCRIPTION = "Withdrawal request rejected - refund"


class PayoutService:
    def __init__(
        self,
        repo: PayoutRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
        maintenance: WalletMaintenance | None = None,
        min_withdrawal_cents: int | None = None,
    ) -> None:
        self._repo: PayoutRepositoryProtocol = repo or PayoutRepository()
        self._ledger = WalletLedger(wallets or WalletRepository())
        self._maintenance = maintenance or WalletMaintenance()
        self._min_withdrawal = (
            settings.MIN_WITHDRAWAL_CENTS if min_withdrawal_cents is None else min_withdrawal_cents
        )

    async def request_withdrawal(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> WithdrawalResponse:
        await self._maintenance.ensure_allowed(WalletOperation.WITHDRAWAL)
        if amount < self._min_withdrawal:
            raise InvalidInputError(
                f"Minimum withdrawal amount is {cents_to_display(self._min_withdrawal)}"
            )
        try:
            payout = await self._repo.insert(db, user_id, amount)
            wallet, _ = await self._ledger.debit(
                db, user_id, amount, BalanceType.WINNINGS, WITHDRAWAL_DESCRIPTION,
                REFERENCE_TYPE, str(payout.id),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Payout %d requested: user=%s amount=%d", payout.id, user_id, amount)
        return WithdrawalResponse(
            payout=PayoutOut.from_domain(payout),
            winnings_balance_cents=wallet.winnings_balance,
            winnings_balance_display=cents_to_display(wallet.winnings_balance),
        )

    async def resolve(
        self,
        db: AsyncSession,
        payout_id: int,
        action: PayoutAction,
        admin_id: str,
        notes: str | None = None,
    ) -> PayoutOut:
        try:
            payout = await self._repo.lock_by_id(db, payout_id)
            if payout is None:
                raise PayoutNotFoundError(payout_id)
            target = next_status(payout, action)
            processed = await self._repo.mark_processed(
                db, payout.id, target.value, admin_id, notes
            )
            if processed is None:
                raise AlreadyProcessedError(payout.id, payout.status)
            if target is PayoutStatus.REJECTED:
                await self._ledger.credit(
                    db, payout.user_id, payout.amount, BalanceType.WINNINGS,
                    REFUND_DESCRIPTION, REFERENCE_TYPE, str(payout.id),
                )
            await db.commit()
        except AlreadyProcessedError:
            await db.rollback()
            logger.info("Payout %d already processed; resolve ignored", payout_id)
            raise
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Payout %d %s by admin %s (amount=%d)",
            payout_id, target.value, admin_id, payout.amount,
        )
        return PayoutOut.from_domain(processed)

    async def list_requests(
        self, db: AsyncSession, status: str | None = None, limit: int = 100
    ) -> list[PayoutOut]:
        if status is not None:
            try:
                status = PayoutStatus(status).value
            except ValueError:
                raise InvalidInputError(f"Unknown payout status: {status!r}") from None
        payouts = await self._repo.list_requests(db, status, None, limit)
        return [PayoutOut.from_domain(p) for p in payouts]

    async def list_for_user(
        self, db: AsyncSession, user_id: str, limit: int = 100
    ) -> list[PayoutOut]:
        payouts = await self._repo.list_requests(db, None, user_id, limit)
        return [PayoutOut.from_domain(p) for p in payouts]
