"""WalletLedger: the only authority that changes wallet balances.

Every balance mutation is paired with an append to wallet_transactions on
the same session, so both land in the caller's transaction or neither does.
Callers own the transaction (commit/rollback); the ledger never commits.

Logging contract for combined debits: one `debit` row per balance actually
drawn from, each tagged with that balance and sharing the caller's
reference. A zero-amount `combined` row is written only for audit entries
that touch no balance (free tournament joins).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.enums import BalanceType, TransactionType
from src.ft_common.errors import (
    InsufficientBalanceError,
    InvalidInputError,
    WalletNotFoundError,
)
from src.ft_wallet.domain.combined import split_combined_debit
from src.ft_wallet.domain.models import CombinedDebitResult, Wallet, WalletTransaction
from src.ft_wallet.domain.repository import WalletRepositoryProtocol

logger = logging.getLogger(__name__)

_SINGLE_BALANCES = (BalanceType.DEPOSIT.value, BalanceType.WINNINGS.value)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidInputError(f"Amount must be a positive number of cents, got {amount!r}")


def _check_balance_type(balance_type: str) -> str:
    value = balance_type.value if isinstance(balance_type, BalanceType) else balance_type
    if value not in _SINGLE_BALANCES:
        raise InvalidInputError(f"Unknown balance type: {balance_type!r}")
    return value


class WalletLedger:
    def __init__(self, repo: WalletRepositoryProtocol) -> None:
        self._repo = repo

    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet:
        wallet = await self._repo.get_wallet(db, user_id)
        if wallet is None:
            raise WalletNotFoundError(user_id)
        return wallet

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        balance_type: str,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> tuple[Wallet, WalletTransaction]:
        _check_amount(amount)
        balance = _check_balance_type(balance_type)
        wallet = await self._repo.add_to_balance(db, user_id, balance, amount)
        if wallet is None:
            raise WalletNotFoundError(user_id)
        entry = await self._repo.append_transaction(
            db,
            user_id=user_id,
            transaction_type=TransactionType.CREDIT.value,
            amount=amount,
            balance_type=balance,
            balance_after=wallet.balance_of(balance),
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
        )
        return wallet, entry

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        balance_type: str,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> tuple[Wallet, WalletTransaction]:
        _check_amount(amount)
        balance = _check_balance_type(balance_type)
        wallet = await self._repo.take_from_balance(db, user_id, balance, amount)
        if wallet is None:
            current = await self._repo.get_wallet(db, user_id)
            if current is None:
                raise WalletNotFoundError(user_id)
            raise InsufficientBalanceError(amount, current.balance_of(balance))
        entry = await self._repo.append_transaction(
            db,
            user_id=user_id,
            transaction_type=TransactionType.DEBIT.value,
            amount=amount,
            balance_type=balance,
            balance_after=wallet.balance_of(balance),
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
        )
        return wallet, entry

    async def debit_combined(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> CombinedDebitResult:
        """Take `amount` from deposit first, the shortfall from winnings.

        The wallet row is locked for the rest of the caller's transaction,
        which serializes concurrent spends by the same user.
        """
        _check_amount(amount)
        wallet = await self._repo.lock_wallet(db, user_id)
        if wallet is None:
            raise WalletNotFoundError(user_id)
        split = split_combined_debit(wallet, amount)

        updated = await self._repo.apply_combined_debit(db, user_id, split)
        if updated is None:
            # Row is locked, so this only happens if the lock was not honoured
            raise InsufficientBalanceError(amount, wallet.total_balance)

        entries: list[WalletTransaction] = []
        for balance, part in (
            (BalanceType.DEPOSIT.value, split.from_deposit),
            (BalanceType.WINNINGS.value, split.from_winnings),
        ):
            if part == 0:
                continue
            entries.append(
                await self._repo.append_transaction(
                    db,
                    user_id=user_id,
                    transaction_type=TransactionType.DEBIT.value,
                    amount=part,
                    balance_type=balance,
                    balance_after=updated.balance_of(balance),
                    description=description,
                    reference_type=reference_type,
                    reference_id=reference_id,
                )
            )
        logger.debug(
            "Combined debit user=%s amount=%d deposit=%d winnings=%d",
            user_id, amount, split.from_deposit, split.from_winnings,
        )
        return CombinedDebitResult(wallet=updated, split=split, entries=entries)

    async def record_audit(
        self,
        db: AsyncSession,
        user_id: str,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> WalletTransaction:
        """Append a zero-amount audit row; balances are untouched."""
        wallet = await self.get_wallet(db, user_id)
        return await self._repo.append_transaction(
            db,
            user_id=user_id,
            transaction_type=TransactionType.DEBIT.value,
            amount=0,
            balance_type=BalanceType.COMBINED.value,
            balance_after=wallet.total_balance,
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
        )
