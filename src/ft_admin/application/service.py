"""Admin application service: player moderation and prize awards."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.datetime_utils import as_utc, utc_now
from src.ft_common.enums import BalanceType, BanStatus
from src.ft_common.errors import InvalidInputError, UserNotFoundError
from src.ft_common.money import cents_to_display
from src.ft_common.pagination import cursor_decode, cursor_encode
from src.ft_gateway.user.bans import effective_ban_status
from src.ft_gateway.user.persistence import UserRepository
from src.ft_gateway.user.repository import UserRepositoryProtocol
from src.ft_wallet.application.schemas import (
    AdminTransactionItem,
    AdminTransactionsResponse,
)
from src.ft_wallet.domain.ledger import WalletLedger
from src.ft_wallet.domain.repository import WalletRepositoryProtocol
from src.ft_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)

PRIZE_DESCRIPTION = "Prize winnings added by admin"

_LIST_PLAYERS_SQL = text("""
    SELECT u.id, u.username, u.email, u.ban_status, u.ban_reason, u.ban_expiry,
           u.created_at,
           COALESCE(w.deposit_balance, 0)  AS deposit_balance,
           COALESCE(w.winnings_balance, 0) AS winnings_balance
    FROM users u
    LEFT JOIN wallets w ON w.user_id = u.id
    WHERE u.is_admin = FALSE
    ORDER BY u.created_at DESC
    LIMIT :limit
""")


class AdminService:
    def __init__(
        self,
        users: UserRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
    ) -> None:
        self._users: UserRepositoryProtocol = users or UserRepository()
        self._wallets: WalletRepositoryProtocol = wallets or WalletRepository()
        self._ledger = WalletLedger(self._wallets)

    async def list_users(self, db: AsyncSession, limit: int = 500) -> list[dict[str, Any]]:
        rows = (await db.execute(_LIST_PLAYERS_SQL, {"limit": limit})).fetchall()
        return [
            {
                "user_id": str(r.id),
                "username": r.username,
                "email": r.email,
                "ban_status": effective_ban_status(r.ban_status, r.ban_expiry).value,
                "ban_reason": r.ban_reason,
                "ban_expiry": r.ban_expiry.isoformat() if r.ban_expiry else None,
                "deposit_balance_cents": r.deposit_balance,
                "deposit_balance_display": cents_to_display(r.deposit_balance),
                "winnings_balance_cents": r.winnings_balance,
                "winnings_balance_display": cents_to_display(r.winnings_balance),
                "created_at": r.created_at.isoformat() if r.created_at else None,
            }
            for r in rows
        ]

    async def ban_user(
        self,
        db: AsyncSession,
        admin_id: str,
        user_id: str,
        ban_type: str,
        reason: str,
        expires_at: datetime | None,
    ) -> dict[str, Any]:
        """Ban a player. Temporary bans need an expiry in the future."""
        if ban_type == "temporary":
            if expires_at is None:
                raise InvalidInputError("Temporary bans require expires_at")
            expires_at = as_utc(expires_at)
            if expires_at <= utc_now():
                raise InvalidInputError("expires_at must be in the future")
            status = BanStatus.TEMP_BANNED
        elif ban_type == "permanent":
            expires_at = None
            status = BanStatus.BANNED
        else:
            raise InvalidInputError(f"Unknown ban type: {ban_type!r}")

        try:
            if not await self._users.set_ban(
                db, user_id, status.value, reason, expires_at, admin_id
            ):
                raise UserNotFoundError([user_id])
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.warning(
            "User %s %s by admin %s (until %s): %s",
            user_id, status.value, admin_id, expires_at, reason,
        )
        return {
            "user_id": user_id,
            "ban_status": status.value,
            "ban_reason": reason,
            "ban_expiry": expires_at.isoformat() if expires_at else None,
        }

    async def unban_user(self, db: AsyncSession, admin_id: str, user_id: str) -> dict[str, Any]:
        try:
            if not await self._users.set_ban(
                db, user_id, BanStatus.ACTIVE.value, None, None, None
            ):
                raise UserNotFoundError([user_id])
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("User %s unbanned by admin %s", user_id, admin_id)
        return {"user_id": user_id, "ban_status": BanStatus.ACTIVE.value}

    async def award_winnings(
        self, db: AsyncSession, admin_id: str, user_id: str, amount: int
    ) -> dict[str, Any]:
        """Credit prize money to a player's winnings balance."""
        try:
            if await self._users.get_by_id(db, user_id) is None:
                raise UserNotFoundError([user_id])
            wallet, entry = await self._ledger.credit(
                db, user_id, amount, BalanceType.WINNINGS, PRIZE_DESCRIPTION,
                "ADMIN", admin_id,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Admin %s awarded %d to user %s", admin_id, amount, user_id)
        return {
            "user_id": user_id,
            "awarded_cents": amount,
            "awarded_display": cents_to_display(amount),
            "winnings_balance_cents": wallet.winnings_balance,
            "winnings_balance_display": cents_to_display(wallet.winnings_balance),
            "transaction_id": entry.id,
        }

    async def list_admin_transactions(
        self, db: AsyncSession, cursor: str | None, limit: int
    ) -> AdminTransactionsResponse:
        """Audit trail of ledger rows written by admins, newest first."""
        rows = await self._wallets.list_admin_transactions(
            db, cursor_decode(cursor), limit + 1
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        return AdminTransactionsResponse(
            items=[AdminTransactionItem.from_admin_entry(r) for r in page],
            next_cursor=cursor_encode(page[-1].entry.id) if has_more and page else None,
            has_more=has_more,
        )
