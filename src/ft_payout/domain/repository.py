"""Repository Protocol for payout requests."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_payout.domain.models import PayoutRequest


class PayoutRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, user_id: str, amount: int) -> PayoutRequest: ...

    async def lock_by_id(self, db: AsyncSession, payout_id: int) -> PayoutRequest | None: ...

    async def mark_processed(
        self,
        db: AsyncSession,
        payout_id: int,
        status: str,
        admin_id: str,
        notes: str | None,
    ) -> PayoutRequest | None: ...

    async def list_requests(
        self, db: AsyncSession, status: str | None, user_id: str | None, limit: int
    ) -> list[PayoutRequest]: ...
