"""User directory Protocol: the lookups other modules need about users.

Registration resolves team member usernames through it and the admin
module flips ban state through it. Unit tests inject an in-memory or
mock implementation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_gateway.user.bans import is_banned


@dataclass
class UserSummary:
    id: str
    username: str
    email: str
    is_admin: bool = False
    ban_status: str = "active"
    ban_reason: str | None = None
    ban_expiry: datetime | None = None
    created_at: datetime | None = None

    @property
    def banned(self) -> bool:
        return is_banned(self.ban_status, self.ban_expiry)


class UserRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, user_id: str) -> UserSummary | None: ...

    async def get_by_username(
        self, db: AsyncSession, username: str
    ) -> UserSummary | None: ...

    async def list_by_usernames(
        self, db: AsyncSession, usernames: list[str]
    ) -> list[UserSummary]: ...

    async def list_by_ids(
        self, db: AsyncSession, user_ids: list[str]
    ) -> list[UserSummary]: ...

    async def list_players(self, db: AsyncSession) -> list[UserSummary]: ...

    async def set_ban(
        self,
        db: AsyncSession,
        user_id: str,
        status: str,
        reason: str | None,
        expiry: datetime | None,
        banned_by: str | None,
    ) -> bool: ...

    async def lift_expired_ban(self, db: AsyncSession, user_id: str) -> None: ...
