"""UserRepository: ORM-backed implementation of UserRepositoryProtocol.

Transactions are owned by the caller; nothing here commits.
"""

import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.datetime_utils import utc_now
from src.ft_common.enums import BanStatus
from src.ft_gateway.user.db_models import UserModel
from src.ft_gateway.user.repository import UserSummary


def _to_summary(user: UserModel) -> UserSummary:
    return UserSummary(
        id=str(user.id),
        username=user.username,
        email=user.email,
        is_admin=user.is_admin,
        ban_status=user.ban_status,
        ban_reason=user.ban_reason,
        ban_expiry=user.ban_expiry,
        created_at=user.created_at,
    )


def _as_uuid(user_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


class UserRepository:
    async def get_by_id(self, db: AsyncSession, user_id: str) -> UserSummary | None:
        uid = _as_uuid(user_id)
        if uid is None:
            return None
        result = await db.execute(select(UserModel).where(UserModel.id == uid))
        user = result.scalar_one_or_none()
        return _to_summary(user) if user else None

    async def get_by_username(
        self, db: AsyncSession, username: str
    ) -> UserSummary | None:
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        user = result.scalar_one_or_none()
        return _to_summary(user) if user else None

    async def list_by_usernames(
        self, db: AsyncSession, usernames: list[str]
    ) -> list[UserSummary]:
        if not usernames:
            return []
        result = await db.execute(
            select(UserModel).where(UserModel.username.in_(usernames))
        )
        return [_to_summary(u) for u in result.scalars().all()]

    async def list_by_ids(
        self, db: AsyncSession, user_ids: list[str]
    ) -> list[UserSummary]:
        uids = [u for u in (_as_uuid(i) for i in user_ids) if u is not None]
        if not uids:
            return []
        result = await db.execute(select(UserModel).where(UserModel.id.in_(uids)))
        return [_to_summary(u) for u in result.scalars().all()]

    async def list_players(self, db: AsyncSession) -> list[UserSummary]:
        result = await db.execute(
            select(UserModel)
            .where(UserModel.is_admin.is_(False))
            .order_by(UserModel.created_at.desc())
        )
        return [_to_summary(u) for u in result.scalars().all()]

    async def set_ban(
        self,
        db: AsyncSession,
        user_id: str,
        status: str,
        reason: str | None,
        expiry: datetime | None,
        banned_by: str | None,
    ) -> bool:
        """Set ban state on a non-admin user. False if no such player exists."""
        uid = _as_uuid(user_id)
        if uid is None:
            return False
        status = BanStatus(status).value
        active = status == BanStatus.ACTIVE.value
        result = await db.execute(
            update(UserModel)
            .where(UserModel.id == uid, UserModel.is_admin.is_(False))
            .values(
                ban_status=status,
                ban_reason=None if active else reason,
                ban_expiry=None if active else expiry,
                banned_at=None if active else utc_now(),
                banned_by=None if active or banned_by is None else _as_uuid(banned_by),
            )
            .returning(UserModel.id)
        )
        return result.first() is not None

    async def lift_expired_ban(self, db: AsyncSession, user_id: str) -> None:
        uid = _as_uuid(user_id)
        if uid is None:
            return
        await db.execute(
            update(UserModel)
            .where(
                UserModel.id == uid,
                UserModel.ban_status == BanStatus.TEMP_BANNED.value,
                UserModel.ban_expiry <= utc_now(),
            )
            .values(
                ban_status=BanStatus.ACTIVE.value,
                ban_reason=None,
                ban_expiry=None,
                banned_at=None,
                banned_by=None,
            )
        )
