"""User domain service: register, login, refresh, bootstrap admin.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import logging

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.errors import (
    EmailExistsError,
    InvalidCredentialsError,
    UsernameExistsError,
)
from src.ft_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.ft_gateway.auth.password import hash_password, verify_password
from src.ft_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

_CREATE_WALLET_SQL = text(
    "INSERT INTO wallets (user_id, deposit_balance, winnings_balance, version) "
    "VALUES (:user_id, 0, 0, 0)"
)


class UserService:
    """Stateless service: instantiate once, reuse across requests."""

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        db: AsyncSession,
        is_admin: bool = False,
    ) -> UserModel:
        """Register a new user and create their wallet row.

        Inserts into `users` and `wallets` in the caller's transaction, so a
        user never exists without a wallet.
        """
        # DB UNIQUE constraints are the final guard
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        if result.scalar_one_or_none() is not None:
            raise UsernameExistsError()

        result = await db.execute(
            select(UserModel).where(UserModel.email == email)
        )
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            username=username,
            email=email,
            password_hash=hash_password(password),
            is_admin=is_admin,
            ban_status="active",
        )
        db.add(user)
        await db.flush()  # Get user.id without committing

        await db.execute(_CREATE_WALLET_SQL, {"user_id": str(user.id)})
        logger.info("User registered: %s (%s)", username, user.id)
        return user

    async def login(
        self,
        username: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate user and return (user, access_token, refresh_token).

        "User not found" and "Wrong password" both raise InvalidCredentialsError
        so usernames cannot be enumerated. Banned users may still log in and
        browse; the ban gate blocks the actions they are not allowed to take.
        """
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return (
            user,
            create_access_token(str(user.id)),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        user_id: str = str(payload["sub"])
        return create_access_token(user_id)

    async def ensure_admin(
        self, username: str, email: str, password: str, db: AsyncSession
    ) -> bool:
        """Create the bootstrap admin if no admin exists. True if one was created."""
        result = await db.execute(
            select(UserModel.id).where(UserModel.is_admin.is_(True)).limit(1)
        )
        if result.first() is not None:
            return False
        await self.register(username, email, password, db, is_admin=True)
        logger.warning("Bootstrap admin %r created; change its password", username)
        return True
