"""FastAPI auth dependencies.

    get_current_user  any authenticated user (banned users included)
    get_active_user   authenticated and not banned (the ban gate)
    require_admin     authenticated admin

Usage:
    @router.post("/registrations")
    async def register(user: UserModel = Depends(get_active_user)):
        ...
"""

import logging
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import get_db_session
from src.ft_common.enums import BanStatus
from src.ft_common.errors import AdminRequiredError, InvalidCredentialsError, UserBannedError
from src.ft_gateway.auth.jwt_handler import decode_token
from src.ft_gateway.user.bans import ban_expired, is_banned
from src.ft_gateway.user.db_models import UserModel
from src.ft_gateway.user.persistence import UserRepository

logger = logging.getLogger(__name__)

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

_users = UserRepository()


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Extract and validate the JWT Bearer token, return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION

    user = await db.get(UserModel, _parse_uuid(user_id))
    if user is None:
        raise _CREDENTIALS_EXCEPTION
    return user


async def get_active_user(
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Reject banned users with UserBannedError (403).

    An expired temporary ban is cleared on the spot and the request proceeds.
    """
    if ban_expired(current_user.ban_status, current_user.ban_expiry):
        await _users.lift_expired_ban(db, str(current_user.id))
        await db.commit()
        logger.info("Expired temporary ban lifted for user %s", current_user.id)
        current_user.ban_status = BanStatus.ACTIVE.value
        current_user.ban_expiry = None
        return current_user

    if is_banned(current_user.ban_status, current_user.ban_expiry):
        raise UserBannedError()
    return current_user


async def require_admin(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Raise AdminRequiredError (403) unless the caller is an admin."""
    if not current_user.is_admin:
        raise AdminRequiredError()
    return current_user


def _parse_uuid(user_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None
