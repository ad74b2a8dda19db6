"""Unit tests for tokens, password hashing and the auth dependencies."""

import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from jose import jwt

from src.ft_common.datetime_utils import utc_now
from src.ft_common.errors import (
    AdminRequiredError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UserBannedError,
)
from src.ft_gateway.auth import dependencies
from src.ft_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.ft_gateway.auth.password import hash_password, verify_password
from src.ft_gateway.user.db_models import UserModel
from src.ft_gateway.user.schemas import UserInfo
from src.ft_gateway.user.service import UserService


def _user(ban_status: str = "active", ban_expiry=None, is_admin: bool = False) -> UserModel:
    user = UserModel()
    user.id = uuid.uuid4()
    user.username = "alice"
    user.email = "alice@example.com"
    user.password_hash = "x"
    user.is_admin = is_admin
    user.ban_status = ban_status
    user.ban_expiry = ban_expiry
    user.ban_reason = None
    return user


class TestTokens:
    @pytest.mark.parametrize(
        ("factory", "token_type"),
        [(create_access_token, "access"), (create_refresh_token, "refresh")],
    )
    def test_claims(self, factory, token_type: str) -> None:
        claims = jwt.get_unverified_claims(factory("player-7"))
        assert claims["sub"] == "player-7"
        assert claims["type"] == token_type
        assert claims["exp"] > claims["iat"]

    def test_type_is_checked_both_ways(self) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            decode_token(create_access_token("p"), expected_type="refresh")
        with pytest.raises(InvalidCredentialsError):
            decode_token(create_refresh_token("p"), expected_type="access")

    def test_expired_access_token(self) -> None:
        with patch("src.ft_gateway.auth.jwt_handler._ACCESS_EXPIRE", timedelta(seconds=-1)):
            token = create_access_token("p")
        with pytest.raises(InvalidCredentialsError):
            decode_token(token, expected_type="access")

    def test_foreign_signature_rejected(self) -> None:
        forged = jwt.encode({"sub": "p", "type": "access"}, "other-secret", algorithm="HS256")
        with pytest.raises(InvalidCredentialsError):
            decode_token(forged, expected_type="access")


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("Headshot99")
        assert hashed.startswith("$2b$10$")
        assert verify_password("Headshot99", hashed)
        assert not verify_password("headshot99", hashed)

    def test_salted(self) -> None:
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash_is_a_mismatch(self) -> None:
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestDependencies:
    async def test_invalid_token_is_401(self) -> None:
        with pytest.raises(HTTPException) as exc:
            await dependencies.get_current_user(token="junk", db=AsyncMock())
        assert exc.value.status_code == 401

    async def test_unknown_user_is_401(self) -> None:
        db = AsyncMock()
        db.get = AsyncMock(return_value=None)
        token = create_access_token(str(uuid.uuid4()))
        with pytest.raises(HTTPException):
            await dependencies.get_current_user(token=token, db=db)

    async def test_current_user_loaded(self) -> None:
        user = _user()
        db = AsyncMock()
        db.get = AsyncMock(return_value=user)
        assert await dependencies.get_current_user(
            token=create_access_token(str(user.id)), db=db
        ) is user

    async def test_banned_user_blocked(self) -> None:
        with pytest.raises(UserBannedError):
            await dependencies.get_active_user(current_user=_user("banned"), db=AsyncMock())

    async def test_expired_temp_ban_lifted(self) -> None:
        user = _user("temp_banned", utc_now() - timedelta(minutes=1))
        db = AsyncMock()
        lift = AsyncMock()
        with patch.object(dependencies._users, "lift_expired_ban", lift):
            result = await dependencies.get_active_user(current_user=user, db=db)
        assert result.ban_status == "active"
        lift.assert_awaited_once_with(db, str(user.id))
        db.commit.assert_awaited_once()

    async def test_require_admin(self) -> None:
        with pytest.raises(AdminRequiredError):
            await dependencies.require_admin(current_user=_user())
        admin = _user(is_admin=True)
        assert await dependencies.require_admin(current_user=admin) is admin


class TestUserServiceLogin:
    async def test_banned_user_may_still_log_in(self) -> None:
        user = _user("banned")
        result = MagicMock()
        result.scalar_one_or_none.return_value = user
        db = AsyncMock()
        db.execute = AsyncMock(return_value=result)
        with patch("src.ft_gateway.user.service.verify_password", return_value=True):
            returned, access, refresh = await UserService().login("alice", "pw", db)
        assert returned is user
        assert access != refresh


class TestUserInfo:
    def test_active_player(self) -> None:
        info = UserInfo.from_model(_user())
        assert info.ban_status == "active"
        assert info.can_compete
        assert info.ban_reason is None

    def test_temporary_ban_shows_reason_and_expiry(self) -> None:
        until = utc_now() + timedelta(days=2)
        user = _user("temp_banned", until)
        user.ban_reason = "toxic chat"
        info = UserInfo.from_model(user)
        assert info.ban_status == "temp_banned"
        assert info.ban_reason == "toxic chat"
        assert info.ban_expiry == until.isoformat()
        assert not info.can_compete

    def test_expired_ban_reads_as_active(self) -> None:
        user = _user("temp_banned", utc_now() - timedelta(minutes=5))
        user.ban_reason = "toxic chat"
        info = UserInfo.from_model(user)
        assert info.ban_status == "active"
        assert info.ban_reason is None
        assert info.ban_expiry is None
        assert info.can_compete

    def test_permanent_ban_has_no_expiry(self) -> None:
        user = _user("banned")
        user.ban_reason = "cheating"
        info = UserInfo.from_model(user)
        assert info.ban_status == "banned"
        assert info.ban_expiry is None
        assert info.ban_reason == "cheating"
