"""Pydantic request/response schemas for ft_gateway.

All responses are wrapped in ApiResponse[T] at the router layer. Player
views report the effective ban state: a temporary ban whose expiry has
passed shows as active with no reason or expiry, even before the row
itself is cleaned up.
"""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.ft_common.enums import BanStatus
from src.ft_gateway.user.bans import effective_ban_status
from src.ft_gateway.user.db_models import UserModel

_PASSWORD_RULES = (
    (r"[A-Z]", "Password must contain at least one uppercase letter"),
    (r"[a-z]", "Password must contain at least one lowercase letter"),
    (r"\d", "Password must contain at least one digit"),
)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        for pattern, error in _PASSWORD_RULES:
            if not re.search(pattern, v):
                raise ValueError(error)
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    user_id: str
    username: str
    email: str
    is_admin: bool = False
    ban_status: BanStatus = BanStatus.ACTIVE
    ban_reason: str | None = None
    ban_expiry: str | None = None  # ISO8601, temporary bans only
    can_compete: bool = True

    @classmethod
    def from_model(cls, user: UserModel, now: datetime | None = None) -> "UserInfo":
        status = effective_ban_status(user.ban_status, user.ban_expiry, now)
        banned = status is not BanStatus.ACTIVE
        expiry = user.ban_expiry if status is BanStatus.TEMP_BANNED else None
        return cls(
            user_id=str(user.id),
            username=user.username,
            email=user.email,
            is_admin=user.is_admin,
            ban_status=status,
            ban_reason=user.ban_reason if banned else None,
            ban_expiry=expiry.isoformat() if expiry else None,
            can_compete=not banned,
        )


class RegisterResponse(BaseModel):
    user_id: str
    username: str
    email: str
    created_at: str
    deposit_balance_cents: int = 0
    winnings_balance_cents: int = 0


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int
