"""Unit tests for ban rules."""

from datetime import timedelta

from src.ft_common.datetime_utils import utc_now
from src.ft_common.enums import BanStatus
from src.ft_gateway.user.bans import ban_expired, effective_ban_status, is_banned
from src.ft_gateway.user.repository import UserSummary


def test_active_user_is_not_banned() -> None:
    assert not is_banned("active", None)


def test_permanent_ban_never_expires() -> None:
    past = utc_now() - timedelta(days=30)
    assert is_banned("banned", past)
    assert not ban_expired("banned", past)


def test_temporary_ban_in_future_blocks() -> None:
    assert is_banned("temp_banned", utc_now() + timedelta(hours=1))


def test_temporary_ban_in_past_is_lifted() -> None:
    past = utc_now() - timedelta(minutes=1)
    assert effective_ban_status("temp_banned", past) is BanStatus.ACTIVE
    assert ban_expired("temp_banned", past)


def test_naive_expiry_is_treated_as_utc() -> None:
    naive_past = (utc_now() - timedelta(hours=2)).replace(tzinfo=None)
    assert not is_banned("temp_banned", naive_past)


def test_user_summary_banned_property() -> None:
    user = UserSummary(id="u1", username="bob", email="b@x.io", ban_status="banned")
    assert user.banned
