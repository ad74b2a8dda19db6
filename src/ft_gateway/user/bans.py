"""Ban rules: pure functions over (ban_status, ban_expiry)."""

from datetime import datetime

from src.ft_common.datetime_utils import has_passed
from src.ft_common.enums import BanStatus


def effective_ban_status(
    status: str, expiry: datetime | None, now: datetime | None = None
) -> BanStatus:
    """Resolve the stored ban state against the clock.

    A temporary ban whose expiry has passed counts as active even before
    the row has been cleaned up.
    """
    current = BanStatus(status)
    if current is BanStatus.TEMP_BANNED and has_passed(expiry, now):
        return BanStatus.ACTIVE
    return current


def is_banned(status: str, expiry: datetime | None, now: datetime | None = None) -> bool:
    return effective_ban_status(status, expiry, now) is not BanStatus.ACTIVE


def ban_expired(status: str, expiry: datetime | None, now: datetime | None = None) -> bool:
    """True when the stored row says temp_banned but the ban is over."""
    return status == BanStatus.TEMP_BANNED and has_passed(expiry, now)
