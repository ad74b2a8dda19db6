"""Wallet maintenance switchboard.

Operators can switch wallet money movement off globally or per operation.
State lives in a single Redis hash so every API worker sees the same
switches without a DB round trip. A missing hash means everything is on.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass

import redis.asyncio as aioredis

from src.ft_common.datetime_utils import utc_now
from src.ft_common.enums import WalletOperation
from src.ft_common.errors import InvalidInputError, WalletMaintenanceError
from src.ft_common.redis_client import get_redis

logger = logging.getLogger(__name__)

MAINTENANCE_KEY = "wallet:maintenance"

DEFAULT_MAINTENANCE_MESSAGE = (
    "Wallet services are temporarily unavailable for maintenance. "
    "Please try again later."
)
DEFAULT_DEPOSIT_MESSAGE = "Deposit services are temporarily disabled."
DEFAULT_WITHDRAWAL_MESSAGE = "Withdrawal services are temporarily disabled."


@dataclass
class MaintenanceStatus:
    maintenance_mode: bool = False
    maintenance_message: str = DEFAULT_MAINTENANCE_MESSAGE
    deposit_disabled: bool = False
    deposit_message: str = DEFAULT_DEPOSIT_MESSAGE
    withdrawal_disabled: bool = False
    withdrawal_message: str = DEFAULT_WITHDRAWAL_MESSAGE
    updated_by: str = "system"
    last_updated: str | None = None

    def blocked_message(self, operation: WalletOperation) -> str | None:
        """Message to show when `operation` is switched off, else None."""
        if self.maintenance_mode:
            return self.maintenance_message
        if operation == WalletOperation.DEPOSIT and self.deposit_disabled:
            return self.deposit_message
        if operation == WalletOperation.WITHDRAWAL and self.withdrawal_disabled:
            return self.withdrawal_message
        return None

    def to_dict(self) -> dict:
        return asdict(self)


_FLAGS = ("maintenance_mode", "deposit_disabled", "withdrawal_disabled")


def _from_hash(raw: dict[str, str]) -> MaintenanceStatus:
    status = MaintenanceStatus()
    for name, value in raw.items():
        if name in _FLAGS:
            setattr(status, name, value == "1")
        elif hasattr(status, name) and value:
            setattr(status, name, value)
    return status


class WalletMaintenance:
    def __init__(
        self, redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis
    ) -> None:
        self._redis_factory = redis_factory

    async def get_status(self) -> MaintenanceStatus:
        client = await self._redis_factory()
        return _from_hash(await client.hgetall(MAINTENANCE_KEY))

    async def ensure_allowed(self, operation: WalletOperation) -> None:
        """Raise WalletMaintenanceError (503) if `operation` is switched off."""
        status = await self.get_status()
        message = status.blocked_message(operation)
        if message is not None:
            logger.info("Wallet %s blocked by maintenance switch", WalletOperation(operation).value)
            raise WalletMaintenanceError(message)

    async def enable(self, message: str | None, admin_id: str) -> MaintenanceStatus:
        fields = {"maintenance_mode": "1"}
        fields["maintenance_message"] = message or DEFAULT_MAINTENANCE_MESSAGE
        return await self._write(fields, admin_id)

    async def disable(self, admin_id: str) -> MaintenanceStatus:
        """Turn off global maintenance and re-enable both operations."""
        fields = {flag: "0" for flag in _FLAGS}
        return await self._write(fields, admin_id)

    async def toggle_operation(
        self,
        operation: WalletOperation,
        disabled: bool,
        message: str | None,
        admin_id: str,
    ) -> MaintenanceStatus:
        try:
            prefix = WalletOperation(operation).value
        except ValueError:
            raise InvalidInputError(f"Unknown wallet operation: {operation!r}") from None
        fields = {f"{prefix}_disabled": "1" if disabled else "0"}
        if message:
            fields[f"{prefix}_message"] = message
        return await self._write(fields, admin_id)

    async def _write(self, fields: dict[str, str], admin_id: str) -> MaintenanceStatus:
        fields["updated_by"] = admin_id
        fields["last_updated"] = utc_now().isoformat()
        client = await self._redis_factory()
        await client.hset(MAINTENANCE_KEY, mapping=fields)
        logger.warning("Wallet maintenance switches changed by %s: %s", admin_id, fields)
        return await self.get_status()
