"""Payout request model and its state machine.

    pending ──approve──▶ approved   (terminal, no balance change)
       │
       └────reject────▶ rejected   (terminal, winnings refunded)

Winnings leave the wallet when the request is created, so approval only
records that the money was paid out of band.
"""

from dataclasses import dataclass
from datetime import datetime

from src.ft_common.enums import PayoutAction, PayoutStatus
from src.ft_common.errors import AlreadyProcessedError

_TRANSITIONS = {
    PayoutAction.APPROVE: PayoutStatus.APPROVED,
    PayoutAction.REJECT: PayoutStatus.REJECTED,
}


@dataclass
class PayoutRequest:
    id: int
    user_id: str
    amount: int          # cents
    status: str
    requested_at: datetime | None = None
    processed_at: datetime | None = None
    processed_by: str | None = None
    admin_notes: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == PayoutStatus.PENDING.value


def next_status(payout: PayoutRequest, action: PayoutAction) -> PayoutStatus:
    """Target status for `action`; AlreadyProcessedError outside pending."""
    if not payout.is_pending:
        raise AlreadyProcessedError(payout.id, payout.status)
    return _TRANSITIONS[PayoutAction(action)]
