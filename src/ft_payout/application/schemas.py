"""Pydantic schemas for ft_payout API."""

from pydantic import BaseModel, Field

from src.ft_common.enums import PayoutAction
from src.ft_common.money import cents_to_display
from src.ft_payout.domain.models import PayoutRequest


class WithdrawalRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to withdraw from winnings, in cents")


class ResolvePayoutRequest(BaseModel):
    action: PayoutAction
    admin_notes: str | None = Field(None, max_length=1000)


class PayoutOut(BaseModel):
    id: int
    user_id: str
    amount_cents: int
    amount_display: str
    status: str
    requested_at: str | None
    processed_at: str | None
    processed_by: str | None
    admin_notes: str | None

    @classmethod
    def from_domain(cls, p: PayoutRequest) -> "PayoutOut":
        return cls(
            id=p.id,
            user_id=p.user_id,
            amount_cents=p.amount,
            amount_display=cents_to_display(p.amount),
            status=p.status,
            requested_at=p.requested_at.isoformat() if p.requested_at else None,
            processed_at=p.processed_at.isoformat() if p.processed_at else None,
            processed_by=p.processed_by,
            admin_notes=p.admin_notes,
        )


class WithdrawalResponse(BaseModel):
    payout: PayoutOut
    winnings_balance_cents: int
    winnings_balance_display: str
