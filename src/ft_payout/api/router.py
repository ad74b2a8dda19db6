"""ft_payout REST endpoints for players.

POST /payouts   request a winnings withdrawal (ban gate)
GET  /payouts   my withdrawal requests

Admin review lives under /admin/payouts (ft_admin).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import get_db_session
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import get_active_user, get_current_user
from src.ft_gateway.user.db_models import UserModel
from src.ft_payout.application.schemas import WithdrawalRequest
from src.ft_payout.application.service import PayoutService

router = APIRouter(prefix="/payouts", tags=["payouts"])

_service = PayoutService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def request_withdrawal(
    body: WithdrawalRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_active_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.request_withdrawal(db, str(current_user.id), body.amount_cents)
    return respond(
        request,
        result.model_dump(),
        "Withdrawal request submitted successfully. Admin will process it soon.",
    )


@router.get("")
async def list_my_payouts(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_for_user(db, str(current_user.id), limit)
    return respond(request, [p.model_dump() for p in result])
