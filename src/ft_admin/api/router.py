"""Admin REST API. Every endpoint requires an admin account."""

from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_admin.application.service import AdminService
from src.ft_common.database import get_db_session
from src.ft_common.enums import WalletOperation
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import require_admin
from src.ft_gateway.user.db_models import UserModel
from src.ft_payout.application.schemas import ResolvePayoutRequest
from src.ft_payout.application.service import PayoutService
from src.ft_registration.application.service import RegistrationService
from src.ft_tournament.application.schemas import (
    StatusUpdateRequest,
    TournamentCreateRequest,
)
from src.ft_tournament.application.service import TournamentApplicationService
from src.ft_wallet.domain.maintenance import WalletMaintenance

router = APIRouter(prefix="/admin", tags=["admin"])

_service = AdminService()
_tournaments = TournamentApplicationService()
_registrations = RegistrationService()
_payouts = PayoutService()
_maintenance = WalletMaintenance()

Admin = Annotated[UserModel, Depends(require_admin)]
Db = Annotated[AsyncSession, Depends(get_db_session)]


class BanRequest(BaseModel):
    ban_type: Literal["temporary", "permanent"]
    reason: str = Field(..., min_length=1, max_length=500)
    expires_at: datetime | None = None


class AwardWinningsRequest(BaseModel):
    amount_cents: int = Field(..., gt=0)


class MaintenanceModeRequest(BaseModel):
    enabled: bool
    message: str | None = Field(None, max_length=500)


class OperationToggleRequest(BaseModel):
    disabled: bool
    message: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users")
async def list_users(
    request: Request, admin: Admin, db: Db,
    limit: int = Query(500, ge=1, le=1000),
) -> ApiResponse:
    return respond(request, await _service.list_users(db, limit))


@router.post("/users/{user_id}/ban")
async def ban_user(
    user_id: str, body: BanRequest, request: Request, admin: Admin, db: Db
) -> ApiResponse:
    result = await _service.ban_user(
        db, str(admin.id), user_id, body.ban_type, body.reason, body.expires_at
    )
    return respond(request, result, "User banned")


@router.post("/users/{user_id}/unban")
async def unban_user(user_id: str, request: Request, admin: Admin, db: Db) -> ApiResponse:
    result = await _service.unban_user(db, str(admin.id), user_id)
    return respond(request, result, "User unbanned")


@router.post("/users/{user_id}/winnings")
async def award_winnings(
    user_id: str, body: AwardWinningsRequest, request: Request, admin: Admin, db: Db
) -> ApiResponse:
    result = await _service.award_winnings(db, str(admin.id), user_id, body.amount_cents)
    return respond(request, result, "Winnings added")


@router.get("/transactions")
async def list_admin_transactions(
    request: Request, admin: Admin, db: Db,
    cursor: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_admin_transactions(db, cursor, limit)
    return respond(request, result.model_dump())


# ---------------------------------------------------------------------------
# Tournaments
# ---------------------------------------------------------------------------


@router.post("/tournaments", status_code=status.HTTP_201_CREATED)
async def create_tournament(
    body: TournamentCreateRequest, request: Request, admin: Admin, db: Db
) -> ApiResponse:
    result = await _tournaments.create_tournament(db, body)
    return respond(request, result.model_dump(), "Tournament created")


@router.post("/tournaments/{tournament_id}/status")
async def update_tournament_status(
    tournament_id: int, body: StatusUpdateRequest, request: Request, admin: Admin, db: Db
) -> ApiResponse:
    result = await _tournaments.update_status(db, tournament_id, body.status)
    return respond(request, result.model_dump(), "Tournament status updated")


@router.get("/tournaments/{tournament_id}/participants")
async def list_participants(
    tournament_id: int, request: Request, admin: Admin, db: Db
) -> ApiResponse:
    result = await _registrations.list_participants(db, tournament_id)
    return respond(request, [p.model_dump() for p in result])


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------


@router.get("/payouts")
async def list_payouts(
    request: Request, admin: Admin, db: Db,
    status: str | None = Query(None, description="pending | approved | rejected"),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _payouts.list_requests(db, status, limit)
    return respond(request, [p.model_dump() for p in result])


@router.post("/payouts/{payout_id}/resolve")
async def resolve_payout(
    payout_id: int, body: ResolvePayoutRequest, request: Request, admin: Admin, db: Db
) -> ApiResponse:
    result = await _payouts.resolve(
        db, payout_id, body.action, str(admin.id), body.admin_notes
    )
    return respond(request, result.model_dump(), f"Payout {result.status}")


# ---------------------------------------------------------------------------
# Wallet maintenance
# ---------------------------------------------------------------------------


@router.get("/wallet-maintenance")
async def get_maintenance(request: Request, admin: Admin) -> ApiResponse:
    result = await _maintenance.get_status()
    return respond(request, result.to_dict())


@router.post("/wallet-maintenance")
async def set_maintenance_mode(
    body: MaintenanceModeRequest, request: Request, admin: Admin
) -> ApiResponse:
    if body.enabled:
        result = await _maintenance.enable(body.message, admin.username)
    else:
        result = await _maintenance.disable(admin.username)
    return respond(request, result.to_dict())


@router.post("/wallet-maintenance/{operation}")
async def toggle_wallet_operation(
    operation: WalletOperation, body: OperationToggleRequest, request: Request, admin: Admin
) -> ApiResponse:
    result = await _maintenance.toggle_operation(
        operation, body.disabled, body.message, admin.username
    )
    return respond(request, result.to_dict())
