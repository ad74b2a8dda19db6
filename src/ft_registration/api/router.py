"""ft_registration REST endpoints.

POST /registrations                       solo / duo / squad entry (ban gate)
POST /registrations/validate-usernames    roster pre-check
GET  /tournaments/{tournament_id}/teams   teams with member usernames
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import get_db_session
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import get_active_user, get_current_user
from src.ft_gateway.user.db_models import UserModel
from src.ft_registration.application.schemas import (
    RegistrationRequest,
    ValidateUsernamesRequest,
)
from src.ft_registration.application.service import RegistrationService

router = APIRouter(tags=["registrations"])

_service = RegistrationService()


@router.post("/registrations")
async def register(
    body: RegistrationRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_active_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.register(
        db, str(current_user.id), current_user.username, body
    )
    return respond(request, result.model_dump(), result.message)


@router.post("/registrations/validate-usernames")
async def validate_usernames(
    body: ValidateUsernamesRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.validate_usernames(db, body.usernames)
    return respond(request, result.model_dump())


@router.get("/tournaments/{tournament_id}/teams")
async def list_teams(
    tournament_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    teams = await _service.list_teams(db, tournament_id)
    return respond(request, [t.model_dump() for t in teams])
