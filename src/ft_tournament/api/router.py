"""ft_tournament REST endpoints.

GET /tournaments                    list with cursor pagination
GET /tournaments/{tournament_id}    detail

Browsing is open to anonymous visitors; admin writes live in ft_admin.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import get_db_session
from src.ft_common.response import ApiResponse, respond
from src.ft_tournament.application.service import TournamentApplicationService

router = APIRouter(prefix="/tournaments", tags=["tournaments"])

_service = TournamentApplicationService()


@router.get("")
async def list_tournaments(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(None, description="upcoming | active | completed"),
    game_type: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_tournaments(db, status, game_type, cursor, limit)
    return respond(request, result.model_dump())


@router.get("/{tournament_id}")
async def get_tournament(
    tournament_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_tournament(db, tournament_id)
    return respond(request, result.model_dump())
