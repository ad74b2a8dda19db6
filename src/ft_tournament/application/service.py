"""TournamentApplicationService: listing, detail, admin create and status.

Reads run without an explicit transaction; writes commit or roll back here.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.enums import GameType, TournamentStatus
from src.ft_common.errors import InvalidInputError, TournamentNotFoundError
from src.ft_common.pagination import cursor_decode, cursor_encode
from src.ft_tournament.application.schemas import (
    TournamentCreateRequest,
    TournamentItem,
    TournamentListResponse,
)
from src.ft_tournament.domain.models import NewTournament
from src.ft_tournament.domain.repository import TournamentRepositoryProtocol
from src.ft_tournament.infrastructure.persistence import TournamentRepository

logger = logging.getLogger(__name__)


def _enum_value(enum_cls, value: str | None, what: str) -> str | None:
    if value is None:
        return None
    try:
        return enum_cls(value).value
    except ValueError:
        raise InvalidInputError(f"Unknown {what}: {value!r}") from None


class TournamentApplicationService:
    def __init__(self, repo: TournamentRepositoryProtocol | None = None) -> None:
        self._repo: TournamentRepositoryProtocol = repo or TournamentRepository()

    async def list_tournaments(
        self,
        db: AsyncSession,
        status: str | None,
        game_type: str | None,
        cursor: str | None,
        limit: int,
    ) -> TournamentListResponse:
        status = _enum_value(TournamentStatus, status, "tournament status")
        game_type = _enum_value(GameType, game_type, "game type")
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without COUNT(*)
        tournaments = await self._repo.list_tournaments(
            db, status, game_type, cursor_id, limit + 1
        )
        has_more = len(tournaments) > limit
        page = tournaments[:limit]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TournamentListResponse(
            items=[TournamentItem.from_domain(t) for t in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def get_tournament(self, db: AsyncSession, tournament_id: int) -> TournamentItem:
        tournament = await self._repo.get_by_id(db, tournament_id)
        if tournament is None:
            raise TournamentNotFoundError(tournament_id)
        return TournamentItem.from_domain(tournament)

    async def create_tournament(
        self, db: AsyncSession, body: TournamentCreateRequest
    ) -> TournamentItem:
        data = NewTournament(
            name=body.name.strip(),
            description=body.description,
            game_type=body.game_type.value,
            team_mode=body.team_mode.value,
            match_type=body.match_type,
            entry_fee=body.entry_fee_cents,
            prize_pool=body.prize_pool_cents,
            max_participants=body.max_participants,
            start_date=body.start_date,
            end_date=body.end_date,
        )
        try:
            tournament = await self._repo.create(db, data)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Tournament %d created: %s (%s)", tournament.id, tournament.name, tournament.team_mode)
        return TournamentItem.from_domain(tournament)

    async def update_status(
        self, db: AsyncSession, tournament_id: int, status: TournamentStatus
    ) -> TournamentItem:
        try:
            tournament = await self._repo.update_status(
                db, tournament_id, TournamentStatus(status).value
            )
            if tournament is None:
                raise TournamentNotFoundError(tournament_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Tournament %d status -> %s", tournament_id, tournament.status)
        return TournamentItem.from_domain(tournament)
