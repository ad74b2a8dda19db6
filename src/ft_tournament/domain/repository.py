"""Repository Protocol for tournaments.

`increment_participants` is the only writer of current_participants and
returns None when the increment would exceed max_participants.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_tournament.domain.models import NewTournament, Tournament


class TournamentRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, tournament_id: int) -> Tournament | None: ...

    async def lock_by_id(self, db: AsyncSession, tournament_id: int) -> Tournament | None: ...

    async def increment_participants(
        self, db: AsyncSession, tournament_id: int, seats: int
    ) -> Tournament | None: ...

    async def update_status(
        self, db: AsyncSession, tournament_id: int, status: str
    ) -> Tournament | None: ...

    async def create(self, db: AsyncSession, data: NewTournament) -> Tournament: ...

    async def list_tournaments(
        self,
        db: AsyncSession,
        status: str | None,
        game_type: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Tournament]: ...
