"""Repository Protocol for registrations and team rows.

`insert_registrations` raises AlreadyRegisteredError when the
(user_id, tournament_id) unique constraint fires.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_registration.domain.models import (
    NewTeam,
    Participant,
    Registration,
    TeamRegistration,
)


class RegistrationRepositoryProtocol(Protocol):
    async def exists(self, db: AsyncSession, user_id: str, tournament_id: int) -> bool: ...

    async def find_registered(
        self, db: AsyncSession, tournament_id: int, user_ids: list[str]
    ) -> list[str]: ...

    async def insert_registrations(
        self,
        db: AsyncSession,
        tournament_id: int,
        registration_type: str,
        user_ids: list[str],
        team_leader_id: str | None,
    ) -> list[Registration]: ...

    async def insert_team(self, db: AsyncSession, team: NewTeam) -> TeamRegistration: ...

    async def list_participants(
        self, db: AsyncSession, tournament_id: int
    ) -> list[Participant]: ...

    async def list_teams(
        self, db: AsyncSession, tournament_id: int
    ) -> list[TeamRegistration]: ...
