"""RegistrationRepository: raw-SQL implementation of RegistrationRepositoryProtocol.

The UNIQUE (user_id, tournament_id) constraint backs the coordinator's
pre-check; a violation surfaces as AlreadyRegisteredError. After that
error the transaction is aborted and the caller must roll back.
"""

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import is_unique_violation
from src.ft_common.errors import AlreadyRegisteredError, InternalError
from src.ft_registration.domain.models import (
    NewTeam,
    Participant,
    Registration,
    TeamRegistration,
)

UNIQUE_REGISTRATION = "uq_registrations_user_tournament"

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_EXISTS_SQL = text("""
    SELECT 1
    FROM tournament_registrations
    WHERE user_id = :user_id AND tournament_id = :tournament_id
""")

_FIND_REGISTERED_SQL = text("""
    SELECT user_id
    FROM tournament_registrations
    WHERE tournament_id = :tournament_id
      AND user_id = ANY(CAST(:user_ids AS UUID[]))
""")

# unnest WITH ORDINALITY keeps member order, so ids come back leader first
_INSERT_REGISTRATIONS_SQL = text("""
    INSERT INTO tournament_registrations
        (user_id, tournament_id, registration_type, team_leader_id)
    SELECT m.user_id, :tournament_id, :registration_type,
           CAST(:team_leader_id AS UUID)
    FROM unnest(CAST(:user_ids AS UUID[])) WITH ORDINALITY AS m(user_id, ord)
    ORDER BY m.ord
    RETURNING id, user_id, tournament_id, registration_type,
              team_leader_id, registered_at
""")

_INSERT_TEAM_SQL = text("""
    INSERT INTO team_registrations
        (tournament_id, team_leader_id, team_name, team_members,
         team_size, entry_fee_paid)
    VALUES
        (:tournament_id, :team_leader_id, :team_name,
         CAST(:team_members AS UUID[]), :team_size, :entry_fee_paid)
    RETURNING id, tournament_id, team_leader_id, team_name, team_members,
              team_size, entry_fee_paid, created_at
""")

_LIST_PARTICIPANTS_SQL = text("""
    SELECT r.user_id, u.username, r.registration_type,
           r.team_leader_id, r.registered_at
    FROM tournament_registrations r
    JOIN users u ON u.id = r.user_id
    WHERE r.tournament_id = :tournament_id
    ORDER BY r.registered_at, r.id
""")

_LIST_TEAMS_SQL = text("""
    SELECT id, tournament_id, team_leader_id, team_name, team_members,
           team_size, entry_fee_paid, created_at
    FROM team_registrations
    WHERE tournament_id = :tournament_id
    ORDER BY created_at, id
""")


def _row_to_registration(row: object) -> Registration:
    leader = row.team_leader_id  # type: ignore[attr-defined]
    return Registration(
        id=row.id,  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        tournament_id=row.tournament_id,  # type: ignore[attr-defined]
        registration_type=row.registration_type,  # type: ignore[attr-defined]
        team_leader_id=str(leader) if leader else None,
        registered_at=row.registered_at,  # type: ignore[attr-defined]
    )


def _row_to_team(row: object) -> TeamRegistration:
    return TeamRegistration(
        id=row.id,  # type: ignore[attr-defined]
        tournament_id=row.tournament_id,  # type: ignore[attr-defined]
        team_leader_id=str(row.team_leader_id),  # type: ignore[attr-defined]
        team_name=row.team_name,  # type: ignore[attr-defined]
        team_members=[str(m) for m in row.team_members],  # type: ignore[attr-defined]
        team_size=row.team_size,  # type: ignore[attr-defined]
        entry_fee_paid=row.entry_fee_paid,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class RegistrationRepository:
    async def exists(self, db: AsyncSession, user_id: str, tournament_id: int) -> bool:
        result = await db.execute(
            _EXISTS_SQL, {"user_id": user_id, "tournament_id": tournament_id}
        )
        return result.first() is not None

    async def find_registered(
        self, db: AsyncSession, tournament_id: int, user_ids: list[str]
    ) -> list[str]:
        """Subset of `user_ids` already registered for the tournament."""
        if not user_ids:
            return []
        result = await db.execute(
            _FIND_REGISTERED_SQL,
            {"tournament_id": tournament_id, "user_ids": list(user_ids)},
        )
        return [str(row.user_id) for row in result.fetchall()]

    async def insert_registrations(
        self,
        db: AsyncSession,
        tournament_id: int,
        registration_type: str,
        user_ids: list[str],
        team_leader_id: str | None,
    ) -> list[Registration]:
        try:
            result = await db.execute(
                _INSERT_REGISTRATIONS_SQL,
                {
                    "tournament_id": tournament_id,
                    "registration_type": registration_type,
                    "user_ids": list(user_ids),
                    "team_leader_id": team_leader_id,
                },
            )
        except IntegrityError as exc:
            if is_unique_violation(exc, UNIQUE_REGISTRATION):
                raise AlreadyRegisteredError() from exc
            raise
        rows = result.fetchall()
        if len(rows) != len(user_ids):
            raise InternalError("Registration insert returned an unexpected row count")
        return [_row_to_registration(row) for row in rows]

    async def insert_team(self, db: AsyncSession, team: NewTeam) -> TeamRegistration:
        result = await db.execute(
            _INSERT_TEAM_SQL,
            {
                "tournament_id": team.tournament_id,
                "team_leader_id": team.team_leader_id,
                "team_name": team.team_name,
                "team_members": list(team.team_members),
                "team_size": team.team_size,
                "entry_fee_paid": team.entry_fee_paid,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Team insert returned no rows")
        return _row_to_team(row)

    async def list_participants(
        self, db: AsyncSession, tournament_id: int
    ) -> list[Participant]:
        result = await db.execute(_LIST_PARTICIPANTS_SQL, {"tournament_id": tournament_id})
        return [
            Participant(
                user_id=str(row.user_id),
                username=row.username,
                registration_type=row.registration_type,
                team_leader_id=str(row.team_leader_id) if row.team_leader_id else None,
                registered_at=row.registered_at,
            )
            for row in result.fetchall()
        ]

    async def list_teams(
        self, db: AsyncSession, tournament_id: int
    ) -> list[TeamRegistration]:
        result = await db.execute(_LIST_TEAMS_SQL, {"tournament_id": tournament_id})
        return [_row_to_team(row) for row in result.fetchall()]
