"""TournamentRepository: concrete implementation of TournamentRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.errors import InternalError
from src.ft_tournament.domain.models import NewTournament, Tournament

_COLUMNS = """id, name, description, game_type, team_mode, match_type,
           entry_fee, prize_pool, max_participants, current_participants,
           status, start_date, end_date, created_at, updated_at"""

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM tournaments
    WHERE id = :tournament_id
""")

_LOCK_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM tournaments
    WHERE id = :tournament_id
    FOR UPDATE
""")

_INCREMENT_SQL = text(f"""
    UPDATE tournaments
    SET current_participants = current_participants + :seats,
        updated_at = NOW()
    WHERE id = :tournament_id
      AND current_participants + :seats <= max_participants
    RETURNING {_COLUMNS}
""")

_UPDATE_STATUS_SQL = text(f"""
    UPDATE tournaments
    SET status = :status,
        updated_at = NOW()
    WHERE id = :tournament_id
    RETURNING {_COLUMNS}
""")

_INSERT_SQL = text(f"""
    INSERT INTO tournaments
        (name, description, game_type, team_mode, match_type,
         entry_fee, prize_pool, max_participants, start_date, end_date)
    VALUES
        (:name, :description, :game_type, :team_mode, :match_type,
         :entry_fee, :prize_pool, :max_participants, :start_date, :end_date)
    RETURNING {_COLUMNS}
""")

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM tournaments
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (CAST(:game_type AS TEXT) IS NULL OR game_type = CAST(:game_type AS TEXT))
        AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_tournament(row: object) -> Tournament:
    return Tournament(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        game_type=row.game_type,  # type: ignore[attr-defined]
        team_mode=row.team_mode,  # type: ignore[attr-defined]
        match_type=row.match_type,  # type: ignore[attr-defined]
        entry_fee=row.entry_fee,  # type: ignore[attr-defined]
        prize_pool=row.prize_pool,  # type: ignore[attr-defined]
        max_participants=row.max_participants,  # type: ignore[attr-defined]
        current_participants=row.current_participants,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        start_date=row.start_date,  # type: ignore[attr-defined]
        end_date=row.end_date,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class TournamentRepository:
    async def get_by_id(self, db: AsyncSession, tournament_id: int) -> Tournament | None:
        result = await db.execute(_GET_SQL, {"tournament_id": tournament_id})
        row = result.fetchone()
        return _row_to_tournament(row) if row else None

    async def lock_by_id(self, db: AsyncSession, tournament_id: int) -> Tournament | None:
        """SELECT ... FOR UPDATE; the row stays locked until the caller commits."""
        result = await db.execute(_LOCK_SQL, {"tournament_id": tournament_id})
        row = result.fetchone()
        return _row_to_tournament(row) if row else None

    async def increment_participants(
        self, db: AsyncSession, tournament_id: int, seats: int
    ) -> Tournament | None:
        result = await db.execute(
            _INCREMENT_SQL, {"tournament_id": tournament_id, "seats": seats}
        )
        row = result.fetchone()
        return _row_to_tournament(row) if row else None

    async def update_status(
        self, db: AsyncSession, tournament_id: int, status: str
    ) -> Tournament | None:
        result = await db.execute(
            _UPDATE_STATUS_SQL, {"tournament_id": tournament_id, "status": status}
        )
        row = result.fetchone()
        return _row_to_tournament(row) if row else None

    async def create(self, db: AsyncSession, data: NewTournament) -> Tournament:
        result = await db.execute(
            _INSERT_SQL,
            {
                "name": data.name,
                "description": data.description,
                "game_type": data.game_type,
                "team_mode": data.team_mode,
                "match_type": data.match_type,
                "entry_fee": data.entry_fee,
                "prize_pool": data.prize_pool,
                "max_participants": data.max_participants,
                "start_date": data.start_date,
                "end_date": data.end_date,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Tournament insert returned no rows")
        return _row_to_tournament(row)

    async def list_tournaments(
        self,
        db: AsyncSession,
        status: str | None,
        game_type: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Tournament]:
        result = await db.execute(
            _LIST_SQL,
            {
                "status": status,
                "game_type": game_type,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_tournament(row) for row in result.fetchall()]
