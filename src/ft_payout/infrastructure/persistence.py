"""PayoutRepository: raw-SQL implementation of PayoutRepositoryProtocol.

`mark_processed` only updates rows still pending, so a lost race turns
into zero rows instead of a second resolution.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.errors import InternalError
from src.ft_payout.domain.models import PayoutRequest

_COLUMNS = """id, user_id, amount, status, requested_at,
           processed_at, processed_by, admin_notes"""

_INSERT_SQL = text(f"""
    INSERT INTO payout_requests (user_id, amount, status)
    VALUES (:user_id, :amount, 'pending')
    RETURNING {_COLUMNS}
""")

_LOCK_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM payout_requests
    WHERE id = :payout_id
    FOR UPDATE
""")

_MARK_PROCESSED_SQL = text(f"""
    UPDATE payout_requests
    SET status = :status,
        processed_at = NOW(),
        processed_by = :admin_id,
        admin_notes = :notes
    WHERE id = :payout_id AND status = 'pending'
    RETURNING {_COLUMNS}
""")

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM payout_requests
    WHERE (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
      AND (CAST(:user_id AS UUID) IS NULL OR user_id = CAST(:user_id AS UUID))
    ORDER BY requested_at DESC, id DESC
    LIMIT :limit
""")


def _row_to_payout(row: object) -> PayoutRequest:
    processed_by = row.processed_by  # type: ignore[attr-defined]
    return PayoutRequest(
        id=row.id,  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        requested_at=row.requested_at,  # type: ignore[attr-defined]
        processed_at=row.processed_at,  # type: ignore[attr-defined]
        processed_by=str(processed_by) if processed_by else None,
        admin_notes=row.admin_notes,  # type: ignore[attr-defined]
    )


class PayoutRepository:
    async def insert(self, db: AsyncSession, user_id: str, amount: int) -> PayoutRequest:
        result = await db.execute(_INSERT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise InternalError("Payout insert returned no rows")
        return _row_to_payout(row)

    async def lock_by_id(self, db: AsyncSession, payout_id: int) -> PayoutRequest | None:
        result = await db.execute(_LOCK_SQL, {"payout_id": payout_id})
        row = result.fetchone()
        return _row_to_payout(row) if row else None

    async def mark_processed(
        self,
        db: AsyncSession,
        payout_id: int,
        status: str,
        admin_id: str,
        notes: str | None,
    ) -> PayoutRequest | None:
        result = await db.execute(
            _MARK_PROCESSED_SQL,
            {"payout_id": payout_id, "status": status, "admin_id": admin_id, "notes": notes},
        )
        row = result.fetchone()
        return _row_to_payout(row) if row else None

    async def list_requests(
        self, db: AsyncSession, status: str | None, user_id: str | None, limit: int
    ) -> list[PayoutRequest]:
        result = await db.execute(
            _LIST_SQL, {"status": status, "user_id": user_id, "limit": limit}
        )
        return [_row_to_payout(row) for row in result.fetchall()]
