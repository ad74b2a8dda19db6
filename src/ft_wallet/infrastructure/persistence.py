"""WalletRepository: concrete implementation of WalletRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows means a business constraint was violated (missing wallet
or insufficient funds); the ledger decides which.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.enums import BalanceType
from src.ft_common.errors import InternalError
from src.ft_wallet.domain.models import (
    AdminLedgerEntry,
    CombinedDebit,
    Wallet,
    WalletTransaction,
)

_WALLET_COLUMNS = (
    "user_id, deposit_balance, winnings_balance, version, created_at, updated_at"
)

# ---------------------------------------------------------------------------
# SQL: wallets
# ---------------------------------------------------------------------------

_GET_WALLET_SQL = text(f"""
    SELECT {_WALLET_COLUMNS}
    FROM wallets
    WHERE user_id = :user_id
""")

_LOCK_WALLET_SQL = text(f"""
    SELECT {_WALLET_COLUMNS}
    FROM wallets
    WHERE user_id = :user_id
    FOR UPDATE
""")

# Column names cannot be bound, so each balance gets its own statement
_CREDIT_SQL = {
    BalanceType.DEPOSIT.value: text(f"""
        UPDATE wallets
        SET deposit_balance = deposit_balance + :amount,
            version = version + 1,
            updated_at = NOW()
        WHERE user_id = :user_id
        RETURNING {_WALLET_COLUMNS}
    """),
    BalanceType.WINNINGS.value: text(f"""
        UPDATE wallets
        SET winnings_balance = winnings_balance + :amount,
            version = version + 1,
            updated_at = NOW()
        WHERE user_id = :user_id
        RETURNING {_WALLET_COLUMNS}
    """),
}

_DEBIT_SQL = {
    BalanceType.DEPOSIT.value: text(f"""
        UPDATE wallets
        SET deposit_balance = deposit_balance - :amount,
            version = version + 1,
            updated_at = NOW()
        WHERE user_id = :user_id AND deposit_balance >= :amount
        RETURNING {_WALLET_COLUMNS}
    """),
    BalanceType.WINNINGS.value: text(f"""
        UPDATE wallets
        SET winnings_balance = winnings_balance - :amount,
            version = version + 1,
            updated_at = NOW()
        WHERE user_id = :user_id AND winnings_balance >= :amount
        RETURNING {_WALLET_COLUMNS}
    """),
}

_COMBINED_DEBIT_SQL = text(f"""
    UPDATE wallets
    SET deposit_balance  = deposit_balance  - :from_deposit,
        winnings_balance = winnings_balance - :from_winnings,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
      AND deposit_balance  >= :from_deposit
      AND winnings_balance >= :from_winnings
    RETURNING {_WALLET_COLUMNS}
""")

# ---------------------------------------------------------------------------
# SQL: wallet_transactions
# ---------------------------------------------------------------------------

_TXN_COLUMNS = (
    "id, user_id, transaction_type, amount, balance_type, balance_after, "
    "reference_type, reference_id, description, created_at"
)

_INSERT_TXN_SQL = text(f"""
    INSERT INTO wallet_transactions
        (user_id, transaction_type, amount, balance_type, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :transaction_type, :amount, :balance_type, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING {_TXN_COLUMNS}
""")

_LIST_TXN_SQL = text(f"""
    SELECT {_TXN_COLUMNS}
    FROM wallet_transactions
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:balance_type AS VARCHAR) IS NULL OR balance_type = CAST(:balance_type AS VARCHAR))
    ORDER BY id DESC
    LIMIT :limit
""")

_LIST_ADMIN_TXN_SQL = text("""
    SELECT t.id, t.user_id, t.transaction_type, t.amount, t.balance_type,
           t.balance_after, t.reference_type, t.reference_id, t.description,
           t.created_at, u.username
    FROM wallet_transactions t
    JOIN users u ON u.id = t.user_id
    WHERE t.reference_type = 'ADMIN'
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR t.id < CAST(:cursor_id AS BIGINT))
    ORDER BY t.id DESC
    LIMIT :limit
""")


def _row_to_wallet(row: object) -> Wallet:
    return Wallet(
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        deposit_balance=row.deposit_balance,  # type: ignore[attr-defined]
        winnings_balance=row.winnings_balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_txn(row: object) -> WalletTransaction:
    return WalletTransaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        transaction_type=row.transaction_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_type=row.balance_type,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class WalletRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None:
        result = await db.execute(_GET_WALLET_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def lock_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None:
        result = await db.execute(_LOCK_WALLET_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def add_to_balance(
        self, db: AsyncSession, user_id: str, balance_type: str, amount: int
    ) -> Wallet | None:
        result = await db.execute(
            _CREDIT_SQL[balance_type], {"user_id": user_id, "amount": amount}
        )
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def take_from_balance(
        self, db: AsyncSession, user_id: str, balance_type: str, amount: int
    ) -> Wallet | None:
        result = await db.execute(
            _DEBIT_SQL[balance_type], {"user_id": user_id, "amount": amount}
        )
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def apply_combined_debit(
        self, db: AsyncSession, user_id: str, split: CombinedDebit
    ) -> Wallet | None:
        result = await db.execute(
            _COMBINED_DEBIT_SQL,
            {
                "user_id": user_id,
                "from_deposit": split.from_deposit,
                "from_winnings": split.from_winnings,
            },
        )
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def append_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        transaction_type: str,
        amount: int,
        balance_type: str,
        balance_after: int,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> WalletTransaction:
        result = await db.execute(
            _INSERT_TXN_SQL,
            {
                "user_id": user_id,
                "transaction_type": transaction_type,
                "amount": amount,
                "balance_type": balance_type,
                "balance_after": balance_after,
                "reference_type": reference_type,
                "reference_id": reference_id,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_txn(row)

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        balance_type: str | None,
    ) -> list[WalletTransaction]:
        result = await db.execute(
            _LIST_TXN_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "limit": limit,
                "balance_type": balance_type,
            },
        )
        return [_row_to_txn(row) for row in result.fetchall()]

    async def list_admin_transactions(
        self, db: AsyncSession, cursor_id: int | None, limit: int
    ) -> list[AdminLedgerEntry]:
        result = await db.execute(
            _LIST_ADMIN_TXN_SQL, {"cursor_id": cursor_id, "limit": limit}
        )
        return [
            AdminLedgerEntry(entry=_row_to_txn(row), username=row.username)
            for row in result.fetchall()
        ]
