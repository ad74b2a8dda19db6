"""007: create wallet_transactions table

Revision ID: 007
Revises: 006
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE wallet_transactions (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             UUID            NOT NULL REFERENCES users (id),
            transaction_type    VARCHAR(10)     NOT NULL,
            amount              BIGINT          NOT NULL,
            balance_type        VARCHAR(10)     NOT NULL,
            balance_after       BIGINT          NOT NULL,
            reference_type      VARCHAR(30),
            reference_id        VARCHAR(64),
            description         VARCHAR(500)    NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wallet_txn_type   CHECK (transaction_type IN ('credit', 'debit')),
            CONSTRAINT ck_wallet_txn_balance
                CHECK (balance_type IN ('deposit', 'winnings', 'combined')),
            CONSTRAINT ck_wallet_txn_amount_gte_0 CHECK (amount >= 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_wallet_txn_user ON wallet_transactions (user_id, id DESC);"
    )
    op.execute(
        "CREATE INDEX idx_wallet_txn_reference "
        "ON wallet_transactions (reference_type, reference_id);"
    )
    op.execute("COMMENT ON TABLE wallet_transactions IS 'Append-only wallet audit log';")
    op.execute("""
        CREATE TRIGGER trg_wallet_txn_append_only
            BEFORE UPDATE OR DELETE ON wallet_transactions
            FOR EACH ROW EXECUTE FUNCTION fn_reject_ledger_change();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wallet_transactions CASCADE;")
