"""008: create payout_requests table

Revision ID: 008
Revises: 007
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE payout_requests (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         UUID            NOT NULL REFERENCES users (id),
            amount          BIGINT          NOT NULL,
            status          VARCHAR(10)     NOT NULL DEFAULT 'pending',
            requested_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            processed_at    TIMESTAMPTZ,
            processed_by    UUID            REFERENCES users (id),
            admin_notes     TEXT,
            CONSTRAINT ck_payouts_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_payouts_status
                CHECK (status IN ('pending', 'approved', 'rejected')),
            CONSTRAINT ck_payouts_processed
                CHECK (status = 'pending' OR processed_at IS NOT NULL)
        );
    """)
    op.execute(
        "CREATE INDEX idx_payouts_status ON payout_requests (status, requested_at DESC);"
    )
    op.execute("CREATE INDEX idx_payouts_user ON payout_requests (user_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS payout_requests CASCADE;")
