"""005: create tournament_registrations table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE tournament_registrations (
            id                  BIGSERIAL   PRIMARY KEY,
            user_id             UUID        NOT NULL REFERENCES users (id),
            tournament_id       BIGINT      NOT NULL REFERENCES tournaments (id) ON DELETE CASCADE,
            registration_type   VARCHAR(10) NOT NULL DEFAULT 'solo',
            team_leader_id      UUID        REFERENCES users (id),
            registered_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_registrations_user_tournament UNIQUE (user_id, tournament_id),
            CONSTRAINT ck_registrations_type
                CHECK (registration_type IN ('solo', 'duo', 'squad'))
        );
    """)
    op.execute(
        "CREATE INDEX idx_registrations_tournament "
        "ON tournament_registrations (tournament_id);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS tournament_registrations CASCADE;")
