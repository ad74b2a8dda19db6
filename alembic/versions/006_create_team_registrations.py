"""006: create team_registrations table

Revision ID: 006
Revises: 005
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE team_registrations (
            id                  BIGSERIAL       PRIMARY KEY,
            tournament_id       BIGINT          NOT NULL REFERENCES tournaments (id) ON DELETE CASCADE,
            team_leader_id      UUID            NOT NULL REFERENCES users (id),
            team_name           VARCHAR(100)    NOT NULL,
            team_members        UUID[]          NOT NULL,
            team_size           INTEGER         NOT NULL,
            entry_fee_paid      BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_teams_size        CHECK (team_size BETWEEN 2 AND 5),
            CONSTRAINT ck_teams_members_len CHECK (cardinality(team_members) = team_size),
            CONSTRAINT ck_teams_fee_gte_0   CHECK (entry_fee_paid >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_teams_tournament ON team_registrations (tournament_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS team_registrations CASCADE;")
