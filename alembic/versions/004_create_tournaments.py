"""004: create tournaments table

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE tournaments (
            id                      BIGSERIAL       PRIMARY KEY,
            name                    VARCHAR(200)    NOT NULL,
            description             TEXT,
            game_type               VARCHAR(30)     NOT NULL,
            team_mode               VARCHAR(10)     NOT NULL DEFAULT 'solo',
            match_type              VARCHAR(50)     NOT NULL DEFAULT 'Battle Royale',
            entry_fee               BIGINT          NOT NULL DEFAULT 0,
            prize_pool              BIGINT          NOT NULL DEFAULT 0,
            max_participants        INTEGER         NOT NULL,
            current_participants    INTEGER         NOT NULL DEFAULT 0,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'upcoming',
            start_date              TIMESTAMPTZ,
            end_date                TIMESTAMPTZ,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_tournaments_game_type
                CHECK (game_type IN ('Free Fire', 'BGMI', 'Valorant', 'CODM')),
            CONSTRAINT ck_tournaments_team_mode  CHECK (team_mode IN ('solo', 'duo', 'squad')),
            CONSTRAINT ck_tournaments_status
                CHECK (status IN ('upcoming', 'active', 'completed')),
            CONSTRAINT ck_tournaments_entry_fee_gte_0   CHECK (entry_fee >= 0),
            CONSTRAINT ck_tournaments_prize_pool_gte_0  CHECK (prize_pool >= 0),
            CONSTRAINT ck_tournaments_max_gt_0          CHECK (max_participants > 0),
            CONSTRAINT ck_tournaments_participants
                CHECK (current_participants >= 0 AND current_participants <= max_participants)
        );
    """)
    op.execute("CREATE INDEX idx_tournaments_status ON tournaments (status, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_tournaments_updated_at
            BEFORE UPDATE ON tournaments
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS tournaments CASCADE;")
