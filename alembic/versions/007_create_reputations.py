"""007: create reputations table

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
        CREATE TABLE reputations (
            identity            VARCHAR(64) PRIMARY KEY,
            total_trades        BIGINT      NOT NULL DEFAULT 0,
            successful_trades   BIGINT      NOT NULL DEFAULT 0,
            score               INTEGER     NOT NULL DEFAULT 500,
            updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_reputations_score_range CHECK (score BETWEEN 0 AND 1000),
            CONSTRAINT ck_reputations_counts      CHECK (successful_trades <= total_trades)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_reputations_updated_at
            BEFORE UPDATE ON reputations
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS reputations CASCADE;")
