"""008: create platform_state and seed system rows

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
        CREATE TABLE platform_state (
            id                      SMALLINT    PRIMARY KEY,
            next_listing_id         BIGINT      NOT NULL DEFAULT 1,
            next_trade_id           BIGINT      NOT NULL DEFAULT 1,
            total_energy_traded     BIGINT      NOT NULL DEFAULT 0,
            total_platform_revenue  BIGINT      NOT NULL DEFAULT 0,
            updated_at              TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_platform_state_singleton CHECK (id = 1)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_platform_state_updated_at
            BEFORE UPDATE ON platform_state
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("INSERT INTO platform_state (id) VALUES (1);")
    # Custody account: pending escrow + accrued fees
    op.execute("""
        INSERT INTO accounts (user_id, balance, version)
        VALUES ('ESCROW_CUSTODY', 0, 0);
    """)


def downgrade() -> None:
    op.execute("DELETE FROM accounts WHERE user_id = 'ESCROW_CUSTODY';")
    op.execute("DROP TABLE IF EXISTS platform_state CASCADE;")
