"""005: create trades table

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
        CREATE TABLE trades (
            trade_id            BIGINT          PRIMARY KEY,
            listing_id          BIGINT          NOT NULL REFERENCES listings (listing_id),
            buyer               VARCHAR(64)     NOT NULL,
            seller              VARCHAR(64)     NOT NULL,
            energy_amount       BIGINT          NOT NULL,
            total_price         BIGINT          NOT NULL,
            created_height      BIGINT          NOT NULL,
            is_completed        BOOLEAN         NOT NULL DEFAULT FALSE,
            completed_height    BIGINT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_trades_amount_gt_0    CHECK (energy_amount > 0),
            CONSTRAINT ck_trades_not_self       CHECK (buyer <> seller),
            CONSTRAINT ck_trades_completed_at   CHECK (is_completed = (completed_height IS NOT NULL))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_trades_updated_at
            BEFORE UPDATE ON trades
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("CREATE INDEX idx_trades_listing ON trades (listing_id);")
    op.execute("CREATE INDEX idx_trades_buyer ON trades (buyer, trade_id DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS trades CASCADE;")
