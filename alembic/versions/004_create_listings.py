"""004: create listings table

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
        CREATE TABLE listings (
            listing_id      BIGINT          PRIMARY KEY,
            seller          VARCHAR(64)     NOT NULL,
            energy_amount   BIGINT          NOT NULL,
            price_per_unit  BIGINT          NOT NULL,
            energy_type     VARCHAR(32)     NOT NULL,
            location        VARCHAR(100)    NOT NULL DEFAULT '',
            expiry_height   BIGINT          NOT NULL,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_amount_gte_0 CHECK (energy_amount >= 0),
            CONSTRAINT ck_listings_price_gt_0   CHECK (price_per_unit > 0),
            CONSTRAINT ck_listings_exhausted_inactive CHECK (energy_amount > 0 OR NOT is_active)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("CREATE INDEX idx_listings_live ON listings (listing_id) WHERE is_active;")
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
