"""006: create escrows table

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
    # A row exists only while its trade is pending; deleted at confirmation
    op.execute("""
        CREATE TABLE escrows (
            trade_id    BIGINT      PRIMARY KEY REFERENCES trades (trade_id),
            amount      BIGINT      NOT NULL,
            depositor   VARCHAR(64) NOT NULL,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_escrows_amount_gt_0 CHECK (amount > 0)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS escrows CASCADE;")
