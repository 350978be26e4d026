"""create fx_exchange_rate

Revision ID: 3b9e2c71d4a0
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b9e2c71d4a0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "fx_exchange_rate",
        sa.Column("rate", sa.Numeric(precision=18, scale=8), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_fx_exchange_rate_created_at"), "fx_exchange_rate", ["created_at"]
    )
    op.create_index(
        "uq_fx_exchange_rate_single_default",
        "fx_exchange_rate",
        ["is_default"],
        unique=True,
        sqlite_where=sa.text("is_default IS 1"),
        postgresql_where=sa.text("is_default IS true"),
    )


def downgrade() -> None:
    op.drop_index("uq_fx_exchange_rate_single_default", table_name="fx_exchange_rate")
    op.drop_index(op.f("ix_fx_exchange_rate_created_at"), table_name="fx_exchange_rate")
    op.drop_table("fx_exchange_rate")
