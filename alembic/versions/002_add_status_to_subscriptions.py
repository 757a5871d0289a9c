"""Add status to subscriptions.

Revision ID: 002_subscription_status
Revises: 001_subscriptions
Create Date: 2026-10-17

Rows that predate double opt-in are backfilled as confirmed.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_subscription_status"
down_revision: Union[str, None] = "001_subscriptions"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "subscriptions",
        sa.Column("status", sa.String(32), nullable=True),
    )
    op.execute("UPDATE subscriptions SET status = 'confirmed' WHERE status IS NULL")
    op.alter_column("subscriptions", "status", nullable=False)


def downgrade() -> None:
    op.drop_column("subscriptions", "status")
