"""Create subscription_tokens table.

Revision ID: 003_subscription_tokens
Revises: 002_subscription_status
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


revision: str = "003_subscription_tokens"
down_revision: Union[str, None] = "002_subscription_status"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subscription_tokens",
        sa.Column("subscription_token", sa.Text, primary_key=True),
        sa.Column(
            "subscriber_id", UUID(as_uuid=True),
            sa.ForeignKey("subscriptions.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_subscription_tokens_subscriber_id",
        "subscription_tokens", ["subscriber_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_subscription_tokens_subscriber_id", "subscription_tokens")
    op.drop_table("subscription_tokens")
