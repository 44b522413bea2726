"""Create notification_sent_events table.

Revision ID: 001_notification_sent_events
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_notification_sent_events"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notification_sent_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("event_key", sa.Text(), nullable=False),
        sa.Column("event_type", sa.Text(), nullable=False),
        sa.Column("event_name", sa.Text(), nullable=False),
        sa.Column("event_priority", sa.Integer(), nullable=False),
        sa.Column("sent_by", sa.Text(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.UniqueConstraint("date", "event_key", name="uq_notification_sent_events_date_key"),
        sa.CheckConstraint(
            "sent_by IN ('daily', '4-hourly')",
            name="ck_notification_sent_events_sent_by",
        ),
    )
    op.create_index("idx_notification_sent_events_date", "notification_sent_events", ["date"])
    op.create_index("idx_notification_sent_events_event_key", "notification_sent_events", ["event_key"])
    op.create_index("idx_notification_sent_events_sent_at", "notification_sent_events", ["sent_at"])


def downgrade() -> None:
    op.drop_index("idx_notification_sent_events_sent_at", table_name="notification_sent_events")
    op.drop_index("idx_notification_sent_events_event_key", table_name="notification_sent_events")
    op.drop_index("idx_notification_sent_events_date", table_name="notification_sent_events")
    op.drop_table("notification_sent_events")
