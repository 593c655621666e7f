"""Adapter storage baseline: request queue, answer archive, dead-letters

Revision ID: 20261018_01
Revises:
Create Date: 2026-10-18
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "request_queue",
        sa.Column("queue_item_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("enqueued_at_utc", sa.Text(), nullable=False),
    )

    op.create_table(
        "answer_archive",
        sa.Column("archive_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("entity_kind", sa.Text(), nullable=False),
        sa.Column("archive_area", sa.Text(), nullable=False),
        sa.Column("received_at_utc", sa.Text(), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
    )
    op.create_index("ix_answer_archive_entity_kind_archive_id", "answer_archive", ["entity_kind", "archive_id"])

    op.create_table(
        "dead_letter",
        sa.Column("dead_letter_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_type", sa.Text(), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("error", sa.Text(), nullable=False),
        sa.Column("failed_at_utc", sa.Text(), nullable=False),
    )
    op.create_index("ix_dead_letter_event_type", "dead_letter", ["event_type"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_dead_letter_event_type", table_name="dead_letter")
    op.drop_table("dead_letter")
    op.drop_index("ix_answer_archive_entity_kind_archive_id", table_name="answer_archive")
    op.drop_table("answer_archive")
    op.drop_table("request_queue")
