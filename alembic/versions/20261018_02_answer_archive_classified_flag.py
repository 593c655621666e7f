"""Answer archive classified flag

Revision ID: 20261018_02
Revises: 20261018_01
Create Date: 2026-10-18
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_02"
down_revision: Union[str, Sequence[str], None] = "20261018_01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    with op.batch_alter_table("answer_archive") as batch_op:
        batch_op.add_column(sa.Column("classified", sa.Boolean(), nullable=False, server_default=sa.true()))


def downgrade() -> None:
    """Downgrade schema."""

    with op.batch_alter_table("answer_archive") as batch_op:
        batch_op.drop_column("classified")
