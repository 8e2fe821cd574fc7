"""Create speed_test_results table

Revision ID: 20261017_create_speed_test_results
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_create_speed_test_results'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Decimal columns are TEXT holding fixed-point values ("100.50") so no
    # binary float ever touches storage.
    op.create_table(
        "speed_test_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("download_speed", sa.Text(), nullable=False),
        sa.Column("upload_speed", sa.Text(), nullable=False),
        sa.Column("ping", sa.Text(), nullable=False),
        sa.Column("jitter", sa.Text(), nullable=False),
        sa.Column("server_location", sa.Text(), nullable=False),
        sa.Column("user_ip", sa.Text(), nullable=False),
        sa.Column("test_duration", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sqlite_autoincrement=True,
    )
    op.create_index("idx_speed_test_results_created_at", "speed_test_results", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_speed_test_results_created_at", table_name="speed_test_results")
    op.drop_table("speed_test_results")
