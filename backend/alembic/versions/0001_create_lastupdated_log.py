"""create last updated course module log table

Revision ID: 0001_create_lastupdated_log
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_create_lastupdated_log"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "logstore_lastupdated_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("module_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("payload", sa.Text(), nullable=True),
        sa.UniqueConstraint("module_id", name="uq_logstore_lastupdated_module"),
    )
    op.create_index("ix_logstore_lastupdated_log_id", "logstore_lastupdated_log", ["id"], unique=False)
    op.create_index(
        "ix_logstore_lastupdated_log_course_id", "logstore_lastupdated_log", ["course_id"], unique=False
    )
    op.create_index(
        "ix_logstore_lastupdated_log_last_updated", "logstore_lastupdated_log", ["last_updated"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_logstore_lastupdated_log_last_updated", table_name="logstore_lastupdated_log")
    op.drop_index("ix_logstore_lastupdated_log_course_id", table_name="logstore_lastupdated_log")
    op.drop_index("ix_logstore_lastupdated_log_id", table_name="logstore_lastupdated_log")
    op.drop_table("logstore_lastupdated_log")
