"""Create transfers table - append-only username ownership log.

Revision ID: 001_create_transfers
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_create_transfers"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "transfers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("timestamp", sa.BigInteger, nullable=False),
        sa.Column("username", sa.Text, nullable=False),
        sa.Column("owner", sa.LargeBinary(20), nullable=False),
        sa.Column("from", sa.BigInteger, nullable=False),
        sa.Column("to", sa.BigInteger, nullable=False),
        sa.Column("user_signature", sa.LargeBinary, nullable=False),
        sa.Column("server_signature", sa.LargeBinary, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_transfers_username", "transfers", ["username"])
    op.create_index("ix_transfers_timestamp", "transfers", ["timestamp"])
    op.create_index("ix_transfers_from", "transfers", ["from"])
    op.create_index("ix_transfers_to", "transfers", ["to"])


def downgrade() -> None:
    op.drop_index("ix_transfers_to", table_name="transfers")
    op.drop_index("ix_transfers_from", table_name="transfers")
    op.drop_index("ix_transfers_timestamp", table_name="transfers")
    op.drop_index("ix_transfers_username", table_name="transfers")
    op.drop_table("transfers")
