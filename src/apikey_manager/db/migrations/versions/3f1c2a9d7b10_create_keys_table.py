"""Create keys table

Learn: Composite primary key (owner_id, id). The key id is chosen by the
client, so uniqueness is only meaningful within one owner.

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:12:44.104211
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "keys",
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "favorite", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("order", sa.Float(), nullable=True),
        sa.Column("status", sa.String(100), nullable=True),
        sa.Column("status_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.String(64), nullable=True),
        sa.PrimaryKeyConstraint("owner_id", "id"),
    )
    op.create_index("idx_keys_owner", "keys", ["owner_id"])


def downgrade() -> None:
    op.drop_index("idx_keys_owner", table_name="keys")
    op.drop_table("keys")
