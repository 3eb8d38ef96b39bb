"""create notices table

Revision ID: 0002_notices
Revises: 0001_users_classes
Create Date: 2026-10-06 10:30:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002_notices"
down_revision = "0001_users_classes"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "notices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False, server_default="General"),
        sa.Column("audience", sa.String(length=20), nullable=False),
        sa.Column("priority", sa.String(length=20), nullable=False),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_notices_id", "notices", ["id"], unique=False)
    op.create_index("ix_notices_audience", "notices", ["audience"], unique=False)
    op.create_index("ix_notices_is_pinned", "notices", ["is_pinned"], unique=False)
    op.create_index("ix_notices_author_id", "notices", ["author_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_notices_author_id", table_name="notices")
    op.drop_index("ix_notices_is_pinned", table_name="notices")
    op.drop_index("ix_notices_audience", table_name="notices")
    op.drop_index("ix_notices_id", table_name="notices")
    op.drop_table("notices")
