"""users with single role and academic classes

Revision ID: 0001_users_classes
Revises:
Create Date: 2026-10-05 09:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_users_classes"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"], unique=False)

    op.create_table(
        "school_classes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("teacher_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_school_classes_id", "school_classes", ["id"], unique=False)
    op.create_index("ix_school_classes_teacher_id", "school_classes", ["teacher_id"], unique=False)

    op.create_table(
        "student_class_enrollments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("class_id", sa.Integer(), sa.ForeignKey("school_classes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "class_id", name="uq_student_class"),
    )
    op.create_index("ix_student_class_enrollments_id", "student_class_enrollments", ["id"], unique=False)
    op.create_index(
        "ix_student_class_enrollments_student_id", "student_class_enrollments", ["student_id"], unique=False
    )
    op.create_index("ix_student_class_enrollments_class_id", "student_class_enrollments", ["class_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_student_class_enrollments_class_id", table_name="student_class_enrollments")
    op.drop_index("ix_student_class_enrollments_student_id", table_name="student_class_enrollments")
    op.drop_index("ix_student_class_enrollments_id", table_name="student_class_enrollments")
    op.drop_table("student_class_enrollments")

    op.drop_index("ix_school_classes_teacher_id", table_name="school_classes")
    op.drop_index("ix_school_classes_id", table_name="school_classes")
    op.drop_table("school_classes")

    op.drop_index("ix_users_deleted_at", table_name="users")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
