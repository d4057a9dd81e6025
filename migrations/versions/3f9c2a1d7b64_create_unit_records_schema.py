"""create unit records schema

Revision ID: 3f9c2a1d7b64
Revises:
Create Date: 2026-10-19 09:12:41.508113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a1d7b64'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("firstname", sa.String(), nullable=False),
        sa.Column("lastname", sa.String(), nullable=False),
        sa.Column("gender", sa.Enum("Male", "Female", name="genders", native_enum=False), nullable=False),
        sa.Column("level", sa.String(), nullable=True),
        sa.Column("department", sa.String(), nullable=False),
        sa.Column(
            "role",
            sa.Enum("student", "staff", "admin", name="user_roles", native_enum=False),
            nullable=False,
        ),
        sa.Column("profile_pic", sa.String(), nullable=False),
        sa.Column("refresh_token", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_user_id", "users", ["user_id"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_refresh_token", "users", ["refresh_token"])

    op.create_table(
        "units",
        sa.Column("unit_code", sa.String(), primary_key=True),
        sa.Column("unit_name", sa.String(), nullable=False),
        sa.Column(
            "staff_id",
            sa.String(),
            sa.ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("unit_name", name="uq_units_unit_name"),
    )
    op.create_index("ix_units_staff_id", "units", ["staff_id"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "student_id",
            sa.String(),
            sa.ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "unit_code",
            sa.String(),
            sa.ForeignKey("units.unit_code", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("session", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "unit_code", "session", name="uq_enrollment_scope"),
    )
    op.create_index("ix_enrollments_student_id", "enrollments", ["student_id"])
    op.create_index("ix_enrollments_unit_code", "enrollments", ["unit_code"])

    op.create_table(
        "marks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "student_id",
            sa.String(),
            sa.ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "unit_code",
            sa.String(),
            sa.ForeignKey("units.unit_code", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("theory1", sa.Integer(), nullable=True),
        sa.Column("theory2", sa.Integer(), nullable=True),
        sa.Column("theory3", sa.Integer(), nullable=True),
        sa.Column("prac1", sa.Integer(), nullable=True),
        sa.Column("prac2", sa.Integer(), nullable=True),
        sa.Column("prac3", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_marks_student_id", "marks", ["student_id"])
    op.create_index("ix_marks_unit_code", "marks", ["unit_code"])

    op.create_table(
        "evidence",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "student_id",
            sa.String(),
            sa.ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "unit_code",
            sa.String(),
            sa.ForeignKey("units.unit_code", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("original_name", sa.String(), nullable=False),
        sa.Column("evidence_type", sa.String(), nullable=False, server_default="unknown"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_evidence_student_id", "evidence", ["student_id"])
    op.create_index("ix_evidence_unit_code", "evidence", ["unit_code"])


def downgrade() -> None:
    op.drop_index("ix_evidence_unit_code", table_name="evidence")
    op.drop_index("ix_evidence_student_id", table_name="evidence")
    op.drop_table("evidence")
    op.drop_index("ix_marks_unit_code", table_name="marks")
    op.drop_index("ix_marks_student_id", table_name="marks")
    op.drop_table("marks")
    op.drop_index("ix_enrollments_unit_code", table_name="enrollments")
    op.drop_index("ix_enrollments_student_id", table_name="enrollments")
    op.drop_table("enrollments")
    op.drop_index("ix_units_staff_id", table_name="units")
    op.drop_table("units")
    op.drop_index("ix_users_refresh_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_user_id", table_name="users")
    op.drop_table("users")
