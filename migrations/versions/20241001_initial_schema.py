"""initial admissions schema

Revision ID: 20241001_initial_schema
Revises:
Create Date: 2024-10-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20241001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(include_modified: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False)]
    if include_modified:
        columns.append(sa.Column("modified_at", sa.DateTime(), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "department",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=10), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_department_code", "department", ["code"], unique=True)

    op.create_table(
        "academicterm",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("season", sa.String(length=10), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        *_timestamps(include_modified=False),
    )
    op.create_index("ix_academicterm_code", "academicterm", ["code"], unique=True)
    op.create_index("ix_academicterm_year", "academicterm", ["year"])

    op.create_table(
        "academicprogram",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("description", sa.String(length=200), nullable=False),
        sa.Column("program_type", sa.String(length=20), nullable=False),
        sa.Column(
            "department_id",
            sa.Integer(),
            sa.ForeignKey("department.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_academicprogram_code", "academicprogram", ["code"], unique=True)
    op.create_index("ix_academicprogram_program_type", "academicprogram", ["program_type"])
    op.create_index("ix_academicprogram_department_id", "academicprogram", ["department_id"])

    op.create_table(
        "admissionrecord",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("term_id", sa.Integer(), sa.ForeignKey("academicterm.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("program_id", sa.Integer(), sa.ForeignKey("academicprogram.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("academic_career", sa.String(length=20), nullable=False),
        sa.Column("admit_type", sa.String(length=30), nullable=False),
        sa.Column("total_applied", sa.Integer(), nullable=False),
        sa.Column("total_admitted", sa.Integer(), nullable=False),
        sa.Column("total_denied", sa.Integer(), nullable=False),
        sa.Column("total_gross_deposited", sa.Integer(), nullable=False),
        sa.Column("total_net_deposited", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("term_id", "program_id", "admit_type", name="uq_admission_term_program_admit_type"),
    )
    op.create_index("ix_admissionrecord_term_id", "admissionrecord", ["term_id"])
    op.create_index("ix_admissionrecord_program_id", "admissionrecord", ["program_id"])

    op.create_table(
        "enrollmentgoal",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("program_id", sa.Integer(), sa.ForeignKey("academicprogram.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("term_id", sa.Integer(), sa.ForeignKey("academicterm.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("goal_year", sa.Integer(), nullable=False),
        sa.Column("target_enrollment", sa.Integer(), nullable=True),
        sa.Column("actual_enrollment", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_enrollmentgoal_program_id", "enrollmentgoal", ["program_id"])
    op.create_index("ix_enrollmentgoal_term_id", "enrollmentgoal", ["term_id"])

    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=True),
        sa.Column("last_name", sa.String(length=50), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)
    op.create_index("ix_user_role", "user", ["role"])


def downgrade() -> None:
    op.drop_index("ix_user_role", table_name="user")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
    op.drop_index("ix_enrollmentgoal_term_id", table_name="enrollmentgoal")
    op.drop_index("ix_enrollmentgoal_program_id", table_name="enrollmentgoal")
    op.drop_table("enrollmentgoal")
    op.drop_index("ix_admissionrecord_program_id", table_name="admissionrecord")
    op.drop_index("ix_admissionrecord_term_id", table_name="admissionrecord")
    op.drop_table("admissionrecord")
    op.drop_index("ix_academicprogram_department_id", table_name="academicprogram")
    op.drop_index("ix_academicprogram_program_type", table_name="academicprogram")
    op.drop_index("ix_academicprogram_code", table_name="academicprogram")
    op.drop_table("academicprogram")
    op.drop_index("ix_academicterm_year", table_name="academicterm")
    op.drop_index("ix_academicterm_code", table_name="academicterm")
    op.drop_table("academicterm")
    op.drop_index("ix_department_code", table_name="department")
    op.drop_table("department")
