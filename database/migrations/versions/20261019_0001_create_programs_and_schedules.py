"""create programs and schedules

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "programs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("name_th", sa.String(length=200), nullable=False),
        sa.Column("name_en", sa.String(length=200), nullable=False),
        sa.Column("num_years", sa.Integer(), nullable=False, server_default="4"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("course_id", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("program_id", sa.Integer(), sa.ForeignKey("programs.id"), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("group", sa.Integer(), nullable=False),
        sa.Column("pair_group", sa.Integer(), nullable=False),
        sa.Column("student_count", sa.Integer(), nullable=False),
        sa.Column("lecturer", sa.String(length=200), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("room_id", sa.String(length=50), nullable=False),
        sa.Column("mid_day", sa.Date(), nullable=True),
        sa.Column("mid_start_time", sa.Time(), nullable=True),
        sa.Column("mid_end_time", sa.Time(), nullable=True),
        sa.Column("final_day", sa.Date(), nullable=True),
        sa.Column("final_start_time", sa.Time(), nullable=True),
        sa.Column("final_end_time", sa.Time(), nullable=True),
    )
    op.create_index("ix_schedules_course_id", "schedules", ["course_id"])
    op.create_index("ix_schedules_room_id", "schedules", ["room_id"])


def downgrade() -> None:
    op.drop_index("ix_schedules_room_id", table_name="schedules")
    op.drop_index("ix_schedules_course_id", table_name="schedules")
    op.drop_table("schedules")
    op.drop_table("programs")
