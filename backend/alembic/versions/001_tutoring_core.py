# backend/alembic/versions/001_tutoring_core.py
"""Tutoring core: tutors, availability rules, subjects, session ledger

Revision ID: 001_tutoring_core
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_tutoring_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create tutoring tables."""
    print("Creating tutoring core tables...")

    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    is_postgres = dialect_name == "postgresql"

    op.create_table(
        "tutor_profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("display_name", sa.String(120), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "hourly_rate IS NULL OR hourly_rate >= 0", name="ck_tutor_rate_non_negative"
        ),
    )
    op.create_index("ix_tutor_profiles_id", "tutor_profiles", ["id"])

    print("Creating availability_rules table...")
    op.create_table(
        "availability_rules",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("day_of_week", sa.String(3), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.ForeignKeyConstraint(["tutor_id"], ["tutor_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "day_of_week IN ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')",
            name="ck_availability_rules_day_of_week",
        ),
        sa.CheckConstraint("start_time < end_time", name="ck_availability_rules_time_order"),
    )
    op.create_index(
        "ix_availability_rules_tutor_day",
        "availability_rules",
        ["tutor_id", "day_of_week"],
    )

    print("Creating subjects and topics tables...")
    op.create_table(
        "subjects",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "topics",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("subject_id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("subject_id", "name", name="uq_topics_subject_name"),
    )
    op.create_index("ix_topics_subject_id", "topics", ["subject_id"])

    print("Creating sessions table...")
    op.create_table(
        "sessions",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("student_id", sa.String(26), nullable=False),
        sa.Column("subject_id", sa.String(26), nullable=False),
        sa.Column("topic_id", sa.String(26), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=False), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=False), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="booked"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("canceled_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["tutor_id"], ["tutor_profiles.id"]),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('booked', 'completed', 'canceled', 'no_show')",
            name="ck_sessions_status",
        ),
        sa.CheckConstraint("start_at < end_at", name="ck_sessions_time_order"),
        sa.CheckConstraint("price >= 0", name="ck_sessions_price_non_negative"),
    )
    op.create_index("ix_sessions_id", "sessions", ["id"])
    op.create_index("ix_sessions_student_id", "sessions", ["student_id"])
    op.create_index("ix_sessions_status", "sessions", ["status"])
    op.create_index("ix_sessions_tutor_start", "sessions", ["tutor_id", "start_at"])

    if is_postgres:
        print("Adding per-tutor no-overlap exclusion constraint...")
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE sessions
              ADD CONSTRAINT sessions_no_overlap_per_tutor
              EXCLUDE USING gist (
                tutor_id WITH =,
                tsrange(start_at, end_at, '[)') WITH &&
              )
              WHERE (status <> 'canceled')
            """
        )

    print("Tutoring core tables created")


def downgrade() -> None:
    """Drop tutoring tables."""
    print("Dropping tutoring core tables...")

    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    if dialect_name == "postgresql":
        op.execute("ALTER TABLE sessions DROP CONSTRAINT IF EXISTS sessions_no_overlap_per_tutor")

    op.drop_index("ix_sessions_tutor_start", table_name="sessions")
    op.drop_index("ix_sessions_status", table_name="sessions")
    op.drop_index("ix_sessions_student_id", table_name="sessions")
    op.drop_index("ix_sessions_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_topics_subject_id", table_name="topics")
    op.drop_table("topics")
    op.drop_table("subjects")
    op.drop_index("ix_availability_rules_tutor_day", table_name="availability_rules")
    op.drop_table("availability_rules")
    op.drop_index("ix_tutor_profiles_id", table_name="tutor_profiles")
    op.drop_table("tutor_profiles")
