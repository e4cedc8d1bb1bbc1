"""initial classroom schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:12:40.512033

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES = [
    "schools",
    "users",
    "subjects",
    "teachers",
    "students",
    "classrooms",
    "classroom_student_associations",
    "classroom_subject_associations",
    "timetables",
    "periods",
    "attendance_records",
    "student_attendances",
]


def _base_columns():
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _fk(column, target, nullable=False, ondelete=None):
    return sa.Column(column, sa.Uuid(), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "schools",
        *_base_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(254), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_schools_name", "schools", ["name"])

    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "subjects",
        *_base_columns(),
        _fk("school_id", "schools.id"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.UniqueConstraint("school_id", "name", name="uq_subject_school_name"),
    )
    op.create_index("ix_subjects_school_id", "subjects", ["school_id"])

    op.create_table(
        "teachers",
        *_base_columns(),
        _fk("school_id", "schools.id"),
        _fk("user_id", "users.id", nullable=True),
        _fk("subject_id", "subjects.id", nullable=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
    )
    for column in ("school_id", "user_id", "subject_id", "name"):
        op.create_index(f"ix_teachers_{column}", "teachers", [column])

    op.create_table(
        "students",
        *_base_columns(),
        _fk("school_id", "schools.id"),
        _fk("user_id", "users.id", nullable=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("roll", sa.String(20), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
    )
    for column in ("school_id", "user_id", "name"):
        op.create_index(f"ix_students_{column}", "students", [column])

    op.create_table(
        "classrooms",
        *_base_columns(),
        _fk("school_id", "schools.id"),
        _fk("mentor_id", "teachers.id", nullable=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
    )
    op.create_index("ix_classrooms_school_id", "classrooms", ["school_id"])
    op.create_index("ix_classrooms_status", "classrooms", ["status"])
    op.create_index(
        "uq_classroom_active_name",
        "classrooms",
        ["school_id", "name"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
        sqlite_where=sa.text("status = 'active'"),
    )
    op.create_index(
        "uq_classroom_mentor",
        "classrooms",
        ["mentor_id"],
        unique=True,
        postgresql_where=sa.text("mentor_id IS NOT NULL"),
        sqlite_where=sa.text("mentor_id IS NOT NULL"),
    )

    op.create_table(
        "classroom_student_associations",
        *_base_columns(),
        _fk("student_id", "students.id"),
        _fk("classroom_id", "classrooms.id"),
        sa.UniqueConstraint("student_id", "classroom_id", name="uq_classroom_student"),
    )
    op.create_index("ix_classroom_student_associations_student_id", "classroom_student_associations", ["student_id"])
    op.create_index("ix_classroom_student_associations_classroom_id", "classroom_student_associations", ["classroom_id"])

    op.create_table(
        "classroom_subject_associations",
        *_base_columns(),
        _fk("classroom_id", "classrooms.id"),
        _fk("subject_id", "subjects.id"),
        sa.UniqueConstraint("classroom_id", "subject_id", name="uq_classroom_subject"),
    )
    op.create_index("ix_classroom_subject_associations_classroom_id", "classroom_subject_associations", ["classroom_id"])
    op.create_index("ix_classroom_subject_associations_subject_id", "classroom_subject_associations", ["subject_id"])

    op.create_table(
        "timetables",
        *_base_columns(),
        _fk("classroom_id", "classrooms.id"),
        sa.Column("day", sa.String(10), nullable=False),
        sa.UniqueConstraint("classroom_id", "day", name="uq_timetable_classroom_day"),
    )
    op.create_index("ix_timetables_classroom_id", "timetables", ["classroom_id"])

    op.create_table(
        "periods",
        *_base_columns(),
        _fk("timetable_id", "timetables.id"),
        _fk("classroom_id", "classrooms.id"),
        _fk("subject_id", "subjects.id"),
        _fk("teacher_id", "teachers.id"),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    for column in ("timetable_id", "classroom_id", "subject_id", "teacher_id"):
        op.create_index(f"ix_periods_{column}", "periods", [column])

    op.create_table(
        "attendance_records",
        *_base_columns(),
        _fk("classroom_id", "classrooms.id"),
        _fk("subject_id", "subjects.id"),
        _fk("period_id", "periods.id", nullable=True, ondelete="SET NULL"),
        _fk("mentor_id", "teachers.id"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.UniqueConstraint("classroom_id", "subject_id", "date", "period_id", name="uq_attendance_session"),
    )
    for column in ("classroom_id", "subject_id", "period_id", "mentor_id", "date"):
        op.create_index(f"ix_attendance_records_{column}", "attendance_records", [column])

    op.create_table(
        "student_attendances",
        *_base_columns(),
        _fk("student_id", "students.id"),
        _fk("attendance_record_id", "attendance_records.id"),
        sa.Column("status", sa.String(10), nullable=False),
        sa.UniqueConstraint("student_id", "attendance_record_id", name="uq_student_attendance"),
    )
    op.create_index("ix_student_attendances_student_id", "student_attendances", ["student_id"])
    op.create_index("ix_student_attendances_attendance_record_id", "student_attendances", ["attendance_record_id"])

    for table in TABLES:
        op.create_index(f"ix_{table}_id", table, ["id"])
        op.create_index(f"ix_{table}_created_at", table, ["created_at"])


def downgrade() -> None:
    # Dropping a table drops its indexes
    for table in reversed(TABLES):
        op.drop_table(table)
