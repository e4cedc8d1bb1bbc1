# classroom_app/models/classroom.py
from sqlalchemy import Column, String, ForeignKey, Index, UniqueConstraint, Uuid, text
import enum

from .base import Base


class ClassroomStatus(str, enum.Enum):
    ACTIVE = "active"
    DELETED = "deleted"


class Classroom(Base):
    __tablename__ = "classrooms"

    # Foreign Keys
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    mentor_id = Column(Uuid, ForeignKey("teachers.id"), nullable=True)

    name = Column(String(100), nullable=False)
    status = Column(String(20), default=ClassroomStatus.ACTIVE.value, nullable=False, index=True)

    __table_args__ = (
        # Name is unique among active classrooms of a school
        Index(
            "uq_classroom_active_name",
            "school_id", "name",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        # A teacher mentors at most one classroom
        Index(
            "uq_classroom_mentor",
            "mentor_id",
            unique=True,
            postgresql_where=text("mentor_id IS NOT NULL"),
            sqlite_where=text("mentor_id IS NOT NULL"),
        ),
    )


class ClassroomStudentAssociation(Base):
    __tablename__ = "classroom_student_associations"

    student_id = Column(Uuid, ForeignKey("students.id"), nullable=False, index=True)
    classroom_id = Column(Uuid, ForeignKey("classrooms.id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("student_id", "classroom_id", name="uq_classroom_student"),
    )


class ClassroomSubjectAssociation(Base):
    __tablename__ = "classroom_subject_associations"

    classroom_id = Column(Uuid, ForeignKey("classrooms.id"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("classroom_id", "subject_id", name="uq_classroom_subject"),
    )
