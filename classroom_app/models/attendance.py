# classroom_app/models/attendance.py
from sqlalchemy import Column, Date, String, ForeignKey, UniqueConstraint, Uuid
import enum

from .base import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"


class AttendanceRecord(Base):
    """One taken attendance session for a classroom/subject/period/date."""
    __tablename__ = "attendance_records"

    # Foreign Keys
    classroom_id = Column(Uuid, ForeignKey("classrooms.id"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id"), nullable=False, index=True)
    period_id = Column(Uuid, ForeignKey("periods.id", ondelete="SET NULL"), nullable=True, index=True)
    mentor_id = Column(Uuid, ForeignKey("teachers.id"), nullable=False, index=True)  # Who took it

    date = Column(Date, nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("classroom_id", "subject_id", "date", "period_id", name="uq_attendance_session"),
    )


class StudentAttendance(Base):
    __tablename__ = "student_attendances"

    student_id = Column(Uuid, ForeignKey("students.id"), nullable=False, index=True)
    attendance_record_id = Column(Uuid, ForeignKey("attendance_records.id"), nullable=False, index=True)
    status = Column(String(10), nullable=False, default=AttendanceStatus.ABSENT.value)

    __table_args__ = (
        UniqueConstraint("student_id", "attendance_record_id", name="uq_student_attendance"),
    )
