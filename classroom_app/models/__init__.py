"""Import all models here, needed for Alembic migration and metadata.create_all."""
from .base import Base

from .school import School, User
from .people import ProfileStatus, Subject, Teacher, Student
from .classroom import (
    Classroom, ClassroomStatus, ClassroomStudentAssociation, ClassroomSubjectAssociation
)
from .timetable import DAYS_OF_WEEK, DayOfWeek, Timetable, Period
from .attendance import AttendanceRecord, AttendanceStatus, StudentAttendance

__all__ = [
    "Base",
    "School",
    "User",
    "ProfileStatus",
    "Subject",
    "Teacher",
    "Student",
    "Classroom",
    "ClassroomStatus",
    "ClassroomStudentAssociation",
    "ClassroomSubjectAssociation",
    "DAYS_OF_WEEK",
    "DayOfWeek",
    "Timetable",
    "Period",
    "AttendanceRecord",
    "AttendanceStatus",
    "StudentAttendance",
]
