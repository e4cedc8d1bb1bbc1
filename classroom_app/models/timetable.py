# classroom_app/models/timetable.py
from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
import enum

from .base import Base


class DayOfWeek(str, enum.Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


DAYS_OF_WEEK = [day.value for day in DayOfWeek]


class Timetable(Base):
    __tablename__ = "timetables"

    classroom_id = Column(Uuid, ForeignKey("classrooms.id"), nullable=False, index=True)
    day = Column(String(10), nullable=False)

    __table_args__ = (
        UniqueConstraint("classroom_id", "day", name="uq_timetable_classroom_day"),
    )

    periods = relationship(
        "Period",
        cascade="all, delete-orphan",
        order_by="Period.position",
        lazy="raise",
    )


class Period(Base):
    __tablename__ = "periods"

    # Foreign Keys
    timetable_id = Column(Uuid, ForeignKey("timetables.id"), nullable=False, index=True)
    classroom_id = Column(Uuid, ForeignKey("classrooms.id"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id"), nullable=False, index=True)
    teacher_id = Column(Uuid, ForeignKey("teachers.id"), nullable=False, index=True)

    # Same-day "HH:mm" strings; lexicographic order is chronological order
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    position = Column(Integer, nullable=False, default=0)
