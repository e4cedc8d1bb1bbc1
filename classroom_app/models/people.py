# classroom_app/models/people.py
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Uuid
import enum

from .base import Base


class ProfileStatus(str, enum.Enum):
    ACTIVE = "active"
    REMOVED = "removed"


class Subject(Base):
    __tablename__ = "subjects"

    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_subject_school_name"),
    )


class Teacher(Base):
    __tablename__ = "teachers"

    # Foreign Keys
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id"), nullable=True, index=True)

    name = Column(String(100), nullable=False, index=True)
    status = Column(String(20), default=ProfileStatus.ACTIVE.value, nullable=False)


class Student(Base):
    __tablename__ = "students"

    # Foreign Keys
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)

    name = Column(String(100), nullable=False, index=True)
    roll = Column(String(20))
    status = Column(String(20), default=ProfileStatus.ACTIVE.value, nullable=False)
