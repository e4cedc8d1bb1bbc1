# classroom_app/schemas/classroom_schemas.py
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID
import re

from pydantic import Field, field_validator, model_validator

from .base import CamelModel, MessageResponse

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


# Requests

class ClassroomCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    subjects: List[UUID] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Classroom name is required")
        return v


class ClassroomUpdate(ClassroomCreate):
    subjects: Optional[List[UUID]] = None


class AssignTeacherRequest(CamelModel):
    teacher_id: UUID
    classroom_id: UUID


class AssignStudentsRequest(CamelModel):
    students_ids: List[UUID] = Field(..., min_length=1)
    classroom_id: UUID


class SubjectCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class PeriodIn(CamelModel):
    subject_id: UUID = Field(..., alias="subject")
    teacher_id: UUID = Field(..., alias="teacher")
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not _TIME_PATTERN.match(v):
            raise ValueError("Time must use the HH:mm format")
        return v

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_time >= self.end_time:
            raise ValueError("startTime must be before endTime")
        return self


class DayPeriodsUpdate(CamelModel):
    periods: List[PeriodIn] = Field(default_factory=list)


# Responses

class SubjectOut(CamelModel):
    id: UUID
    name: str


class TeacherRef(CamelModel):
    id: UUID
    name: str


class ClassroomRef(CamelModel):
    id: UUID
    name: str


class ClassroomOut(CamelModel):
    id: UUID
    name: str
    school_id: UUID = Field(..., serialization_alias="school")
    mentor_id: Optional[UUID] = None
    status: str
    created_at: Optional[datetime] = None


class ClassroomWithMentorOut(ClassroomOut):
    mentor: Optional[TeacherRef] = None


class ClassroomResponse(MessageResponse):
    classroom: ClassroomOut


class ClassroomDetailsResponse(MessageResponse):
    classroom: ClassroomWithMentorOut


class ClassroomListResponse(MessageResponse):
    classrooms: List[ClassroomWithMentorOut]


class SubjectListResponse(MessageResponse):
    subjects: List[SubjectOut]


class SubjectResponse(MessageResponse):
    subject: SubjectOut


class AssignStudentsResponse(MessageResponse):
    newly_assigned_students: List[UUID] = Field(default_factory=list)


class PeriodOut(CamelModel):
    id: UUID
    subject: SubjectOut
    teacher: TeacherRef
    classroom: ClassroomRef
    start_time: str
    end_time: str


class TimetableDayOut(CamelModel):
    id: UUID
    day: str
    periods: List[PeriodOut]


class ClassroomDaysResponse(MessageResponse):
    days: List[TimetableDayOut]


class ScheduledPeriodOut(PeriodOut):
    attendance_taken: bool


class TeacherScheduleResponse(CamelModel):
    timetable: Dict[str, List[ScheduledPeriodOut]]


class TimetableDayResponse(MessageResponse):
    timetable: TimetableDayOut
