# classroom_app/schemas/attendance_schemas.py
from datetime import date as date_type
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from .base import CamelModel, MessageResponse
from ..models.attendance import AttendanceStatus


class StudentAttendanceIn(CamelModel):
    student_id: UUID = Field(..., alias="student")
    status: AttendanceStatus


class TakeAttendanceRequest(CamelModel):
    classroom_id: UUID = Field(..., alias="classroom")
    subject_id: UUID = Field(..., alias="subject")
    period_id: Optional[UUID] = Field(default=None, alias="period")
    date: date_type
    students: List[StudentAttendanceIn] = Field(..., min_length=1)

    @field_validator("students")
    @classmethod
    def unique_students(cls, v):
        ids = [entry.student_id for entry in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Each student may appear only once")
        return v


class AttendanceRecordOut(CamelModel):
    id: UUID
    classroom_id: UUID
    subject_id: UUID
    period_id: Optional[UUID] = None
    date: date_type


class TakeAttendanceResponse(MessageResponse):
    attendance: AttendanceRecordOut
    present_count: int
    absent_count: int


class StudentAttendanceSummary(CamelModel):
    id: UUID
    name: str
    roll: Optional[str] = None
    present_count: int
    percentage: str


class SubjectAttendanceResponse(MessageResponse):
    attendance_data: List[StudentAttendanceSummary]
    total_classes: int
    total_items: int
    current_page: int
    total_pages: int
    classroom: UUID
