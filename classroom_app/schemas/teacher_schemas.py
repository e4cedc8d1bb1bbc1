# classroom_app/schemas/teacher_schemas.py
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from .base import CamelModel, MessageResponse
from .classroom_schemas import ClassroomRef, ClassroomWithMentorOut, SubjectOut


class TeacherCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    subject: UUID


class BulkTeacherItem(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    subject: str = Field(..., min_length=1, description="Subject name")


class BulkTeacherCreate(CamelModel):
    teachers: List[BulkTeacherItem] = Field(..., min_length=1)


class TeacherUpdate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    subject: UUID
    password: Optional[str] = Field(default=None, min_length=6, max_length=72)


class TeacherOut(CamelModel):
    id: UUID
    name: str
    email: Optional[str] = None
    status: str
    subject: Optional[SubjectOut] = None
    classroom: Optional[ClassroomRef] = None
    created_at: Optional[datetime] = None


class TeacherListResponse(MessageResponse):
    teachers: List[TeacherOut]
    total_teachers: int


class MyClassroomResponse(CamelModel):
    classroom: Optional[ClassroomWithMentorOut] = None


class AttendanceClassesResponse(CamelModel):
    classrooms: List[ClassroomRef]


class TeacherResponse(MessageResponse):
    teacher: TeacherOut
