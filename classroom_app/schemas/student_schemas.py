# classroom_app/schemas/student_schemas.py
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from .base import CamelModel, MessageResponse


class StudentCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    roll: Optional[str] = Field(default=None, max_length=20)


class BulkStudentCreate(CamelModel):
    students: List[StudentCreate] = Field(..., min_length=1)


class StudentUpdate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    roll: Optional[str] = Field(default=None, max_length=20)


class KickStudentRequest(CamelModel):
    student_id: UUID
    classroom_id: UUID


class StudentOut(CamelModel):
    id: UUID
    name: str
    roll: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class StudentListResponse(MessageResponse):
    students: List[StudentOut]
    total_students: int
    current_page: int
    total_pages: int


class StudentResponse(MessageResponse):
    student: StudentOut
