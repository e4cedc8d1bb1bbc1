from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CallerContext, Role, require_role
from ..schemas.attendance_schemas import SubjectAttendanceResponse
from ..schemas.base import BulkCreateResponse, MessageResponse
from ..schemas.classroom_schemas import TeacherScheduleResponse
from ..schemas.pagination import StudentAttendanceQuery, TeacherListQuery
from ..schemas.teacher_schemas import (
    AttendanceClassesResponse,
    BulkTeacherCreate,
    MyClassroomResponse,
    TeacherCreate,
    TeacherListResponse,
    TeacherResponse,
    TeacherUpdate,
)
from ..services.attendance_service import AttendanceService
from ..services.notification_service import send_credentials_in_background
from ..services.teacher_service import TeacherService

router = APIRouter(prefix="/api/v1/teachers", tags=["Teachers"])

principal_only = require_role(Role.PRINCIPAL)
teacher_only = require_role(Role.TEACHER)


@router.get("", response_model=TeacherListResponse)
async def list_teachers(
    query: Annotated[TeacherListQuery, Query()],
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    """Paginated teachers with optional search, subject and classroom filters"""
    return await TeacherService(db).list_teachers(caller, query)


@router.post("", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    payload: TeacherCreate,
    background_tasks: BackgroundTasks,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    response, credentials = await TeacherService(db).create_teacher(caller, payload)
    background_tasks.add_task(send_credentials_in_background, credentials)
    return response


@router.post("/bulk", response_model=BulkCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_bulk_teachers(
    payload: BulkTeacherCreate,
    background_tasks: BackgroundTasks,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    """Create all listed teachers or none of them"""
    response, credentials = await TeacherService(db).create_bulk_teachers(caller, payload.teachers)
    background_tasks.add_task(send_credentials_in_background, credentials)
    return response


# Calling teacher

@router.get("/me/classroom", response_model=MyClassroomResponse)
async def get_my_classroom(
    caller: CallerContext = Depends(teacher_only),
    db: AsyncSession = Depends(get_db),
):
    return await TeacherService(db).get_my_classroom(caller)


@router.get("/me/schedule", response_model=TeacherScheduleResponse)
async def get_my_schedule(
    caller: CallerContext = Depends(teacher_only),
    db: AsyncSession = Depends(get_db),
):
    """This week's periods grouped by day, with attendance flags"""
    return await AttendanceService(db).get_teacher_schedule(caller)


@router.get("/me/attendance-classes", response_model=AttendanceClassesResponse)
async def get_my_attendance_classes(
    caller: CallerContext = Depends(teacher_only),
    db: AsyncSession = Depends(get_db),
):
    return await AttendanceService(db).get_my_attendance_classes(caller)


@router.get("/me/attendance/{classroom_id}", response_model=SubjectAttendanceResponse)
async def get_my_subject_attendance(
    classroom_id: UUID,
    query: Annotated[StudentAttendanceQuery, Query()],
    caller: CallerContext = Depends(teacher_only),
    db: AsyncSession = Depends(get_db),
):
    """Per-student attendance percentage for one subject in a classroom"""
    return await AttendanceService(db).get_my_subject_attendance(caller, classroom_id, query)


@router.put("/{teacher_id}", response_model=MessageResponse)
async def update_teacher(
    teacher_id: UUID,
    payload: TeacherUpdate,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    return await TeacherService(db).update_teacher(caller, teacher_id, payload)


@router.put("/{teacher_id}/remove", response_model=MessageResponse)
async def remove_teacher(
    teacher_id: UUID,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    """Remove a teacher from the school and release its classroom"""
    return await TeacherService(db).remove_teacher(caller, teacher_id)
