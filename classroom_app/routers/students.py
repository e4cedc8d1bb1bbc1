from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CallerContext, Role, get_caller_context, require_role
from ..schemas.base import BulkCreateResponse, MessageResponse
from ..schemas.pagination import StudentListQuery
from ..schemas.student_schemas import (
    BulkStudentCreate,
    KickStudentRequest,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from ..services.notification_service import send_credentials_in_background
from ..services.student_service import StudentService

router = APIRouter(prefix="/api/v1/students", tags=["Students"])

principal_only = require_role(Role.PRINCIPAL)


@router.get("", response_model=StudentListResponse)
async def list_students(
    query: Annotated[StudentListQuery, Query()],
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    return await StudentService(db).list_students(caller, query)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreate,
    background_tasks: BackgroundTasks,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    response, credentials = await StudentService(db).create_student(caller, payload)
    background_tasks.add_task(send_credentials_in_background, credentials)
    return response


@router.post("/bulk", response_model=BulkCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_bulk_students(
    payload: BulkStudentCreate,
    background_tasks: BackgroundTasks,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    """Create all listed students or none of them"""
    response, credentials = await StudentService(db).create_bulk_students(caller, payload.students)
    background_tasks.add_task(send_credentials_in_background, credentials)
    return response


@router.get("/classroom/{classroom_id}", response_model=StudentListResponse)
async def list_students_by_classroom(
    classroom_id: UUID,
    query: Annotated[StudentListQuery, Query()],
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    return await StudentService(db).list_students_by_classroom(caller, classroom_id, query)


@router.put("/kick", response_model=MessageResponse)
async def kick_student_from_class(
    payload: KickStudentRequest,
    caller: CallerContext = Depends(require_role(Role.PRINCIPAL, Role.TEACHER)),
    db: AsyncSession = Depends(get_db),
):
    """Take a student out of a classroom without removing it from the school"""
    return await StudentService(db).kick_student_from_class(caller, payload.student_id, payload.classroom_id)


@router.put("/{student_id}", response_model=MessageResponse)
async def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    return await StudentService(db).update_student(caller, student_id, payload)


@router.put("/{student_id}/remove", response_model=MessageResponse)
async def remove_student(
    student_id: UUID,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    return await StudentService(db).remove_student(caller, student_id)
