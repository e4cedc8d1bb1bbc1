from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CallerContext, Role, get_caller_context, require_role
from ..schemas.base import MessageResponse
from ..schemas.classroom_schemas import (
    AssignStudentsRequest,
    AssignStudentsResponse,
    AssignTeacherRequest,
    ClassroomCreate,
    ClassroomDaysResponse,
    ClassroomDetailsResponse,
    ClassroomListResponse,
    ClassroomResponse,
    ClassroomUpdate,
    DayPeriodsUpdate,
    SubjectListResponse,
    TimetableDayResponse,
)
from ..services.classroom_service import ClassroomService
from ..services.timetable_service import TimetableService

router = APIRouter(prefix="/api/v1/classrooms", tags=["Classrooms"])

principal_only = require_role(Role.PRINCIPAL)


@router.post("", response_model=ClassroomResponse, status_code=status.HTTP_201_CREATED)
async def create_classroom(
    payload: ClassroomCreate,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    """Create a classroom with its subjects and an empty weekly timetable"""
    return await ClassroomService(db).create_classroom(caller, payload.name, payload.subjects)


@router.get("", response_model=ClassroomListResponse)
async def list_classrooms(
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    return await ClassroomService(db).list_classrooms(caller)


@router.post("/assign/teacher", response_model=ClassroomResponse)
async def assign_teacher(
    payload: AssignTeacherRequest,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    """Make a teacher the mentor of a classroom"""
    return await ClassroomService(db).assign_teacher(caller, payload.classroom_id, payload.teacher_id)


@router.post("/assign/students", response_model=AssignStudentsResponse)
async def assign_students(
    payload: AssignStudentsRequest,
    caller: CallerContext = Depends(require_role(Role.PRINCIPAL, Role.TEACHER)),
    db: AsyncSession = Depends(get_db),
):
    """Add students to a classroom; students already in it are skipped"""
    return await ClassroomService(db).assign_students(caller, payload.classroom_id, payload.students_ids)


@router.get("/{classroom_id}", response_model=ClassroomDetailsResponse)
async def get_classroom_details(
    classroom_id: UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    return await ClassroomService(db).get_classroom_details(caller, classroom_id)


@router.get("/{classroom_id}/subjects", response_model=SubjectListResponse)
async def get_classroom_subjects(
    classroom_id: UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    return await ClassroomService(db).get_classroom_subjects(caller, classroom_id)


@router.get("/{classroom_id}/days", response_model=ClassroomDaysResponse)
async def get_classroom_days(
    classroom_id: UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    """Weekly timetable of a classroom, Monday first"""
    return await TimetableService(db).get_classroom_days(caller, classroom_id)


@router.put("/{classroom_id}/days/{day}", response_model=TimetableDayResponse)
async def set_day_periods(
    classroom_id: UUID,
    day: str,
    payload: DayPeriodsUpdate,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    """Replace every period of one day"""
    return await TimetableService(db).set_day_periods(caller, classroom_id, day, payload.periods)


@router.put("/{classroom_id}", response_model=MessageResponse)
async def update_classroom(
    classroom_id: UUID,
    payload: ClassroomUpdate,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    return await ClassroomService(db).update_classroom(caller, classroom_id, payload.name, payload.subjects)


@router.delete("/{classroom_id}", response_model=MessageResponse)
async def delete_classroom(
    classroom_id: UUID,
    caller: CallerContext = Depends(principal_only),
    db: AsyncSession = Depends(get_db),
):
    return await ClassroomService(db).delete_classroom(caller, classroom_id)
