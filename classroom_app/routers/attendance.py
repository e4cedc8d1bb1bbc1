from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CallerContext, Role, require_role
from ..schemas.attendance_schemas import TakeAttendanceRequest, TakeAttendanceResponse
from ..services.attendance_service import AttendanceService

router = APIRouter(prefix="/api/v1/attendance", tags=["Attendance"])


@router.post("", response_model=TakeAttendanceResponse, status_code=status.HTTP_201_CREATED)
async def take_attendance(
    payload: TakeAttendanceRequest,
    caller: CallerContext = Depends(require_role(Role.TEACHER)),
    db: AsyncSession = Depends(get_db),
):
    """Record one attendance session for a classroom, subject and date"""
    return await AttendanceService(db).take_attendance(caller, payload)
