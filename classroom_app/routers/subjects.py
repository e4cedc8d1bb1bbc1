from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CallerContext, Role, get_caller_context, require_role
from ..schemas.classroom_schemas import SubjectCreate, SubjectListResponse, SubjectResponse
from ..services.subject_service import SubjectService

router = APIRouter(prefix="/api/v1/subjects", tags=["Subjects"])


@router.get("", response_model=SubjectListResponse)
async def list_subjects(
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    return await SubjectService(db).list_subjects(caller)


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
    payload: SubjectCreate,
    caller: CallerContext = Depends(require_role(Role.PRINCIPAL)),
    db: AsyncSession = Depends(get_db),
):
    return await SubjectService(db).create_subject(caller, payload.name)
