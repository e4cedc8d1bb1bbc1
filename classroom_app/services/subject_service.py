# classroom_app/services/subject_service.py
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService
from ..core.dependencies import CallerContext
from ..core.exceptions import ConflictError, ValidationError
from ..core.transaction import transactional
from ..models import Subject
from ..schemas.classroom_schemas import SubjectListResponse, SubjectOut, SubjectResponse

logger = logging.getLogger(__name__)


class SubjectService(BaseService[Subject]):
    def __init__(self, db: AsyncSession):
        super().__init__(Subject, db)

    async def get_by_name(self, school_id: UUID, name: str) -> Optional[Subject]:
        stmt = select(Subject).where(Subject.school_id == school_id, Subject.name == name)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_subjects(self, caller: CallerContext) -> SubjectListResponse:
        stmt = select(Subject).where(Subject.school_id == caller.school_id).order_by(Subject.name)
        subjects = (await self.db.execute(stmt)).scalars().all()
        return SubjectListResponse(
            message="Subjects fetched successfully",
            subjects=[SubjectOut.model_validate(subject) for subject in subjects],
        )

    @transactional
    async def create_subject(self, caller: CallerContext, name: str) -> SubjectResponse:
        name = name.strip()
        if not name:
            raise ValidationError("Subject name is required")
        if await self.get_by_name(caller.school_id, name):
            raise ConflictError(f"Subject {name} already exists")

        subject = await self.create({"name": name, "school_id": caller.school_id})
        logger.info(f"Created subject {subject.id} ({name})")
        return SubjectResponse(
            message="Subject created successfully",
            show_message=True,
            subject=SubjectOut.model_validate(subject),
        )
