# classroom_app/services/teacher_service.py
from typing import List, Tuple
from uuid import UUID
import logging

from sqlalchemy import and_, asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService, search_pattern
from .classroom_service import ClassroomService, to_classroom_out
from .notification_service import Credentials
from .profile_service import ProfileService
from .subject_service import SubjectService
from ..core.dependencies import CallerContext, Role
from ..core.exceptions import AppException, NotFoundError, ValidationError
from ..core.security import get_password_hash
from ..core.transaction import transactional
from ..models import Classroom, ClassroomStatus, ProfileStatus, Subject, Teacher, User
from ..schemas.base import BulkCreateResponse, MessageResponse
from ..schemas.classroom_schemas import ClassroomRef, SubjectOut
from ..schemas.pagination import SortDirection, TeacherListQuery, TeacherSortField
from ..schemas.teacher_schemas import (
    BulkTeacherItem,
    MyClassroomResponse,
    TeacherCreate,
    TeacherListResponse,
    TeacherOut,
    TeacherResponse,
    TeacherUpdate,
)

logger = logging.getLogger(__name__)

ACTIVE = ProfileStatus.ACTIVE.value

_SORT_COLUMNS = {
    TeacherSortField.NAME: Teacher.name,
    TeacherSortField.CREATED_AT: Teacher.created_at,
}


class TeacherService(BaseService[Teacher]):
    def __init__(self, db: AsyncSession):
        super().__init__(Teacher, db)
        self.profiles = ProfileService(db)
        self.subjects = SubjectService(db)
        self.classrooms = ClassroomService(db)

    async def get_active(self, caller: CallerContext, teacher_id: UUID) -> Teacher:
        teacher = await self.get_in_school(teacher_id, caller.school_id, status=ACTIVE)
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    async def _get_subject(self, caller: CallerContext, subject_id: UUID) -> Subject:
        subject = await self.subjects.get_in_school(subject_id, caller.school_id)
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    async def list_teachers(self, caller: CallerContext, query: TeacherListQuery) -> TeacherListResponse:
        """Active teachers of the school, each with its subject and led classroom"""
        stmt = (
            select(Teacher, Subject, Classroom, User.email)
            .select_from(Teacher)
            .outerjoin(Subject, Subject.id == Teacher.subject_id)
            .outerjoin(
                Classroom,
                and_(Classroom.mentor_id == Teacher.id, Classroom.status == ClassroomStatus.ACTIVE.value),
            )
            .outerjoin(User, User.id == Teacher.user_id)
            .where(Teacher.school_id == caller.school_id, Teacher.status == ACTIVE)
        )
        if query.search:
            stmt = stmt.where(Teacher.name.ilike(search_pattern(query.search), escape="\\"))
        if query.subject_id:
            stmt = stmt.where(Teacher.subject_id == query.subject_id)
        if query.classroom_id:
            stmt = stmt.where(Classroom.id == query.classroom_id)

        total = await self.db.scalar(stmt.with_only_columns(func.count(Teacher.id)).order_by(None))

        direction = desc if query.sort_dir == SortDirection.DESC else asc
        stmt = stmt.order_by(direction(_SORT_COLUMNS[query.sort_field]), direction(Teacher.id))
        stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        teachers = [
            TeacherOut(
                id=teacher.id,
                name=teacher.name,
                email=email,
                status=teacher.status,
                subject=SubjectOut(id=subject.id, name=subject.name) if subject else None,
                classroom=ClassroomRef(id=classroom.id, name=classroom.name) if classroom else None,
                created_at=teacher.created_at,
            )
            for teacher, subject, classroom, email in (await self.db.execute(stmt)).all()
        ]
        return TeacherListResponse(
            message="Teachers fetched successfully",
            teachers=teachers,
            total_teachers=total or 0,
        )

    @transactional
    async def create_teacher(
        self, caller: CallerContext, data: TeacherCreate
    ) -> Tuple[TeacherResponse, List[Credentials]]:
        """Returns the response and the credentials to e-mail after commit"""
        subject = await self._get_subject(caller, data.subject)
        teacher, credentials = await self.profiles.create_user_and_profile(
            name=data.name,
            email=data.email,
            role=Role.TEACHER,
            school_id=caller.school_id,
            profile_fields={"subject_id": subject.id},
        )
        response = TeacherResponse(
            message="Teacher created successfully",
            show_message=True,
            teacher=TeacherOut(
                id=teacher.id,
                name=teacher.name,
                email=credentials.email,
                status=teacher.status,
                subject=SubjectOut.model_validate(subject),
                created_at=teacher.created_at,
            ),
        )
        return response, [credentials]

    @transactional
    async def create_bulk_teachers(
        self, caller: CallerContext, items: List[BulkTeacherItem]
    ) -> Tuple[BulkCreateResponse, List[Credentials]]:
        """
        Create every teacher or none. Subjects are matched by name within the
        school; the first failing item aborts the batch.
        """
        credentials_list = []
        for item in items:
            try:
                subject = await self.subjects.get_by_name(caller.school_id, item.subject.strip())
                if not subject:
                    raise NotFoundError(f"Subject {item.subject} doesn't exist")
                _, credentials = await self.profiles.create_user_and_profile(
                    name=item.name,
                    email=item.email,
                    role=Role.TEACHER,
                    school_id=caller.school_id,
                    profile_fields={"subject_id": subject.id},
                )
            except AppException as e:
                raise ValidationError(f"Error creating {item.name}: {e.message}") from e
            credentials_list.append(credentials)

        logger.info(f"Bulk created {len(credentials_list)} teachers in school {caller.school_id}")
        response = BulkCreateResponse(
            message="Teachers created successfully",
            show_message=True,
            created_count=len(credentials_list),
        )
        return response, credentials_list

    @transactional
    async def update_teacher(self, caller: CallerContext, teacher_id: UUID, data: TeacherUpdate) -> MessageResponse:
        teacher = await self.get_active(caller, teacher_id)
        subject = await self._get_subject(caller, data.subject)

        teacher.name = data.name
        teacher.subject_id = subject.id

        if data.password:
            user = await self.profiles.get(teacher.user_id) if teacher.user_id else None
            if not user:
                raise NotFoundError("User account not found")
            user.hashed_password = get_password_hash(data.password)

        await self.db.flush()
        return MessageResponse(message="Teacher updated successfully", show_message=True)

    @transactional
    async def remove_teacher(self, caller: CallerContext, teacher_id: UUID) -> MessageResponse:
        """Release the classroom the teacher mentors, then mark the teacher removed"""
        teacher = await self.get_active(caller, teacher_id)

        classroom = await self.classrooms.get_mentored_classroom(teacher.id)
        if classroom:
            classroom.mentor_id = None

        teacher.status = ProfileStatus.REMOVED.value
        await self.db.flush()

        logger.info(f"Teacher {teacher.id} removed")
        return MessageResponse(message="Teacher removed successfully", show_message=True)

    async def get_my_classroom(self, caller: CallerContext) -> MyClassroomResponse:
        teacher = await self.get_active(caller, caller.profile_id)
        classroom = await self.classrooms.get_mentored_classroom(teacher.id)
        if not classroom:
            return MyClassroomResponse(classroom=None)
        return MyClassroomResponse(classroom=to_classroom_out(classroom, teacher))
