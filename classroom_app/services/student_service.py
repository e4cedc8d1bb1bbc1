# classroom_app/services/student_service.py
from typing import List, Tuple
from uuid import UUID
import logging

from sqlalchemy import asc, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService, search_pattern
from .classroom_service import ClassroomService
from .notification_service import Credentials
from .profile_service import ProfileService
from ..core.dependencies import CallerContext, Role
from ..core.exceptions import AppException, NotFoundError, ValidationError
from ..core.transaction import transactional
from ..models import ClassroomStudentAssociation, ProfileStatus, Student
from ..schemas.base import BulkCreateResponse, MessageResponse
from ..schemas.pagination import ListQuery, SortDirection, StudentListQuery, StudentSortField
from ..schemas.student_schemas import (
    StudentCreate,
    StudentListResponse,
    StudentOut,
    StudentResponse,
    StudentUpdate,
)

logger = logging.getLogger(__name__)

ACTIVE = ProfileStatus.ACTIVE.value

_SORT_COLUMNS = {
    StudentSortField.NAME: Student.name,
    StudentSortField.ROLL: Student.roll,
    StudentSortField.CREATED_AT: Student.created_at,
}


def search_students(stmt, query: ListQuery):
    if query.search:
        stmt = stmt.where(Student.name.ilike(search_pattern(query.search), escape="\\"))
    return stmt


def paginate_students(stmt, query: StudentListQuery):
    """Apply the typed sort and the page window to a statement selecting ``Student``"""
    direction = desc if query.sort_dir == SortDirection.DESC else asc
    stmt = stmt.order_by(direction(_SORT_COLUMNS[query.sort_field]), direction(Student.id))
    stmt = stmt.offset(query.offset)
    if query.limit is not None:
        stmt = stmt.limit(query.limit)
    return stmt


class StudentService(BaseService[Student]):
    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)
        self.profiles = ProfileService(db)
        self.classrooms = ClassroomService(db)

    async def get_active(self, caller: CallerContext, student_id: UUID) -> Student:
        student = await self.get_in_school(student_id, caller.school_id, status=ACTIVE)
        if not student:
            raise NotFoundError("Student not found")
        return student

    async def _page(self, base_stmt, query: StudentListQuery) -> Tuple[List[Student], int]:
        stmt = search_students(base_stmt, query)
        total = await self.db.scalar(stmt.with_only_columns(func.count(Student.id)).order_by(None))
        students = (await self.db.execute(paginate_students(stmt, query))).scalars().all()
        return list(students), total or 0

    def _list_response(self, students: List[Student], total: int, query: ListQuery) -> StudentListResponse:
        return StudentListResponse(
            message="Students fetched successfully",
            students=[StudentOut.model_validate(student) for student in students],
            total_students=total,
            current_page=query.page,
            total_pages=query.total_pages(total),
        )

    async def list_students(self, caller: CallerContext, query: StudentListQuery) -> StudentListResponse:
        stmt = select(Student).where(Student.school_id == caller.school_id, Student.status == ACTIVE)
        students, total = await self._page(stmt, query)
        return self._list_response(students, total, query)

    async def list_students_by_classroom(
        self, caller: CallerContext, classroom_id: UUID, query: StudentListQuery
    ) -> StudentListResponse:
        classroom = await self.classrooms.get_active(caller, classroom_id)
        stmt = (
            select(Student)
            .join(ClassroomStudentAssociation, ClassroomStudentAssociation.student_id == Student.id)
            .where(
                ClassroomStudentAssociation.classroom_id == classroom.id,
                Student.school_id == caller.school_id,
                Student.status == ACTIVE,
            )
        )
        students, total = await self._page(stmt, query)
        return self._list_response(students, total, query)

    @transactional
    async def create_student(
        self, caller: CallerContext, data: StudentCreate
    ) -> Tuple[StudentResponse, List[Credentials]]:
        student, credentials = await self.profiles.create_user_and_profile(
            name=data.name,
            email=data.email,
            role=Role.STUDENT,
            school_id=caller.school_id,
            profile_fields={"roll": data.roll},
        )
        response = StudentResponse(
            message="Student created successfully",
            show_message=True,
            student=StudentOut.model_validate(student),
        )
        return response, [credentials]

    @transactional
    async def create_bulk_students(
        self, caller: CallerContext, items: List[StudentCreate]
    ) -> Tuple[BulkCreateResponse, List[Credentials]]:
        credentials_list = []
        for item in items:
            try:
                _, credentials = await self.profiles.create_user_and_profile(
                    name=item.name,
                    email=item.email,
                    role=Role.STUDENT,
                    school_id=caller.school_id,
                    profile_fields={"roll": item.roll},
                )
            except AppException as e:
                raise ValidationError(f"Error creating {item.name}: {e.message}") from e
            credentials_list.append(credentials)

        logger.info(f"Bulk created {len(credentials_list)} students in school {caller.school_id}")
        response = BulkCreateResponse(
            message="Students created successfully",
            show_message=True,
            created_count=len(credentials_list),
        )
        return response, credentials_list

    @transactional
    async def update_student(self, caller: CallerContext, student_id: UUID, data: StudentUpdate) -> MessageResponse:
        student = await self.get_active(caller, student_id)
        student.name = data.name
        student.roll = data.roll
        await self.db.flush()
        return MessageResponse(message="Student updated successfully", show_message=True)

    @transactional
    async def kick_student_from_class(
        self, caller: CallerContext, student_id: UUID, classroom_id: UUID
    ) -> MessageResponse:
        classroom = await self.classrooms.get_active(caller, classroom_id)
        await self.get_active(caller, student_id)

        result = await self.db.execute(
            delete(ClassroomStudentAssociation).where(
                ClassroomStudentAssociation.classroom_id == classroom.id,
                ClassroomStudentAssociation.student_id == student_id,
            )
        )
        if result.rowcount == 0:
            raise NotFoundError("Student is not assigned to this classroom")

        logger.info(f"Student {student_id} removed from classroom {classroom.id}")
        return MessageResponse(message="Student removed from classroom successfully", show_message=True)

    @transactional
    async def remove_student(self, caller: CallerContext, student_id: UUID) -> MessageResponse:
        """Mark the student removed; classroom links and attendance history stay"""
        student = await self.get_active(caller, student_id)
        student.status = ProfileStatus.REMOVED.value
        await self.db.flush()

        logger.info(f"Student {student.id} removed")
        return MessageResponse(message="Student removed successfully", show_message=True)
