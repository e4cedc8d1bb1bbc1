# classroom_app/services/classroom_service.py
"""Classroom roster workflow: creation, mentor and student assignment, updates."""
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService, unique_ids
from ..core.dependencies import CallerContext
from ..core.exceptions import ConflictError, NotFoundError
from ..core.transaction import transactional
from ..models import (
    DAYS_OF_WEEK,
    Classroom,
    ClassroomStatus,
    ClassroomStudentAssociation,
    ClassroomSubjectAssociation,
    ProfileStatus,
    Student,
    Subject,
    Teacher,
    Timetable,
)
from ..schemas.base import MessageResponse
from ..schemas.classroom_schemas import (
    AssignStudentsResponse,
    ClassroomDetailsResponse,
    ClassroomListResponse,
    ClassroomOut,
    ClassroomResponse,
    ClassroomWithMentorOut,
    SubjectListResponse,
    SubjectOut,
    TeacherRef,
)

logger = logging.getLogger(__name__)

ACTIVE = ClassroomStatus.ACTIVE.value


def to_classroom_out(classroom: Classroom, mentor: Optional[Teacher] = None) -> ClassroomWithMentorOut:
    return ClassroomWithMentorOut(
        id=classroom.id,
        name=classroom.name,
        school_id=classroom.school_id,
        mentor_id=classroom.mentor_id,
        status=classroom.status,
        created_at=classroom.created_at,
        mentor=TeacherRef(id=mentor.id, name=mentor.name) if mentor else None,
    )


class ClassroomService(BaseService[Classroom]):
    def __init__(self, db: AsyncSession):
        super().__init__(Classroom, db)

    # LOOKUPS

    async def find_active_by_name(
        self, school_id: UUID, name: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Classroom]:
        stmt = select(Classroom).where(
            Classroom.school_id == school_id,
            Classroom.name == name,
            Classroom.status == ACTIVE,
        )
        if exclude_id is not None:
            stmt = stmt.where(Classroom.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def get_active(self, caller: CallerContext, classroom_id: UUID) -> Classroom:
        classroom = await self.get_in_school(classroom_id, caller.school_id, status=ACTIVE)
        if not classroom:
            raise NotFoundError("Classroom not found")
        return classroom

    async def get_mentored_classroom(self, teacher_id: UUID) -> Optional[Classroom]:
        stmt = select(Classroom).where(
            Classroom.mentor_id == teacher_id,
            Classroom.status == ACTIVE,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _ensure_subjects(self, school_id: UUID, subject_ids: List[UUID]) -> None:
        stmt = select(Subject.id).where(Subject.id.in_(subject_ids), Subject.school_id == school_id)
        found = set((await self.db.execute(stmt)).scalars().all())
        if len(found) != len(subject_ids):
            raise NotFoundError("Some subjects not found")

    async def _insert_subject_associations(self, classroom_id: UUID, subject_ids: List[UUID]) -> None:
        await self.bulk_create(
            [{"classroom_id": classroom_id, "subject_id": subject_id} for subject_id in subject_ids],
            model=ClassroomSubjectAssociation,
        )

    # WORKFLOW OPERATIONS

    @transactional
    async def create_classroom(
        self, caller: CallerContext, name: str, subject_ids: List[UUID]
    ) -> ClassroomResponse:
        """Create the classroom, its subject links and one empty timetable per weekday"""
        if await self.find_active_by_name(caller.school_id, name):
            raise ConflictError("Classroom with this name already exist")

        subject_ids = unique_ids(subject_ids)
        await self._ensure_subjects(caller.school_id, subject_ids)

        classroom = await self.create({
            "name": name,
            "school_id": caller.school_id,
            "mentor_id": None,
            "status": ACTIVE,
        })
        await self._insert_subject_associations(classroom.id, subject_ids)
        await self.bulk_create(
            [{"classroom_id": classroom.id, "day": day} for day in DAYS_OF_WEEK],
            model=Timetable,
        )

        logger.info(f"Created classroom {classroom.id} ({name}) with {len(subject_ids)} subjects")
        return ClassroomResponse(
            message="Classroom created successfully",
            show_message=True,
            classroom=ClassroomOut.model_validate(classroom),
        )

    @transactional
    async def assign_teacher(
        self, caller: CallerContext, classroom_id: UUID, teacher_id: UUID
    ) -> ClassroomResponse:
        teacher = await self.db.scalar(
            select(Teacher).where(
                Teacher.id == teacher_id,
                Teacher.school_id == caller.school_id,
                Teacher.status == ProfileStatus.ACTIVE.value,
            )
        )
        if not teacher:
            raise NotFoundError("Teacher not found")

        classroom = await self.get_active(caller, classroom_id)

        mentored = await self.get_mentored_classroom(teacher.id)
        if mentored and mentored.id != classroom.id:
            raise ConflictError("Teacher is already assigned to a classroom")

        classroom.mentor_id = teacher.id
        await self.db.flush()

        logger.info(f"Teacher {teacher.id} now mentors classroom {classroom.id}")
        return ClassroomResponse(
            message="Teacher assigned to classroom successfully",
            show_message=True,
            classroom=ClassroomOut.model_validate(classroom),
        )

    @transactional
    async def assign_students(
        self, caller: CallerContext, classroom_id: UUID, student_ids: List[UUID]
    ) -> AssignStudentsResponse:
        """Associate students with the classroom, skipping those already associated"""
        classroom = await self.get_active(caller, classroom_id)

        requested = unique_ids(student_ids)
        stmt = select(Student.id).where(
            Student.id.in_(requested),
            Student.school_id == caller.school_id,
            Student.status == ProfileStatus.ACTIVE.value,
        )
        found = set((await self.db.execute(stmt)).scalars().all())
        if len(found) != len(requested):
            raise NotFoundError("Some students not found")

        stmt = select(ClassroomStudentAssociation.student_id).where(
            ClassroomStudentAssociation.classroom_id == classroom.id,
            ClassroomStudentAssociation.student_id.in_(requested),
        )
        already_assigned = set((await self.db.execute(stmt)).scalars().all())
        to_assign = [student_id for student_id in requested if student_id not in already_assigned]

        if not to_assign:
            return AssignStudentsResponse(
                message="All students are already assigned to this classroom",
                show_message=True,
            )

        await self.bulk_create(
            [{"student_id": student_id, "classroom_id": classroom.id} for student_id in to_assign],
            model=ClassroomStudentAssociation,
        )

        logger.info(f"Assigned {len(to_assign)} students to classroom {classroom.id}")
        return AssignStudentsResponse(
            message="Students successfully assigned to classroom",
            show_message=True,
            newly_assigned_students=to_assign,
        )

    @transactional
    async def update_classroom(
        self,
        caller: CallerContext,
        classroom_id: UUID,
        name: str,
        subject_ids: Optional[List[UUID]] = None,
    ) -> MessageResponse:
        # AsyncSession does not allow concurrent statements; both reads run in sequence
        duplicate = await self.find_active_by_name(caller.school_id, name, exclude_id=classroom_id)
        classroom = await self.get_in_school(classroom_id, caller.school_id, status=ACTIVE)

        if duplicate:
            raise ConflictError("Classroom with this name already present")
        if not classroom:
            raise NotFoundError("Classroom not found")

        if subject_ids:
            subject_ids = unique_ids(subject_ids)
            await self._ensure_subjects(caller.school_id, subject_ids)
            await self.db.execute(
                delete(ClassroomSubjectAssociation).where(
                    ClassroomSubjectAssociation.classroom_id == classroom.id
                )
            )
            await self._insert_subject_associations(classroom.id, subject_ids)

        classroom.name = name
        await self.db.flush()

        return MessageResponse(message="Classroom updated successfully", show_message=True)

    @transactional
    async def delete_classroom(self, caller: CallerContext, classroom_id: UUID) -> MessageResponse:
        """Soft delete: flip status and release the mentor"""
        classroom = await self.get_active(caller, classroom_id)

        classroom.status = ClassroomStatus.DELETED.value
        classroom.mentor_id = None
        await self.db.flush()

        logger.info(f"Classroom {classroom.id} deleted")
        return MessageResponse(message="Classroom deleted successfully", show_message=True)

    # READS

    async def list_classrooms(self, caller: CallerContext) -> ClassroomListResponse:
        stmt = (
            select(Classroom, Teacher)
            .select_from(Classroom)
            .outerjoin(Teacher, Teacher.id == Classroom.mentor_id)
            .where(Classroom.school_id == caller.school_id, Classroom.status == ACTIVE)
            .order_by(Classroom.name)
        )
        rows = (await self.db.execute(stmt)).all()
        return ClassroomListResponse(
            message="Classrooms fetched successfully",
            classrooms=[to_classroom_out(classroom, mentor) for classroom, mentor in rows],
        )

    async def get_classroom_details(self, caller: CallerContext, classroom_id: UUID) -> ClassroomDetailsResponse:
        stmt = (
            select(Classroom, Teacher)
            .select_from(Classroom)
            .outerjoin(Teacher, Teacher.id == Classroom.mentor_id)
            .where(
                Classroom.id == classroom_id,
                Classroom.school_id == caller.school_id,
                Classroom.status == ACTIVE,
            )
        )
        row = (await self.db.execute(stmt)).first()
        if not row:
            raise NotFoundError("Classroom not found")
        classroom, mentor = row
        return ClassroomDetailsResponse(
            message="Classroom details fetched successfully",
            classroom=to_classroom_out(classroom, mentor),
        )

    async def get_classroom_subjects(self, caller: CallerContext, classroom_id: UUID) -> SubjectListResponse:
        classroom = await self.get_active(caller, classroom_id)
        stmt = (
            select(Subject)
            .join(ClassroomSubjectAssociation, ClassroomSubjectAssociation.subject_id == Subject.id)
            .where(ClassroomSubjectAssociation.classroom_id == classroom.id)
            .order_by(Subject.name)
        )
        subjects = (await self.db.execute(stmt)).scalars().all()
        return SubjectListResponse(
            message="Classroom subjects fetched successfully",
            subjects=[SubjectOut.model_validate(subject) for subject in subjects],
        )
