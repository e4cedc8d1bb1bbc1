# classroom_app/services/attendance_service.py
"""Attendance taking and aggregation.

Aggregates are composed from a few plain queries: one page of students, one
count of attendance sessions and one grouped count of "present" marks for the
students on that page.
"""
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService, unique_ids
from .classroom_service import ClassroomService
from .student_service import paginate_students, search_students
from .timetable_service import TimetableService
from ..core.dependencies import CallerContext
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.transaction import transactional
from ..models import (
    DAYS_OF_WEEK,
    AttendanceRecord,
    AttendanceStatus,
    Classroom,
    ClassroomStudentAssociation,
    ClassroomSubjectAssociation,
    Period,
    ProfileStatus,
    Student,
    StudentAttendance,
    Teacher,
)
from ..schemas.attendance_schemas import (
    AttendanceRecordOut,
    StudentAttendanceSummary,
    SubjectAttendanceResponse,
    TakeAttendanceRequest,
    TakeAttendanceResponse,
)
from ..schemas.classroom_schemas import ClassroomRef, ScheduledPeriodOut, TeacherScheduleResponse
from ..schemas.pagination import StudentAttendanceQuery
from ..schemas.teacher_schemas import AttendanceClassesResponse

logger = logging.getLogger(__name__)


def week_bounds(today: date) -> Tuple[date, date]:
    """Sunday..Saturday week containing ``today``"""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def attendance_percentage(present_count: int, total_classes: int) -> str:
    if not total_classes:
        return "0.00"
    return f"{present_count / total_classes * 100:.2f}"


class AttendanceService(BaseService[AttendanceRecord]):
    def __init__(self, db: AsyncSession):
        super().__init__(AttendanceRecord, db)
        self.classrooms = ClassroomService(db)
        self.timetables = TimetableService(db)

    async def _get_caller_teacher(self, caller: CallerContext) -> Teacher:
        teacher = await self.db.scalar(
            select(Teacher).where(
                Teacher.id == caller.profile_id,
                Teacher.school_id == caller.school_id,
                Teacher.status == ProfileStatus.ACTIVE.value,
            )
        )
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    # SCHEDULE

    async def get_teacher_schedule(
        self, caller: CallerContext, teacher_id: Optional[UUID] = None, today: Optional[date] = None
    ) -> TeacherScheduleResponse:
        """
        Weekly schedule of a teacher grouped by day.

        Every timetable day holding at least one period of the teacher is
        returned whole, periods of colleagues included.

        Each period is flagged ``attendance_taken`` when an attendance session
        for it is dated inside the current Sunday..Saturday week. Days come out
        in week order, periods in start-time order.
        """
        teacher_id = teacher_id or caller.profile_id
        today = today or date.today()
        start_of_week, end_of_week = week_bounds(today)

        timetable_ids = (await self.db.execute(
            select(Period.timetable_id).where(Period.teacher_id == teacher_id).distinct()
        )).scalars().all()
        periods_by_day = {}
        if timetable_ids:
            periods_by_day = await self.timetables.fetch_periods(timetable_ids=timetable_ids)
        period_ids = [p.id for periods in periods_by_day.values() for p in periods]

        taken = set()
        if period_ids:
            stmt = select(AttendanceRecord.period_id).where(
                AttendanceRecord.period_id.in_(period_ids),
                AttendanceRecord.date >= start_of_week,
                AttendanceRecord.date <= end_of_week,
            )
            taken = set((await self.db.execute(stmt)).scalars().all())

        timetable: Dict[str, List[ScheduledPeriodOut]] = {}
        for day in DAYS_OF_WEEK:
            if day not in periods_by_day:
                continue
            timetable[day] = [
                ScheduledPeriodOut(**period.model_dump(), attendance_taken=period.id in taken)
                for period in periods_by_day[day]
            ]
        return TeacherScheduleResponse(timetable=timetable)

    # SUBJECT ATTENDANCE

    async def get_subject_attendance(
        self,
        caller: CallerContext,
        classroom_id: UUID,
        subject_id: UUID,
        query: StudentAttendanceQuery,
    ) -> SubjectAttendanceResponse:
        """
        One page of the classroom's students with their presence count and
        percentage for ``subject_id``. Sorting and paging apply to students
        before any attendance is counted.
        """
        classroom = await self.classrooms.get_in_school(classroom_id, caller.school_id)
        if not classroom:
            raise NotFoundError("Classroom not found")

        stmt = (
            select(Student)
            .join(ClassroomStudentAssociation, ClassroomStudentAssociation.student_id == Student.id)
            .where(
                ClassroomStudentAssociation.classroom_id == classroom.id,
                Student.school_id == caller.school_id,
                Student.status == ProfileStatus.ACTIVE.value,
            )
        )
        stmt = search_students(stmt, query)
        total_items = await self.db.scalar(stmt.with_only_columns(func.count(Student.id)).order_by(None)) or 0
        students = (await self.db.execute(paginate_students(stmt, query))).scalars().all()

        total_classes = await self.db.scalar(
            select(func.count(AttendanceRecord.id)).where(
                AttendanceRecord.classroom_id == classroom.id,
                AttendanceRecord.subject_id == subject_id,
            )
        ) or 0

        present_counts: Dict[UUID, int] = {}
        if students and total_classes:
            stmt = (
                select(StudentAttendance.student_id, func.count(StudentAttendance.id))
                .join(AttendanceRecord, AttendanceRecord.id == StudentAttendance.attendance_record_id)
                .where(
                    AttendanceRecord.classroom_id == classroom.id,
                    AttendanceRecord.subject_id == subject_id,
                    StudentAttendance.status == AttendanceStatus.PRESENT.value,
                    StudentAttendance.student_id.in_([s.id for s in students]),
                )
                .group_by(StudentAttendance.student_id)
            )
            present_counts = dict((await self.db.execute(stmt)).all())

        attendance_data = [
            StudentAttendanceSummary(
                id=student.id,
                name=student.name,
                roll=student.roll,
                present_count=present_counts.get(student.id, 0),
                percentage=attendance_percentage(present_counts.get(student.id, 0), total_classes),
            )
            for student in students
        ]
        return SubjectAttendanceResponse(
            message="Attendance fetched successfully",
            attendance_data=attendance_data,
            total_classes=total_classes,
            total_items=total_items,
            current_page=query.page,
            total_pages=query.total_pages(total_items),
            classroom=classroom.id,
        )

    async def get_my_subject_attendance(
        self, caller: CallerContext, classroom_id: UUID, query: StudentAttendanceQuery
    ) -> SubjectAttendanceResponse:
        """Subject attendance for the calling teacher, defaulting to the teacher's own subject"""
        subject_id = query.subject_id
        if subject_id is None:
            teacher = await self._get_caller_teacher(caller)
            if not teacher.subject_id:
                raise ValidationError("No subject assigned to this teacher")
            subject_id = teacher.subject_id
        return await self.get_subject_attendance(caller, classroom_id, subject_id, query)

    async def get_my_attendance_classes(self, caller: CallerContext) -> AttendanceClassesResponse:
        stmt = (
            select(Classroom.id, Classroom.name)
            .join(AttendanceRecord, AttendanceRecord.classroom_id == Classroom.id)
            .where(AttendanceRecord.mentor_id == caller.profile_id, Classroom.school_id == caller.school_id)
            .distinct()
            .order_by(Classroom.name)
        )
        rows = (await self.db.execute(stmt)).all()
        return AttendanceClassesResponse(classrooms=[ClassroomRef(id=row.id, name=row.name) for row in rows])

    # TAKING ATTENDANCE

    @transactional
    async def take_attendance(self, caller: CallerContext, request: TakeAttendanceRequest) -> TakeAttendanceResponse:
        """Record one attendance session and a status row per listed student"""
        teacher = await self._get_caller_teacher(caller)
        classroom = await self.classrooms.get_active(caller, request.classroom_id)

        linked = await self.db.scalar(
            select(ClassroomSubjectAssociation.id).where(
                ClassroomSubjectAssociation.classroom_id == classroom.id,
                ClassroomSubjectAssociation.subject_id == request.subject_id,
            )
        )
        if not linked:
            raise NotFoundError("Subject is not taught in this classroom")

        if request.period_id is not None:
            period = await self.db.scalar(
                select(Period).where(Period.id == request.period_id, Period.classroom_id == classroom.id)
            )
            if not period:
                raise NotFoundError("Period not found")

        existing = await self.db.scalar(
            select(AttendanceRecord.id).where(
                AttendanceRecord.classroom_id == classroom.id,
                AttendanceRecord.subject_id == request.subject_id,
                AttendanceRecord.date == request.date,
                AttendanceRecord.period_id.is_(None)
                if request.period_id is None
                else AttendanceRecord.period_id == request.period_id,
            )
        )
        if existing:
            raise ConflictError("Attendance already taken for this session")

        student_ids = unique_ids(entry.student_id for entry in request.students)
        members = set((await self.db.execute(
            select(ClassroomStudentAssociation.student_id)
            .join(Student, Student.id == ClassroomStudentAssociation.student_id)
            .where(
                ClassroomStudentAssociation.classroom_id == classroom.id,
                ClassroomStudentAssociation.student_id.in_(student_ids),
                Student.status == ProfileStatus.ACTIVE.value,
            )
        )).scalars().all())
        if len(members) != len(student_ids):
            raise NotFoundError("Some students not found in this classroom")

        record = await self.create({
            "classroom_id": classroom.id,
            "subject_id": request.subject_id,
            "period_id": request.period_id,
            "mentor_id": teacher.id,
            "date": request.date,
        })
        await self.bulk_create(
            [
                {
                    "student_id": entry.student_id,
                    "attendance_record_id": record.id,
                    "status": entry.status.value,
                }
                for entry in request.students
            ],
            model=StudentAttendance,
        )

        present_count = sum(1 for entry in request.students if entry.status == AttendanceStatus.PRESENT)
        logger.info(
            f"Attendance {record.id} taken for classroom {classroom.id} on {request.date}: "
            f"{present_count}/{len(request.students)} present"
        )
        return TakeAttendanceResponse(
            message="Attendance taken successfully",
            show_message=True,
            attendance=AttendanceRecordOut.model_validate(record),
            present_count=present_count,
            absent_count=len(request.students) - present_count,
        )
