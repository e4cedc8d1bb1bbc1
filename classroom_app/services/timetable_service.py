# classroom_app/services/timetable_service.py
from collections import defaultdict
from typing import Dict, Iterable, List
from uuid import UUID
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .base_service import BaseService, unique_ids
from .classroom_service import ClassroomService
from ..core.dependencies import CallerContext
from ..core.exceptions import NotFoundError, ValidationError
from ..core.transaction import transactional
from ..models import (
    DAYS_OF_WEEK,
    Classroom,
    ClassroomStatus,
    ClassroomSubjectAssociation,
    DayOfWeek,
    Period,
    ProfileStatus,
    Subject,
    Teacher,
    Timetable,
)
from ..schemas.classroom_schemas import (
    ClassroomDaysResponse,
    ClassroomRef,
    PeriodIn,
    PeriodOut,
    SubjectOut,
    TeacherRef,
    TimetableDayOut,
    TimetableDayResponse,
)

logger = logging.getLogger(__name__)


def normalize_day(day: str) -> str:
    try:
        return DayOfWeek(str(day).strip().capitalize()).value
    except ValueError:
        raise ValidationError(f"Invalid day: {day}")


def day_order(day: str) -> int:
    return DAYS_OF_WEEK.index(day)


class TimetableService(BaseService[Timetable]):
    def __init__(self, db: AsyncSession):
        super().__init__(Timetable, db)

    async def fetch_periods(self, timetable_ids: Iterable[UUID]) -> Dict[str, List[PeriodOut]]:
        """
        Load periods with their subject, teacher and classroom names.

        Returns day name -> periods sorted by start time. Periods of deleted
        classrooms are left out.
        """
        stmt = (
            select(Period, Timetable.day, Subject, Teacher, Classroom)
            .select_from(Period)
            .join(Timetable, Timetable.id == Period.timetable_id)
            .join(Subject, Subject.id == Period.subject_id)
            .join(Teacher, Teacher.id == Period.teacher_id)
            .join(Classroom, Classroom.id == Period.classroom_id)
            .where(
                Period.timetable_id.in_(list(timetable_ids)),
                Classroom.status == ClassroomStatus.ACTIVE.value,
            )
        )

        by_day: Dict[str, List[PeriodOut]] = defaultdict(list)
        for period, day, subject, teacher, classroom in (await self.db.execute(stmt)).all():
            by_day[day].append(PeriodOut(
                id=period.id,
                subject=SubjectOut(id=subject.id, name=subject.name),
                teacher=TeacherRef(id=teacher.id, name=teacher.name),
                classroom=ClassroomRef(id=classroom.id, name=classroom.name),
                start_time=period.start_time,
                end_time=period.end_time,
            ))

        for periods in by_day.values():
            # "HH:mm" strings compare chronologically
            periods.sort(key=lambda p: (p.start_time, p.end_time))
        return dict(by_day)

    async def get_classroom_days(self, caller: CallerContext, classroom_id: UUID) -> ClassroomDaysResponse:
        classroom = await ClassroomService(self.db).get_active(caller, classroom_id)

        timetables = (await self.db.execute(
            select(Timetable).where(Timetable.classroom_id == classroom.id)
        )).scalars().all()
        periods_by_day = await self.fetch_periods(timetable_ids=[t.id for t in timetables])

        days = [
            TimetableDayOut(id=timetable.id, day=timetable.day, periods=periods_by_day.get(timetable.day, []))
            for timetable in sorted(timetables, key=lambda t: day_order(t.day))
        ]
        return ClassroomDaysResponse(message="Classroom days fetched successfully", days=days)

    @transactional
    async def set_day_periods(
        self, caller: CallerContext, classroom_id: UUID, day: str, periods: List[PeriodIn]
    ) -> TimetableDayResponse:
        """Replace all periods of one classroom day"""
        day = normalize_day(day)
        classroom = await ClassroomService(self.db).get_active(caller, classroom_id)

        ordered = sorted(periods, key=lambda p: p.start_time)
        for previous, current in zip(ordered, ordered[1:]):
            if current.start_time < previous.end_time:
                raise ValidationError(
                    f"Periods {previous.start_time}-{previous.end_time} and "
                    f"{current.start_time}-{current.end_time} overlap"
                )

        subject_ids = unique_ids(p.subject_id for p in ordered)
        if subject_ids:
            linked = set((await self.db.execute(
                select(ClassroomSubjectAssociation.subject_id).where(
                    ClassroomSubjectAssociation.classroom_id == classroom.id,
                    ClassroomSubjectAssociation.subject_id.in_(subject_ids),
                )
            )).scalars().all())
            if len(linked) != len(subject_ids):
                raise ValidationError("Some subjects are not taught in this classroom")

        teacher_ids = unique_ids(p.teacher_id for p in ordered)
        if teacher_ids:
            found = set((await self.db.execute(
                select(Teacher.id).where(
                    Teacher.id.in_(teacher_ids),
                    Teacher.school_id == caller.school_id,
                    Teacher.status == ProfileStatus.ACTIVE.value,
                )
            )).scalars().all())
            if len(found) != len(teacher_ids):
                raise NotFoundError("Some teachers not found")

        timetable = await self.db.scalar(
            select(Timetable)
            .options(selectinload(Timetable.periods))
            .where(Timetable.classroom_id == classroom.id, Timetable.day == day)
        )
        if timetable is None:
            timetable = Timetable(classroom_id=classroom.id, day=day, periods=[])
            self.db.add(timetable)

        timetable.periods = [
            Period(
                classroom_id=classroom.id,
                subject_id=p.subject_id,
                teacher_id=p.teacher_id,
                start_time=p.start_time,
                end_time=p.end_time,
                position=position,
            )
            for position, p in enumerate(ordered)
        ]
        await self.db.flush()

        periods_by_day = await self.fetch_periods(timetable_ids=[timetable.id])
        logger.info(f"Set {len(ordered)} periods for classroom {classroom.id} on {day}")
        return TimetableDayResponse(
            message="Timetable updated successfully",
            show_message=True,
            timetable=TimetableDayOut(id=timetable.id, day=day, periods=periods_by_day.get(day, [])),
        )
