import pytest
from sqlalchemy import func, select

from classroom_app.core.exceptions import ConflictError, NotFoundError, ValidationError
from classroom_app.core.security import verify_password
from classroom_app.models import Classroom, ProfileStatus, Teacher, User
from classroom_app.schemas.pagination import TeacherListQuery
from classroom_app.schemas.teacher_schemas import BulkTeacherItem, TeacherCreate, TeacherUpdate
from classroom_app.services.classroom_service import ClassroomService
from classroom_app.services.teacher_service import TeacherService

from conftest import as_teacher, principal_of


@pytest.fixture
async def school_setup(seed):
    school = await seed.school()
    math = await seed.subject(school, "Math")
    science = await seed.subject(school, "Science")
    return school, math, science


async def test_create_teacher_creates_user_with_hashed_password(call, db, school_setup):
    school, math, _ = school_setup

    response, credentials = await call(
        TeacherService, "create_teacher", principal_of(school),
        TeacherCreate(name="Asha Rao", email="Asha.Rao@school.org", subject=math.id),
    )

    assert response.teacher.subject.name == "Math"
    assert response.teacher.email == "asha.rao@school.org"
    assert len(credentials) == 1

    user = await db.scalar(select(User).where(User.email == "asha.rao@school.org"))
    assert user.role == "teacher"
    assert user.hashed_password != credentials[0].password
    assert verify_password(credentials[0].password, user.hashed_password)


async def test_create_teacher_with_taken_email_conflicts(call, school_setup):
    school, math, _ = school_setup
    caller = principal_of(school)
    payload = TeacherCreate(name="Asha Rao", email="asha@school.org", subject=math.id)
    await call(TeacherService, "create_teacher", caller, payload)

    with pytest.raises(ConflictError):
        await call(TeacherService, "create_teacher", caller, payload)


async def test_bulk_create_aborts_whole_batch_on_unknown_subject(call, db, school_setup):
    school, *_ = school_setup

    with pytest.raises(ValidationError, match="Error creating Ravi Iyer"):
        await call(TeacherService, "create_bulk_teachers", principal_of(school), [
            BulkTeacherItem(name="Asha Rao", email="asha@school.org", subject="Math"),
            BulkTeacherItem(name="Ravi Iyer", email="ravi@school.org", subject="Astrology"),
        ])

    assert await db.scalar(select(func.count(Teacher.id))) == 0
    assert await db.scalar(select(func.count(User.id))) == 0


async def test_bulk_create_matches_subjects_by_name(call, db, school_setup):
    school, math, science = school_setup

    response, credentials = await call(TeacherService, "create_bulk_teachers", principal_of(school), [
        BulkTeacherItem(name="Asha Rao", email="asha@school.org", subject="Math"),
        BulkTeacherItem(name="Ravi Iyer", email="ravi@school.org", subject="Science"),
    ])

    assert response.created_count == 2
    assert [c.email for c in credentials] == ["asha@school.org", "ravi@school.org"]
    subject_ids = (await db.execute(select(Teacher.subject_id).order_by(Teacher.name))).scalars().all()
    assert subject_ids == [math.id, science.id]


async def test_bulk_create_rejects_duplicate_email_in_batch(call, db, school_setup):
    school, *_ = school_setup

    with pytest.raises(ValidationError, match="already exists"):
        await call(TeacherService, "create_bulk_teachers", principal_of(school), [
            BulkTeacherItem(name="Asha Rao", email="asha@school.org", subject="Math"),
            BulkTeacherItem(name="Asha R", email="asha@school.org", subject="Math"),
        ])

    assert await db.scalar(select(func.count(Teacher.id))) == 0


async def test_list_teachers_filters_and_paginates(call, seed, school_setup):
    school, math, science = school_setup
    caller = principal_of(school)
    asha = await seed.teacher(school, "Asha Rao", math)
    await seed.teacher(school, "Ravi Iyer", science)
    await seed.teacher(school, "Meera Das", math)
    await seed.teacher(school, "Gone Teacher", math, status=ProfileStatus.REMOVED.value)
    room = (await call(ClassroomService, "create_classroom", caller, "Grade 5A", [math.id])).classroom
    await call(ClassroomService, "assign_teacher", caller, room.id, asha.id)

    by_name = await call(TeacherService, "list_teachers", caller, TeacherListQuery(sort_field="name", sort_dir="asc"))
    assert by_name.total_teachers == 3
    assert [t.name for t in by_name.teachers] == ["Asha Rao", "Meera Das", "Ravi Iyer"]
    assert by_name.teachers[0].classroom.name == "Grade 5A"
    assert by_name.teachers[1].classroom is None

    math_only = await call(TeacherService, "list_teachers", caller, TeacherListQuery(subject_id=math.id))
    assert {t.name for t in math_only.teachers} == {"Asha Rao", "Meera Das"}

    in_room = await call(TeacherService, "list_teachers", caller, TeacherListQuery(classroom_id=room.id))
    assert [t.name for t in in_room.teachers] == ["Asha Rao"]

    searched = await call(TeacherService, "list_teachers", caller, TeacherListQuery(search="iye"))
    assert [t.name for t in searched.teachers] == ["Ravi Iyer"]

    page = await call(
        TeacherService, "list_teachers", caller,
        TeacherListQuery(sort_field="name", sort_dir="asc", page=2, page_size=2),
    )
    assert page.total_teachers == 3
    assert [t.name for t in page.teachers] == ["Ravi Iyer"]


async def test_search_treats_wildcards_literally(call, seed, school_setup):
    school, math, _ = school_setup
    await seed.teacher(school, "Asha Rao", math)

    response = await call(TeacherService, "list_teachers", principal_of(school), TeacherListQuery(search="%"))

    assert response.teachers == []


async def test_update_teacher_rehashes_password(call, db, school_setup):
    school, math, science = school_setup
    caller = principal_of(school)
    created, _ = await call(
        TeacherService, "create_teacher", caller,
        TeacherCreate(name="Asha Rao", email="asha@school.org", subject=math.id),
    )

    await call(
        TeacherService, "update_teacher", caller, created.teacher.id,
        TeacherUpdate(name="Asha R. Rao", subject=science.id, password="new-secret"),
    )

    teacher = await db.get(Teacher, created.teacher.id)
    user = await db.get(User, teacher.user_id)
    assert teacher.name == "Asha R. Rao"
    assert teacher.subject_id == science.id
    assert verify_password("new-secret", user.hashed_password)


async def test_remove_teacher_releases_classroom(call, db, seed, school_setup):
    school, math, _ = school_setup
    caller = principal_of(school)
    teacher = await seed.teacher(school, "Asha Rao", math)
    room = (await call(ClassroomService, "create_classroom", caller, "Grade 5A", [math.id])).classroom
    await call(ClassroomService, "assign_teacher", caller, room.id, teacher.id)

    await call(TeacherService, "remove_teacher", caller, teacher.id)

    assert (await db.get(Teacher, teacher.id)).status == ProfileStatus.REMOVED.value
    assert (await db.get(Classroom, room.id)).mentor_id is None

    with pytest.raises(NotFoundError):
        await call(TeacherService, "remove_teacher", caller, teacher.id)


async def test_get_my_classroom(call, seed, school_setup):
    school, math, _ = school_setup
    caller = principal_of(school)
    teacher = await seed.teacher(school, "Asha Rao", math)

    empty = await call(TeacherService, "get_my_classroom", as_teacher(teacher))
    assert empty.classroom is None

    room = (await call(ClassroomService, "create_classroom", caller, "Grade 5A", [math.id])).classroom
    await call(ClassroomService, "assign_teacher", caller, room.id, teacher.id)

    mine = await call(TeacherService, "get_my_classroom", as_teacher(teacher))
    assert mine.classroom.id == room.id
    assert mine.classroom.mentor.name == "Asha Rao"
