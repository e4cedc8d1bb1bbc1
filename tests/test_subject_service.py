import pytest

from classroom_app.core.exceptions import ConflictError, ValidationError
from classroom_app.services.subject_service import SubjectService

from conftest import principal_of


async def test_create_and_list_subjects(call, seed):
    school = await seed.school()
    other = await seed.school("Hill Side School")
    await seed.subject(other, "Geography")
    caller = principal_of(school)

    created = await call(SubjectService, "create_subject", caller, "  Science ")
    await call(SubjectService, "create_subject", caller, "Art")

    assert created.subject.name == "Science"
    listed = await call(SubjectService, "list_subjects", caller)
    assert [s.name for s in listed.subjects] == ["Art", "Science"]


async def test_duplicate_subject_is_conflict(call, seed):
    school = await seed.school()
    await seed.subject(school, "Math")

    with pytest.raises(ConflictError, match="Subject Math already exists"):
        await call(SubjectService, "create_subject", principal_of(school), "Math")


async def test_blank_subject_name_is_rejected(call, seed):
    school = await seed.school()

    with pytest.raises(ValidationError):
        await call(SubjectService, "create_subject", principal_of(school), "   ")
