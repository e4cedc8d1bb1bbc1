import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import InvalidRequestError

from classroom_app.core.exceptions import ConflictError, NotFoundError
from classroom_app.core.transaction import run_in_transaction
from classroom_app.models import Subject


async def _count_subjects(session_factory):
    async with session_factory() as session:
        return await session.scalar(select(func.count(Subject.id)))


async def test_commits_when_work_returns(session_factory, seed):
    school = await seed.school()

    async def work(session):
        session.add(Subject(school_id=school.id, name="Math"))
        await session.flush()
        return "done"

    async with session_factory() as session:
        assert await run_in_transaction(session, work) == "done"

    assert await _count_subjects(session_factory) == 1


async def test_rolls_back_and_reraises_original_error(session_factory, seed):
    school = await seed.school()

    async def work(session):
        session.add(Subject(school_id=school.id, name="Math"))
        await session.flush()
        raise NotFoundError("Teacher not found")

    async with session_factory() as session:
        with pytest.raises(NotFoundError, match="Teacher not found"):
            await run_in_transaction(session, work)

    assert await _count_subjects(session_factory) == 0


async def test_unique_violation_becomes_conflict(session_factory, seed):
    school = await seed.school()
    await seed.subject(school, "Math")

    async def work(session):
        session.add(Subject(school_id=school.id, name="Math"))
        await session.flush()

    async with session_factory() as session:
        with pytest.raises(ConflictError):
            await run_in_transaction(session, work)

    assert await _count_subjects(session_factory) == 1


async def test_nested_use_is_rejected(session_factory):
    async def inner(session):
        return None

    async def outer(session):
        return await run_in_transaction(session, inner)

    async with session_factory() as session:
        with pytest.raises(InvalidRequestError):
            await run_in_transaction(session, outer)
