import os
import tempfile

# Settings are read at import time; point them at a throwaway SQLite file first
_DB_DIR = tempfile.mkdtemp(prefix="classroom-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'app.db')}"
os.environ["MAIL_SUPPRESS_SEND"] = "1"

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from classroom_app.core.database import get_db
from classroom_app.core.dependencies import CallerContext, Role
from classroom_app.main import app
from classroom_app.models import Base, ProfileStatus, School, Student, Subject, Teacher


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def call(session_factory):
    """Run one service method on a fresh session, the way one request would."""
    async def _call(service_cls, method_name, *args, **kwargs):
        async with session_factory() as session:
            return await getattr(service_cls(session), method_name)(*args, **kwargs)
    return _call


class Seeder:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def add(self, *objects):
        async with self.session_factory() as session:
            session.add_all(objects)
            await session.commit()
        return objects[0] if len(objects) == 1 else objects

    async def school(self, name="Green Valley School"):
        return await self.add(School(name=name, is_active=True))

    async def subject(self, school, name):
        return await self.add(Subject(school_id=school.id, name=name))

    async def teacher(self, school, name, subject=None, status=ProfileStatus.ACTIVE.value):
        return await self.add(Teacher(
            school_id=school.id,
            name=name,
            subject_id=subject.id if subject else None,
            user_id=None,
            status=status,
        ))

    async def student(self, school, name, roll=None, status=ProfileStatus.ACTIVE.value):
        return await self.add(Student(school_id=school.id, name=name, roll=roll, user_id=None, status=status))


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)


def principal_of(school) -> CallerContext:
    return CallerContext(school_id=school.id, profile_id=uuid4(), role=Role.PRINCIPAL)


def as_teacher(teacher) -> CallerContext:
    return CallerContext(school_id=teacher.school_id, profile_id=teacher.id, role=Role.TEACHER)


def headers_for(caller: CallerContext) -> dict:
    return {
        "X-School-Id": str(caller.school_id),
        "X-Profile-Id": str(caller.profile_id),
        "X-Role": caller.role.value,
    }


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
