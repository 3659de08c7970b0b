"""
Shared fixtures: a fresh SQLite database per test and an httpx client bound
to the FastAPI app with ``get_db`` pointed at it.
"""

import pytest
import httpx
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from gradebook.main import app
from gradebook.database import Base, get_db
from gradebook.models.program import Program, Competency, Enrollment
from helpers import make_user


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    yield factory
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def admin(db):
    return await make_user(db, "admin@campus.org", role="admin", name="Admin")


@pytest.fixture
async def instructor(db):
    return await make_user(db, "teacher@campus.org", role="instructor", name="Teacher")


@pytest.fixture
async def learner(db):
    return await make_user(db, "ana@campus.org", role="learner", name="Ana")


@pytest.fixture
async def program(db):
    """Program with two competencies and no enrollments."""
    prog = Program(code="DS101", name="Data Skills")
    db.add(prog)
    await db.commit()
    await db.refresh(prog)

    c1 = Competency(program_id=prog.id, code="C1", name="Data cleaning")
    c2 = Competency(program_id=prog.id, code="C2", name="Visualisation")
    db.add_all([c1, c2])
    await db.commit()
    await db.refresh(c1)
    await db.refresh(c2)
    prog_competencies = [c1, c2]
    return prog, prog_competencies


@pytest.fixture
async def enrolled(db, learner, program):
    prog, competencies = program
    db.add(Enrollment(learner_id=learner.id, program_id=prog.id, status="active"))
    await db.commit()
    return learner, prog, competencies
