import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel

from kitchen_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from kitchen_iam.app.services.credentials import hash_password
from kitchen_iam.config import ApplicationConfig
from kitchen_iam.depends import (
    build_engine,
    build_sessionmaker,
    get_unit_of_work,
    get_unit_of_work_factory,
)
from kitchen_iam.domain.entities import Role, User
from tests.fixtures.json_loader import TestDataLoader


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def uow_factory(session_factory):
    """Fresh UnitOfWork on its own connection, for concurrency tests"""

    def _make():
        return SqlAlchemyUnitOfWork(session_factory())

    return _make


@pytest.fixture
def seed_user(session_factory):
    async def _seed(key: str):
        data = TestDataLoader.user(key)
        user = User(
            username=data["username"],
            password_hash=hash_password(data["password"]),
            role=Role(data["role"]),
            branch_id=data["branch_id"],
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user, data["password"]

    return _seed


@pytest.fixture
def app(session_factory, uow_factory):
    from kitchen_iam.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_unit_of_work_factory] = lambda: uow_factory
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
