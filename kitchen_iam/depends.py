from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from kitchen_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from kitchen_iam.api.error import login_required
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.auth import AuthenticateRequestUseCase, AuthenticatedPrincipal
from kitchen_iam.config import ApplicationConfig

ACCESS_TOKEN_COOKIE = "access-token"


def build_engine(uri: str) -> AsyncEngine:
    """
    Create the async engine.

    SQLite transactions are opened with BEGIN IMMEDIATE so concurrent
    writers queue on the database lock instead of racing between a read
    and the write that depends on it.
    """
    engine = create_async_engine(uri, echo=False, future=True)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = build_engine(ApplicationConfig.DB_URI)

AsyncSessionLocal = build_sessionmaker(engine)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_unit_of_work_factory() -> Callable[[], UnitOfWork]:
    """
    Factory of UnitOfWork instances on their own sessions.

    For work that may outlive the request, such as a shielded rate limit
    count; the caller closes each unit it creates.
    """
    return lambda: SqlAlchemyUnitOfWork(AsyncSessionLocal())


def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Access token from the cookie, or from an Authorization: Bearer header"""
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_principal(
    access_token: Optional[str] = Depends(get_access_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> AuthenticatedPrincipal:
    """
    Dependency resolving the request's access token to a live principal.

    Raises:
        ClientError: 401 LOGIN_REQUIRED if the token is missing or invalid,
            or its session is gone or expired
    """
    if not access_token:
        raise login_required()

    result = await AuthenticateRequestUseCase(uow).execute(access_token)
    if result.is_err():
        raise login_required()

    return result.value
