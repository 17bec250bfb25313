from sqlmodel.ext.asyncio.session import AsyncSession

from kitchen_iam.adapter.repositories.audit_event_repository import AuditEventRepository
from kitchen_iam.adapter.repositories.login_attempt_repository import LoginAttemptRepository
from kitchen_iam.adapter.repositories.rate_limit_repository import RateLimitRepository
from kitchen_iam.adapter.repositories.session_repository import SessionRepository
from kitchen_iam.adapter.repositories.user_repository import UserRepository
from kitchen_iam.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.login_attempts = LoginAttemptRepository(self.session)
        self.rate_limits = RateLimitRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    async def close(self):
        await self.session.close()
