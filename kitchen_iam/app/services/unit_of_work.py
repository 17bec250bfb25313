from abc import ABC, abstractmethod

from kitchen_iam.app.repositories.audit_event_repository import IAuditEventRepository
from kitchen_iam.app.repositories.login_attempt_repository import ILoginAttemptRepository
from kitchen_iam.app.repositories.rate_limit_repository import IRateLimitRepository
from kitchen_iam.app.repositories.session_repository import ISessionRepository
from kitchen_iam.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    sessions: ISessionRepository
    login_attempts: ILoginAttemptRepository
    rate_limits: IRateLimitRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    async def close(self):
        pass
