"""
Cleanup Use Case

Periodic purge of expired sessions, old login attempts and stale
rate limit counters.
"""

import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, Optional

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.config import ApplicationConfig
from kitchen_iam.domain.base import utcnow
from kitchen_iam.libs.result import Result, Return

logger = logging.getLogger(__name__)


class CleanupReport(BaseModel):
    """Rows removed per job; a failed job reports None"""

    expired_sessions: Optional[int] = None
    login_attempts: Optional[int] = None
    rate_limit_counters: Optional[int] = None
    ran_at: datetime


class CleanupUseCase:
    """
    Use case for the maintenance sweep.

    Business Rules:
    - Each job commits on its own; one failure does not stop the rest
    - Login attempts are kept LOGIN_ATTEMPT_RETENTION_DAYS days
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, now: Optional[datetime] = None) -> Result[CleanupReport]:
        now = now or utcnow()
        retention_cutoff = now - timedelta(days=ApplicationConfig.LOGIN_ATTEMPT_RETENTION_DAYS)

        jobs: Dict[str, Callable[[], Awaitable[int]]] = {
            "expired_sessions": lambda: self.uow.sessions.delete_expired(now),
            "login_attempts": lambda: self.uow.login_attempts.delete_older_than(retention_cutoff),
            "rate_limit_counters": lambda: self.uow.rate_limits.delete_expired(now),
        }

        results: Dict[str, Optional[int]] = {}
        for name, job in jobs.items():
            results[name] = await self._run(name, job)

        logger.info(f"Cleanup finished: {results}")
        return Return.ok(CleanupReport(ran_at=now, **results))

    async def _run(self, name: str, job: Callable[[], Awaitable[int]]) -> Optional[int]:
        async with self.uow:
            try:
                count = await job()
                await self.uow.commit()
            except SQLAlchemyError as e:
                logger.error(f"Cleanup job {name} failed: {e}")
                return None
        return count
