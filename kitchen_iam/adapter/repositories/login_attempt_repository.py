from datetime import datetime

from sqlalchemy import delete, func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from kitchen_iam.app.repositories.login_attempt_repository import ILoginAttemptRepository
from kitchen_iam.domain.entities import LoginAttempt


class LoginAttemptRepository(ILoginAttemptRepository):
    """LoginAttempt repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_recent_failures(
        self, username: str, client_address: str, since: datetime
    ) -> int:
        """Count failures matching either signal (union, not intersection)"""
        stmt = select(func.count()).select_from(LoginAttempt).where(
            LoginAttempt.success == False,  # noqa: E712
            LoginAttempt.created_at >= since,
            or_(
                LoginAttempt.username == username,
                LoginAttempt.client_address == client_address,
            ),
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def record(self, attempt: LoginAttempt) -> LoginAttempt:
        """Append an attempt"""
        self.session.add(attempt)
        await self.session.flush()
        return attempt

    async def clear_failures(self, username: str, client_address: str) -> int:
        """Delete prior failures so the lockout clock restarts"""
        stmt = (
            delete(LoginAttempt)
            .where(
                LoginAttempt.success == False,  # noqa: E712
                or_(
                    LoginAttempt.username == username,
                    LoginAttempt.client_address == client_address,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Purge attempts past the retention window"""
        stmt = (
            delete(LoginAttempt)
            .where(LoginAttempt.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
