from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from kitchen_iam.app.repositories.session_repository import ISessionRepository
from kitchen_iam.domain.entities import RotationOutcome, Session


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def touch(self, session_id: UUID, now: datetime) -> None:
        """Update last_activity_at"""
        stmt = (
            update(Session)
            .where(Session.id == session_id)
            .values(last_activity_at=now)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def rotate_refresh_token_id(
        self, session_id: UUID, presented_token_id: str, new_token_id: str, now: datetime
    ) -> RotationOutcome:
        """
        Compare-and-swap the bound refresh token id.

        The WHERE clause carries the comparison, so the check and the write
        are one statement and two callers presenting the same id cannot both
        succeed.
        """
        stmt = (
            update(Session)
            .where(
                Session.id == session_id,
                Session.current_refresh_token_id == presented_token_id,
            )
            .values(current_refresh_token_id=new_token_id, last_activity_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        if result.rowcount == 1:
            return RotationOutcome.rotated

        # Stale or stolen token: burn the whole session
        if await self.delete(session_id):
            return RotationOutcome.reuse_detected
        return RotationOutcome.not_found

    async def delete(self, session_id: UUID) -> bool:
        """Delete a specific session by ID"""
        stmt = (
            delete(Session)
            .where(Session.id == session_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions for a user"""
        stmt = (
            delete(Session)
            .where(Session.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions past their expiry"""
        stmt = (
            delete(Session)
            .where(Session.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
