from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from kitchen_iam.domain.entities import RotationOutcome, Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def touch(self, session_id: UUID, now: datetime) -> None:
        """Update last_activity_at"""
        pass

    @abstractmethod
    async def rotate_refresh_token_id(
        self, session_id: UUID, presented_token_id: str, new_token_id: str, now: datetime
    ) -> RotationOutcome:
        """
        Atomically replace the session's refresh token id.

        Succeeds only if presented_token_id is the currently bound id. On a
        mismatch the session is deleted and REUSE_DETECTED is returned.
        """
        pass

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool:
        """Delete a session. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions for a user. Returns count of deleted sessions."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions with expires_at < now. Returns count."""
        pass
