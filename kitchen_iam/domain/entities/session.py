"""
Session Entity

Server-side session bound to exactly one valid refresh token id.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from kitchen_iam.domain.base import utcnow
from .enums import SessionState


class Session(SQLModel, table=True):
    """
    Session entity - binds a login to its current refresh token id.

    Business Rules:
    - At most one refresh token is valid per session: the one whose jti
      equals current_refresh_token_id
    - Tokens rotate on each refresh; presenting a stale jti deletes the session
    - Expires 7 days after login; expired rows are deleted lazily or by sweep
    - Logout, reuse detection and forced password change delete the row
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    current_refresh_token_id: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_activity_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_session_expires_at", "expires_at"),)

    def state(self, now: Optional[datetime] = None) -> SessionState:
        now = now or utcnow()
        if self.expires_at > now:
            return SessionState.active
        return SessionState.expired
