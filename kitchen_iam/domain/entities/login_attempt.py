"""
LoginAttempt Entity

Append-only record of login successes and failures used for lockout.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from kitchen_iam.domain.base import utcnow


class LoginAttempt(SQLModel, table=True):
    """
    LoginAttempt entity - one row per login try.

    Business Rules:
    - Failures are counted by username OR client address inside the lockout window
    - A successful login deletes prior failures and appends a success row
    - Rows older than the retention window (30 days) are purged by the sweep
    """

    __tablename__ = "login_attempts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    username: str = Field(max_length=100)
    client_address: str = Field(max_length=64)
    success: bool = Field(default=False)
    failure_reason: Optional[str] = Field(default=None, max_length=32)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_login_attempt_username_created", "username", "created_at"),
        Index("idx_login_attempt_address_created", "client_address", "created_at"),
    )
