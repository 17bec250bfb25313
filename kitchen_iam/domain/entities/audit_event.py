"""
AuditEvent Entity

Immutable log of authentication and authorization events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from kitchen_iam.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of auth events.

    Business Rules:
    - Immutable (never updated or deleted by this service)
    - user_id nullable for anonymous events (failed login of unknown user)
    - Metadata stores additional context (client address, session id, etc.)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "login", "token_refresh"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_audit_created_at", "created_at"),)
