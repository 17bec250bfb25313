"""
RateLimitCounter Entity

Fixed-window request counter shared by every service instance.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel, UniqueConstraint

from kitchen_iam.domain.base import utcnow


class RateLimitCounter(SQLModel, table=True):
    """
    RateLimitCounter entity - one row per (identity, endpoint_class, window).

    Business Rules:
    - Created on the first request in a window, incremented atomically after
    - Never incremented past the configured limit
    - Expires at the end of its window and is removed opportunistically
    """

    __tablename__ = "rate_limit_counters"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    identity: str = Field(max_length=255)
    endpoint_class: str = Field(max_length=64)
    window_start: datetime = Field(sa_column=Column(DateTime, nullable=False))
    request_count: int = Field(default=0)
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint(
            "identity", "endpoint_class", "window_start", name="uq_rate_limit_window"
        ),
        Index("idx_rate_limit_expires_at", "expires_at"),
    )
