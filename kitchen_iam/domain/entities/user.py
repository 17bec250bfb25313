"""
User Entity

The stored principal: a person who can authenticate against the service.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from kitchen_iam.domain.base import utcnow
from .enums import Role


class InvalidBranchBinding(ValueError):
    """Raised when a write would break the role/branch_id invariant"""


class User(SQLModel, table=True):
    """
    User entity - the authenticated principal.

    Business Rules:
    - Username must be unique
    - Password stored as bcrypt hash (cost factor 12)
    - branch_id is required for BRANCH_ADMIN and must be null for SUPER_ADMIN
    - Only role, branch_id and password_hash change after creation,
      and only through an administrative update
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=100)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    role: Role = Field(default=Role.BRANCH_ADMIN)
    branch_id: Optional[str] = Field(default=None, index=True, max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_role_branch", "role", "branch_id"),)

    def branch_binding_error(self) -> Optional[str]:
        """Return a message when role and branch_id disagree, else None."""
        if self.role == Role.BRANCH_ADMIN and not self.branch_id:
            return "BRANCH_ADMIN users must be assigned to a branch"
        if self.role != Role.BRANCH_ADMIN and self.branch_id is not None:
            return f"{Role(self.role).value} users cannot be assigned to a branch"
        return None

    def check_branch_binding(self) -> None:
        message = self.branch_binding_error()
        if message is not None:
            raise InvalidBranchBinding(message)
