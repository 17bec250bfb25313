"""
User Management DTOs

Commands and responses for principal administration.
"""

from typing import Optional

from pydantic import BaseModel, Field

from kitchen_iam.domain.entities import Role


class CreateUserCommand(BaseModel):
    """Create user command (validated business intent)"""

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    role: Role = Role.BRANCH_ADMIN
    branch_id: Optional[str] = Field(default=None, max_length=64)


class UpdateUserCommand(BaseModel):
    """
    Update user command

    Only fields explicitly present are applied, so branch_id can be cleared
    by sending null.
    """

    role: Optional[Role] = None
    branch_id: Optional[str] = Field(default=None, max_length=64)
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)


class RevokeSessionsResponse(BaseModel):
    """Response for session revocation"""

    revoked_count: int
    target_user_id: str
