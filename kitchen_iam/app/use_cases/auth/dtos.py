"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for the auth domain.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from kitchen_iam.domain.entities import Role, User


class UserSummary(BaseModel):
    """Public view of a principal"""

    id: str
    username: str
    role: Role
    branch_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=str(user.id),
            username=user.username,
            role=Role(user.role),
            branch_id=user.branch_id,
        )


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    refresh_token: str
    session_id: str
    user: UserSummary


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    session_id: str


class AuthenticatedPrincipal(BaseModel):
    """Principal attached to a request after access token validation"""

    id: UUID
    username: str
    role: Role
    branch_id: Optional[str] = None
    session_id: UUID


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    session_id: str
    invalidated: bool
