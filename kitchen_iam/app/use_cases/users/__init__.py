"""
User Management Use Cases

All user-related business logic.
"""

from .create_user_use_case import CreateUserUseCase
from .update_user_use_case import UpdateUserUseCase
from .revoke_sessions_use_case import RevokeSessionsUseCase
from .dtos import CreateUserCommand, RevokeSessionsResponse, UpdateUserCommand

__all__ = [
    "CreateUserUseCase",
    "UpdateUserUseCase",
    "RevokeSessionsUseCase",
    "CreateUserCommand",
    "UpdateUserCommand",
    "RevokeSessionsResponse",
]
