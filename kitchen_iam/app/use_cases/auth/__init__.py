"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .authenticate_request_use_case import AuthenticateRequestUseCase
from .logout_use_case import LogoutUseCase
from .session_liveness import ensure_session_live
from .dtos import (
    AuthenticatedPrincipal,
    LoginResponse,
    LogoutResponse,
    RefreshTokenResponse,
    UserSummary,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "RefreshTokenUseCase",
    "AuthenticateRequestUseCase",
    "LogoutUseCase",
    "ensure_session_live",
    # DTOs - Responses
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "AuthenticatedPrincipal",
    "UserSummary",
]
