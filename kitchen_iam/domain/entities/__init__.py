"""
Identity Core Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    Role,
    Resource,
    Action,
    Scope,
    SessionState,
    RotationOutcome,
    LoginFailureReason,
)

# Export all entities
from .user import InvalidBranchBinding, User
from .session import Session
from .login_attempt import LoginAttempt
from .rate_limit_counter import RateLimitCounter
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "Role",
    "Resource",
    "Action",
    "Scope",
    "SessionState",
    "RotationOutcome",
    "LoginFailureReason",
    # Entities
    "User",
    "InvalidBranchBinding",
    "Session",
    "LoginAttempt",
    "RateLimitCounter",
    "AuditEvent",
]
