"""
Identity Core Domain Enums

All enumeration types used across domain entities and the permission table.
"""

from enum import Enum


class Role(str, Enum):
    """Principal role"""

    SUPER_ADMIN = "SUPER_ADMIN"
    BRANCH_ADMIN = "BRANCH_ADMIN"


class Resource(str, Enum):
    """Protected business resources"""

    waste_logs = "waste_logs"
    inventory = "inventory"
    branches = "branches"
    users = "users"
    reviews = "reviews"
    analytics = "analytics"
    exports = "exports"


class Action(str, Enum):
    """Actions on a resource; admin subsumes every other action"""

    create = "create"
    read = "read"
    update = "update"
    delete = "delete"
    approve = "approve"
    export = "export"
    admin = "admin"


class Scope(str, Enum):
    """Breadth of resources a permission covers relative to the principal"""

    own = "own"
    branch = "branch"
    global_ = "global"


class SessionState(str, Enum):
    """Lifecycle state of a persisted session (deleted rows are invalidated)"""

    active = "active"
    expired = "expired"


class RotationOutcome(str, Enum):
    """Result of the refresh token compare-and-swap"""

    rotated = "rotated"
    reuse_detected = "reuse_detected"
    not_found = "not_found"


class LoginFailureReason(str, Enum):
    """Why a login attempt was recorded as failed"""

    user_not_found = "USER_NOT_FOUND"
    invalid_password = "INVALID_PASSWORD"
