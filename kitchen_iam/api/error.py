from typing import Any, Dict, Optional

from fastapi import status

from kitchen_iam.libs.result import Error

# Fixed body for every authorization refusal (CSRF or permission)
FORBIDDEN_ERROR = Error("FORBIDDEN", "Request denied")
LOGIN_REQUIRED_ERROR = Error("LOGIN_REQUIRED", "Please log in again")

SESSION_ERROR_CODES = ("INVALID_TOKEN", "SESSION_EXPIRED", "SESSION_NOT_FOUND", "REUSE_DETECTED")


class ClientError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        self.details = details or {}
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def forbidden() -> ClientError:
    return ClientError(FORBIDDEN_ERROR, status_code=status.HTTP_403_FORBIDDEN)


def login_required() -> ClientError:
    return ClientError(LOGIN_REQUIRED_ERROR, status_code=status.HTTP_401_UNAUTHORIZED)
