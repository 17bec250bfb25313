"""
Admin API Key Authentication

Validates admin API keys for maintenance endpoints.
"""

import hmac

from fastapi import Header, status

from kitchen_iam.api.error import ClientError
from kitchen_iam.config import ApplicationConfig
from kitchen_iam.libs.result import Error


async def verify_admin_api_key(x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Service-to-service auth for schedulers and operators, separate from
    user tokens.

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    valid_admin_key = ApplicationConfig.ADMIN_API_KEY or ""

    if not valid_admin_key or not hmac.compare_digest(
        x_admin_api_key.encode("utf-8"), valid_admin_key.encode("utf-8")
    ):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
