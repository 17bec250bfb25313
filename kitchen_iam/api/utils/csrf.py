"""
CSRF Protection (double-submit cookie)

The token lives in a cookie the browser sends automatically and must be
echoed in the X-CSRF-Token header, which a cross-site page cannot set.
"""

import hmac
import logging
import secrets
from typing import Optional

from fastapi import Request

from kitchen_iam.api.error import forbidden

logger = logging.getLogger(__name__)

CSRF_COOKIE = "csrf-token"
CSRF_HEADER = "X-CSRF-Token"
SAFE_METHODS = ("GET", "HEAD", "OPTIONS", "TRACE")


def issue_csrf_token() -> str:
    """32 random bytes, hex encoded"""
    return secrets.token_hex(32)


def verify_csrf_pair(cookie_value: Optional[str], header_value: Optional[str]) -> bool:
    if not cookie_value or not header_value:
        return False
    return hmac.compare_digest(cookie_value.encode("utf-8"), header_value.encode("utf-8"))


async def require_csrf(request: Request) -> None:
    """
    Dependency enforcing the double-submit check on state-changing methods.

    Raises:
        ClientError: fixed 403 FORBIDDEN on a missing or mismatched token
    """
    if request.method in SAFE_METHODS:
        return

    if not verify_csrf_pair(request.cookies.get(CSRF_COOKIE), request.headers.get(CSRF_HEADER)):
        logger.warning(f"CSRF validation failed: {request.method} {request.url.path}")
        raise forbidden()
