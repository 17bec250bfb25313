"""
Auth cookie helpers.

All cookies are HttpOnly and SameSite=lax, and Secure in production. The
refresh cookie is scoped to the refresh endpoint so it is not sent anywhere
else.
"""

from fastapi import Response

from kitchen_iam.api.utils.csrf import CSRF_COOKIE
from kitchen_iam.config import ApplicationConfig, is_production
from kitchen_iam.depends import ACCESS_TOKEN_COOKIE

REFRESH_TOKEN_COOKIE = "refresh-token"
REFRESH_COOKIE_PATH = "/auth/refresh"


def _set(response: Response, key: str, value: str, max_age: int, path: str = "/") -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        path=path,
        httponly=True,
        secure=is_production(),
        samesite="lax",
    )


def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    _set(response, ACCESS_TOKEN_COOKIE, access_token, ApplicationConfig.ACCESS_TOKEN_TTL_SECONDS)
    _set(
        response,
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        ApplicationConfig.REFRESH_TOKEN_TTL_SECONDS,
        path=REFRESH_COOKIE_PATH,
    )


def clear_auth_cookies(response: Response) -> None:
    for key, path in ((ACCESS_TOKEN_COOKIE, "/"), (REFRESH_TOKEN_COOKIE, REFRESH_COOKIE_PATH)):
        response.delete_cookie(
            key=key, path=path, httponly=True, secure=is_production(), samesite="lax"
        )


def set_csrf_cookie(response: Response, token: str) -> None:
    _set(response, CSRF_COOKIE, token, ApplicationConfig.SESSION_TTL_SECONDS)
