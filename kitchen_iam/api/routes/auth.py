import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field

from kitchen_iam.api.error import SESSION_ERROR_CODES, ClientError, ServerError, login_required
from kitchen_iam.api.utils.cookies import (
    REFRESH_TOKEN_COOKIE,
    clear_auth_cookies,
    set_auth_cookies,
    set_csrf_cookie,
)
from kitchen_iam.api.utils.csrf import issue_csrf_token, require_csrf
from kitchen_iam.api.utils.jwt import verify_access_token
from kitchen_iam.api.utils.rate_limit import client_address, rate_limit
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.auth import (
    AuthenticatedPrincipal,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    UserSummary,
)
from kitchen_iam.depends import get_access_token, get_current_principal, get_unit_of_work
from kitchen_iam.libs.result import Error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class CsrfTokenResponse(BaseModel):
    csrf_token: str


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    username: str = Field(..., min_length=1, max_length=100, description="Login name")
    password: str = Field(..., min_length=1, max_length=128, description="User password")


class AuthSessionResponse(BaseModel):
    """Body returned with freshly set auth cookies"""

    user: UserSummary
    session_id: str


class RefreshResponse(BaseModel):
    session_id: str


class MessageResponse(BaseModel):
    message: str


@router.get("/csrf", status_code=status.HTTP_200_OK, response_model=CsrfTokenResponse)
async def csrf_token(response: Response):
    """
    Issue a CSRF token

    Sets the csrf-token cookie; the client echoes the returned value in the
    X-CSRF-Token header on every state-changing request.
    """
    token = issue_csrf_token()
    set_csrf_cookie(response, token)
    return CsrfTokenResponse(csrf_token=token)


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=AuthSessionResponse,
    dependencies=[Depends(rate_limit("login", by_user=False)), Depends(require_csrf)],
)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    User Login

    Verifies credentials, creates a session and sets the access-token and
    refresh-token cookies.

    Raises:
        - 401 Unauthorized: AUTHENTICATION_FAILED (bad credentials or locked out)
        - 403 Forbidden: CSRF check failed
        - 429 Too Many Requests: RATE_LIMITED
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow)
    result = await use_case.execute(body.username, body.password, client_address(request))

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(
                Error("AUTHENTICATION_FAILED", "Invalid username or password"),
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        elif error.code == "ACCOUNT_LOCKED":
            raise ClientError(
                Error(
                    "AUTHENTICATION_FAILED",
                    "Too many failed attempts. Please try again later",
                ),
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        raise ServerError(error)

    login_response = result.value
    set_auth_cookies(response, login_response.access_token, login_response.refresh_token)
    return AuthSessionResponse(user=login_response.user, session_id=login_response.session_id)


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=RefreshResponse,
    dependencies=[Depends(rate_limit("refresh", by_user=False)), Depends(require_csrf)],
)
async def refresh(
    request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Refresh Tokens

    Rotates the refresh-token cookie and issues a new access token. A
    refresh token works exactly once; replaying it ends the session.

    Raises:
        - 401 Unauthorized: LOGIN_REQUIRED
        - 403 Forbidden: CSRF check failed
        - 429 Too Many Requests: RATE_LIMITED
        - 500 Internal Server Error: Server error
    """
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token:
        raise login_required()

    use_case = RefreshTokenUseCase(uow)
    result = await use_case.execute(refresh_token)

    if result.is_err():
        error = result.error
        if error.code in SESSION_ERROR_CODES:
            raise login_required()
        raise ServerError(error)

    refreshed = result.value
    set_auth_cookies(response, refreshed.access_token, refreshed.refresh_token)
    return RefreshResponse(session_id=refreshed.session_id)


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(require_csrf)],
)
async def logout(
    response: Response,
    access_token: Optional[str] = Depends(get_access_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Invalidates the current session when the access token is valid and
    always clears the auth cookies.
    """
    claims = verify_access_token(access_token) if access_token else None
    if claims is not None:
        result = await LogoutUseCase(uow).execute(claims.session_id, claims.principal_id)
        if result.is_err():
            raise ServerError(result.error)

    clear_auth_cookies(response)
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=AuthenticatedPrincipal,
    dependencies=[Depends(rate_limit("api_read"))],
)
async def me(principal: AuthenticatedPrincipal = Depends(get_current_principal)):
    """Current principal"""
    return principal
