"""
Rate limit dependency for routes.
"""

from typing import Callable, Optional

from fastapi import Depends, Request, status

from kitchen_iam.api.error import ClientError, ServerError
from kitchen_iam.api.utils.jwt import verify_access_token
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.rate_limit import (
    CheckRateLimitUseCase,
    RateLimitDecision,
    get_rate_limit_config,
)
from kitchen_iam.config import ApplicationConfig
from kitchen_iam.depends import get_access_token, get_unit_of_work_factory
from kitchen_iam.domain.base import to_epoch_seconds, utcnow
from kitchen_iam.libs.result import Error


def client_address(request: Request) -> str:
    """First address from the trusted proxy headers, else "unknown" """
    for header in ApplicationConfig.TRUSTED_PROXY_HEADERS:
        value = request.headers.get(header)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first
    return "unknown"


def rate_limit_identity(request: Request, access_token: Optional[str]) -> str:
    """
    user:<id> when the request carries a valid access token, else ip:<addr>.

    Only the signature is checked here; session liveness is left to the
    authentication dependency.
    """
    claims = verify_access_token(access_token) if access_token else None
    if claims is not None:
        return f"user:{claims.principal_id}"
    return f"ip:{client_address(request)}"


def _limit_headers(decision: RateLimitDecision) -> dict:
    return {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(to_epoch_seconds(decision.reset_time)),
    }


def rate_limit(endpoint_class: str, by_user: bool = True):
    """
    Dependency factory counting the request against endpoint_class.

    With by_user=False the request is always counted per client address and
    at the class's normal limit, whatever token it carries. Login and
    refresh use this so a signed-in client shares its address's counter.

    Raises:
        ClientError: 429 RATE_LIMITED with Retry-After and X-RateLimit-*
            headers when the window is full
    """

    async def dependency(
        request: Request,
        access_token: Optional[str] = Depends(get_access_token),
        uow_factory: Callable[[], UnitOfWork] = Depends(get_unit_of_work_factory),
    ) -> RateLimitDecision:
        if by_user:
            claims = verify_access_token(access_token) if access_token else None
            identity = rate_limit_identity(request, access_token)
            config = get_rate_limit_config(endpoint_class, claims.role if claims else None)
        else:
            identity = f"ip:{client_address(request)}"
            config = get_rate_limit_config(endpoint_class)

        result = await CheckRateLimitUseCase(uow_factory).execute(identity, config)
        if result.is_err():
            raise ServerError(result.error)

        decision = result.value
        if not decision.allowed:
            retry_after = max(1, int((decision.reset_time - utcnow()).total_seconds()))
            headers = _limit_headers(decision)
            headers["Retry-After"] = str(retry_after)
            raise ClientError(
                Error("RATE_LIMITED", "Too many requests, please try again later"),
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers=headers,
                details={
                    "remaining": decision.remaining,
                    "reset_time": decision.reset_time.isoformat() + "Z",
                    "retry_after": retry_after,
                },
            )
        return decision

    return dependency
