from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from kitchen_iam.api.error import ClientError, ServerError, forbidden
from kitchen_iam.api.utils.csrf import require_csrf
from kitchen_iam.api.utils.rate_limit import rate_limit
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.auth import AuthenticatedPrincipal
from kitchen_iam.app.use_cases.users import RevokeSessionsUseCase
from kitchen_iam.depends import get_current_principal, get_unit_of_work

router = APIRouter(prefix="/sessions", tags=["Sessions"])


class RevokeAllSessionsRequest(BaseModel):
    """Request to revoke all sessions for a user"""

    user_id: Optional[UUID] = Field(
        default=None, description="User whose sessions will be revoked; defaults to the caller"
    )


class RevokeSessionResponse(BaseModel):
    """Response for session revocation operations"""

    message: str
    revoked_count: int


@router.post(
    "/revoke-all",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionResponse,
    dependencies=[Depends(rate_limit("api_delete")), Depends(require_csrf)],
)
async def revoke_all_sessions(
    request: RevokeAllSessionsRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke All Sessions

    Signs a user out everywhere. Useful for:
    - Security incidents (account compromise)
    - Admin-initiated logout

    Authorization:
    - Users can revoke their own sessions
    - SUPER_ADMIN can revoke any user's sessions

    Raises:
        - 403 Forbidden: Insufficient permissions
        - 404 Not Found: User not found
        - 500 Internal Server Error: Server error
    """
    target_user_id = request.user_id or principal.id

    use_case = RevokeSessionsUseCase(uow)
    result = await use_case.revoke_all_sessions(target_user_id, principal)

    if result.is_err():
        error = result.error
        if error.code == "FORBIDDEN":
            raise forbidden()
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return RevokeSessionResponse(
        message=f"Revoked {result.value.revoked_count} session(s)",
        revoked_count=result.value.revoked_count,
    )
