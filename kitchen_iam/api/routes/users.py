from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from kitchen_iam.api.error import ClientError, ServerError
from kitchen_iam.api.utils.csrf import require_csrf
from kitchen_iam.api.utils.permissions import require_permission
from kitchen_iam.api.utils.rate_limit import rate_limit
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.auth import AuthenticatedPrincipal, UserSummary
from kitchen_iam.app.use_cases.users import (
    CreateUserCommand,
    CreateUserUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
)
from kitchen_iam.depends import get_unit_of_work
from kitchen_iam.domain.entities import Action, Resource, Role

router = APIRouter(prefix="/users", tags=["User"])


class CreateUserRequest(BaseModel):
    """Create user HTTP request payload"""

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    role: Role = Field(default=Role.BRANCH_ADMIN)
    branch_id: Optional[str] = Field(default=None, max_length=64)


class UpdateUserRequest(BaseModel):
    """Update user HTTP request payload; omitted fields are left alone"""

    role: Optional[Role] = None
    branch_id: Optional[str] = Field(default=None, max_length=64)
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)


def _raise_for(error):
    if error.code == "USERNAME_ALREADY_EXISTS":
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    elif error.code == "USER_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    elif error.code == "INVALID_BRANCH_BINDING":
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    raise ServerError(error)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserSummary,
    dependencies=[Depends(rate_limit("api_write")), Depends(require_csrf)],
)
async def create_user(
    request: CreateUserRequest,
    principal: AuthenticatedPrincipal = Depends(require_permission(Resource.users, Action.create)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create User

    Raises:
        - 400 Bad Request: INVALID_BRANCH_BINDING
        - 401 Unauthorized: LOGIN_REQUIRED
        - 403 Forbidden: missing users:create
        - 409 Conflict: USERNAME_ALREADY_EXISTS
    """
    command = CreateUserCommand(**request.model_dump())

    use_case = CreateUserUseCase(uow)
    result = await use_case.execute(command, requested_by=principal.id)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.put(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=UserSummary,
    dependencies=[Depends(rate_limit("api_write")), Depends(require_csrf)],
)
async def update_user(
    user_id: UUID,
    request: UpdateUserRequest,
    principal: AuthenticatedPrincipal = Depends(require_permission(Resource.users, Action.update)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update User

    Changes role, branch or password. A password change signs the user out
    everywhere.

    Raises:
        - 400 Bad Request: INVALID_BRANCH_BINDING
        - 401 Unauthorized: LOGIN_REQUIRED
        - 403 Forbidden: missing users:update
        - 404 Not Found: USER_NOT_FOUND
    """
    command = UpdateUserCommand(**request.model_dump(exclude_unset=True))

    use_case = UpdateUserUseCase(uow)
    result = await use_case.execute(user_id, command, requested_by=principal.id)

    if result.is_err():
        _raise_for(result.error)

    return result.value
