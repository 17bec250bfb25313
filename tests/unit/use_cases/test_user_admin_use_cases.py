from uuid import uuid4

import pytest

from kitchen_iam.app.services.credentials import verify_password
from kitchen_iam.app.use_cases.auth import AuthenticatedPrincipal
from kitchen_iam.app.use_cases.users import (
    CreateUserCommand,
    CreateUserUseCase,
    RevokeSessionsUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
)
from kitchen_iam.domain.entities import Role, User


def _branch_admin():
    return User(
        id=uuid4(),
        username="downtown-chef",
        password_hash="old-hash",
        role=Role.BRANCH_ADMIN,
        branch_id="branch-downtown",
    )


def _principal(role, branch_id=None):
    return AuthenticatedPrincipal(
        id=uuid4(), username="someone", role=role, branch_id=branch_id, session_id=uuid4()
    )


@pytest.mark.asyncio
async def test_create_user_hashes_password(mock_uow):
    command = CreateUserCommand(
        username="riverside-chef",
        password="Riverside123!",
        role=Role.BRANCH_ADMIN,
        branch_id="branch-riverside",
    )

    result = await CreateUserUseCase(mock_uow).execute(command, requested_by=uuid4())

    assert result.is_ok()
    created = mock_uow.users.create.call_args.args[0]
    assert created.password_hash != "Riverside123!"
    assert verify_password("Riverside123!", created.password_hash)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_create_user_rejects_taken_username(mock_uow):
    mock_uow.users.get_by_username.return_value = _branch_admin()
    command = CreateUserCommand(
        username="downtown-chef", password="Whatever123!", branch_id="branch-downtown"
    )

    result = await CreateUserUseCase(mock_uow).execute(command, requested_by=uuid4())

    assert result.error.code == "USERNAME_ALREADY_EXISTS"
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_create_branch_admin_needs_branch(mock_uow):
    command = CreateUserCommand(username="floating", password="Whatever123!")

    result = await CreateUserUseCase(mock_uow).execute(command, requested_by=uuid4())

    assert result.error.code == "INVALID_BRANCH_BINDING"
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_password_change_deletes_sessions(mock_uow):
    user = _branch_admin()
    mock_uow.users.get_by_id.return_value = user
    mock_uow.sessions.delete_all_by_user_id.return_value = 3

    result = await UpdateUserUseCase(mock_uow).execute(
        user.id, UpdateUserCommand(password="BrandNewPass123!"), requested_by=uuid4()
    )

    assert result.is_ok()
    assert verify_password("BrandNewPass123!", user.password_hash)
    mock_uow.sessions.delete_all_by_user_id.assert_called_once_with(user.id)
    audit = mock_uow.audit_events.create.call_args.args[0]
    assert audit.event_metadata["revoked_sessions"] == 3


@pytest.mark.asyncio
async def test_role_change_keeps_sessions(mock_uow):
    user = _branch_admin()
    mock_uow.users.get_by_id.return_value = user

    result = await UpdateUserUseCase(mock_uow).execute(
        user.id, UpdateUserCommand(branch_id="branch-uptown"), requested_by=uuid4()
    )

    assert result.value.branch_id == "branch-uptown"
    mock_uow.sessions.delete_all_by_user_id.assert_not_called()


@pytest.mark.asyncio
async def test_promotion_must_clear_branch(mock_uow):
    user = _branch_admin()
    mock_uow.users.get_by_id.return_value = user

    result = await UpdateUserUseCase(mock_uow).execute(
        user.id, UpdateUserCommand(role=Role.SUPER_ADMIN), requested_by=uuid4()
    )

    assert result.error.code == "INVALID_BRANCH_BINDING"
    mock_uow.users.update.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_revoke_own_sessions(mock_uow):
    requester = _principal(Role.BRANCH_ADMIN, "branch-downtown")
    mock_uow.users.get_by_id.return_value = _branch_admin()
    mock_uow.sessions.delete_all_by_user_id.return_value = 2

    result = await RevokeSessionsUseCase(mock_uow).revoke_all_sessions(requester.id, requester)

    assert result.value.revoked_count == 2
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_branch_admin_cannot_revoke_others(mock_uow):
    requester = _principal(Role.BRANCH_ADMIN, "branch-downtown")

    result = await RevokeSessionsUseCase(mock_uow).revoke_all_sessions(uuid4(), requester)

    assert result.error.code == "FORBIDDEN"
    mock_uow.sessions.delete_all_by_user_id.assert_not_called()


@pytest.mark.asyncio
async def test_super_admin_revokes_others(mock_uow):
    requester = _principal(Role.SUPER_ADMIN)
    target = _branch_admin()
    mock_uow.users.get_by_id.return_value = target

    result = await RevokeSessionsUseCase(mock_uow).revoke_all_sessions(target.id, requester)

    assert result.is_ok()
    mock_uow.sessions.delete_all_by_user_id.assert_called_once_with(target.id)
