"""
Create User Use Case

Administrative creation of a principal.
"""

import logging
from uuid import UUID

from kitchen_iam.app.services.credentials import hash_password
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.auth.dtos import UserSummary
from kitchen_iam.domain.entities import AuditEvent, User
from kitchen_iam.libs.result import Error, Result, Return
from .dtos import CreateUserCommand

logger = logging.getLogger(__name__)


class CreateUserUseCase:
    """
    Use case for creating a principal.

    Business Rules:
    - Username must be unique
    - BRANCH_ADMIN requires a branch_id; SUPER_ADMIN must have none
    - Password is stored as a bcrypt hash
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: CreateUserCommand, requested_by: UUID) -> Result[UserSummary]:
        async with self.uow:
            user = User(
                username=command.username,
                password_hash="",
                role=command.role,
                branch_id=command.branch_id,
            )
            binding_error = user.branch_binding_error()
            if binding_error:
                return Return.err(Error("INVALID_BRANCH_BINDING", binding_error))

            existing = await self.uow.users.get_by_username(command.username)
            if existing is not None:
                return Return.err(
                    Error("USERNAME_ALREADY_EXISTS", "Username is already taken")
                )

            user.password_hash = hash_password(command.password)
            await self.uow.users.create(user)

            audit = AuditEvent(
                user_id=requested_by,
                action="user_create",
                event_metadata={
                    "target_user_id": str(user.id),
                    "role": command.role.value,
                    "branch_id": command.branch_id,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"User {user.id} ({user.username}) created by {requested_by}")
            return Return.ok(UserSummary.from_user(user))
