"""
Update User Use Case

Administrative change of a principal's role, branch or password.
"""

import logging
from uuid import UUID

from kitchen_iam.app.services.credentials import hash_password
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.auth.dtos import UserSummary
from kitchen_iam.domain.entities import AuditEvent
from kitchen_iam.libs.result import Error, Result, Return
from .dtos import UpdateUserCommand

logger = logging.getLogger(__name__)


class UpdateUserUseCase:
    """
    Use case for updating a principal.

    Business Rules:
    - Only role, branch_id and password may change
    - The resulting role/branch_id pair must satisfy the branch binding
    - A password change deletes every session of the user
    - Role or branch changes reach existing access tokens only on refresh
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, command: UpdateUserCommand, requested_by: UUID
    ) -> Result[UserSummary]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            changed = command.model_fields_set
            if "role" in changed and command.role is not None:
                user.role = command.role
            if "branch_id" in changed:
                user.branch_id = command.branch_id

            binding_error = user.branch_binding_error()
            if binding_error:
                return Return.err(Error("INVALID_BRANCH_BINDING", binding_error))

            revoked = 0
            if command.password:
                user.password_hash = hash_password(command.password)
                revoked = await self.uow.sessions.delete_all_by_user_id(user.id)

            await self.uow.users.update(user)

            audit = AuditEvent(
                user_id=requested_by,
                action="user_update",
                event_metadata={
                    "target_user_id": str(user.id),
                    "fields": sorted(changed),
                    "revoked_sessions": revoked,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"User {user.id} updated by {requested_by}: {sorted(changed)}")
            return Return.ok(UserSummary.from_user(user))
