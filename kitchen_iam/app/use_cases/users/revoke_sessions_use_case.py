"""
Revoke Sessions Use Case

Handles session revocation for security and session management.
"""

import logging
from uuid import UUID

from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.domain.entities import Action, AuditEvent, Resource
from kitchen_iam.domain.permissions import PrincipalLike, authorize
from kitchen_iam.libs.result import Error, Result, Return
from .dtos import RevokeSessionsResponse

logger = logging.getLogger(__name__)


class RevokeSessionsUseCase:
    """
    Use case for revoking user sessions.

    Business Rules:
    - Users can revoke their own sessions
    - Principals with users:admin can revoke anyone's sessions
    - Revocation is audit-logged
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def revoke_all_sessions(
        self, target_user_id: UUID, requester: PrincipalLike
    ) -> Result[RevokeSessionsResponse]:
        """
        Revoke all sessions for a user.

        Args:
            target_user_id: User whose sessions will be revoked
            requester: Authenticated principal asking for it

        Returns:
            Result with count of revoked sessions, or Error
        """
        async with self.uow:
            is_self = target_user_id == requester.id
            if not is_self and not authorize(requester, Resource.users, Action.admin):
                return Return.err(
                    Error("FORBIDDEN", "Only admins can revoke other users' sessions")
                )

            target_user = await self.uow.users.get_by_id(target_user_id)
            if not target_user:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            count = await self.uow.sessions.delete_all_by_user_id(target_user_id)

            audit = AuditEvent(
                user_id=requester.id,
                action="revoke_all_sessions",
                event_metadata={
                    "target_user_id": str(target_user_id),
                    "revoked_count": count,
                    "is_self": is_self,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"Revoked {count} sessions of user {target_user_id} (by {requester.id})")
            return Return.ok(
                RevokeSessionsResponse(revoked_count=count, target_user_id=str(target_user_id))
            )
